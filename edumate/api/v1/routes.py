from fastapi import APIRouter
from edumate.api.v1.endpoints import (
    admin,
    auth,
    contact,
    curricula,
    curriculum_strands,
    lesson_notes,
    lessons,
    past_questions,
    payments,
    quizzes,
    textbooks,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(curricula.router, prefix="/curricula", tags=["curricula"])
router.include_router(curriculum_strands.subjects, prefix="/subjects", tags=["curriculum-strands"])
router.include_router(curriculum_strands.strands, prefix="/strands", tags=["curriculum-strands"])
router.include_router(curriculum_strands.sub_strands, prefix="/sub-strands", tags=["curriculum-strands"])
router.include_router(curriculum_strands.content_standards, prefix="/content-standards", tags=["curriculum-strands"])
router.include_router(curriculum_strands.indicators, prefix="/indicators", tags=["curriculum-strands"])
router.include_router(quizzes.router, prefix="/quizzes", tags=["quizzes"])
router.include_router(textbooks.router, prefix="/textbooks", tags=["textbooks"])
router.include_router(lessons.router, prefix="/lessons", tags=["lessons"])
router.include_router(lesson_notes.router, prefix="/lesson-notes", tags=["lesson-notes"])
router.include_router(past_questions.router, prefix="/past-questions", tags=["past-questions"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(contact.router, prefix="/contact", tags=["contact"])
