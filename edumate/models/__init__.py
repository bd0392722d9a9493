from edumate.models.user import User, UserRole
from edumate.models.user_coins import UserCoins
from edumate.models.payment_transaction import PaymentTransaction, PaymentStatus
from edumate.models.curriculum import Curriculum
from edumate.models.curriculum_strand import Subject, Strand, SubStrand, ContentStandard, Indicator
from edumate.models.quiz import Quiz
from edumate.models.textbook import Textbook
from edumate.models.lesson import Lesson
from edumate.models.lesson_note import LessonNote
from edumate.models.past_question import PastQuestionPaper

__all__ = [
    "User",
    "UserRole",
    "UserCoins",
    "PaymentTransaction",
    "PaymentStatus",
    "Curriculum",
    "Subject",
    "Strand",
    "SubStrand",
    "ContentStandard",
    "Indicator",
    "Quiz",
    "Textbook",
    "Lesson",
    "LessonNote",
    "PastQuestionPaper",
]
