"""curriculum strands, lessons and lesson notes

Revision ID: 0002_strands_and_lessons
Revises: 0001_initial
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0002_strands_and_lessons"
down_revision = "0001_initial"
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _placement():
    return [
        sa.Column("level", sa.String(8), nullable=False),
        sa.Column("class_name", sa.String(64), nullable=False),
        sa.Column("course", sa.String(128), nullable=True),
    ]


def upgrade():
    op.create_table(
        "subjects",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("level", sa.String(8), nullable=False),
        sa.Column("course", sa.String(128), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_subjects_level_name", "subjects", ["level", "name"], unique=False)

    op.create_table(
        "curriculum_strands",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("subject_id", sa.Integer, sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        *_placement(),
        *_timestamps(),
    )
    op.create_index("ix_curriculum_strands_subject_id", "curriculum_strands", ["subject_id"], unique=False)
    op.create_index(
        "ix_curriculum_strands_subject_class",
        "curriculum_strands",
        ["subject_id", "level", "class_name"],
        unique=False,
    )

    op.create_table(
        "curriculum_sub_strands",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "strand_id", sa.Integer, sa.ForeignKey("curriculum_strands.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("subject_id", sa.Integer, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_curriculum_sub_strands_strand_id", "curriculum_sub_strands", ["strand_id"], unique=False)
    op.create_index("ix_curriculum_sub_strands_subject_id", "curriculum_sub_strands", ["subject_id"], unique=False)

    op.create_table(
        "curriculum_content_standards",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column(
            "sub_strand_id",
            sa.Integer,
            sa.ForeignKey("curriculum_sub_strands.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("strand_id", sa.Integer, nullable=False),
        sa.Column("subject_id", sa.Integer, nullable=False),
        *_placement(),
        *_timestamps(),
    )
    for column in ("sub_strand_id", "strand_id", "subject_id"):
        op.create_index(
            f"ix_curriculum_content_standards_{column}", "curriculum_content_standards", [column], unique=False
        )

    op.create_table(
        "curriculum_indicators",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column(
            "content_standard_id",
            sa.Integer,
            sa.ForeignKey("curriculum_content_standards.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sub_strand_id", sa.Integer, nullable=False),
        sa.Column("strand_id", sa.Integer, nullable=False),
        sa.Column("subject_id", sa.Integer, nullable=False),
        *_placement(),
        *_timestamps(),
    )
    for column in ("content_standard_id", "sub_strand_id", "strand_id", "subject_id"):
        op.create_index(f"ix_curriculum_indicators_{column}", "curriculum_indicators", [column], unique=False)

    op.create_table(
        "lessons",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("content", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "lesson_notes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        *_placement(),
        sa.Column("subject", sa.String(128), nullable=False),
        sa.Column("strand", sa.String(255), nullable=False),
        sa.Column("sub_strand", sa.String(255), nullable=False),
        sa.Column("content_standard", sa.String(512), nullable=False),
        sa.Column("indicator", sa.String(512), nullable=False),
        sa.Column("subject_id", sa.Integer, nullable=True),
        sa.Column("strand_id", sa.Integer, nullable=True),
        sa.Column("indicator_id", sa.Integer, nullable=True),
        sa.Column("pdf_url", sa.String(1024), nullable=False, server_default=""),
        sa.Column("thumbnail_url", sa.String(1024), nullable=False, server_default=""),
        sa.Column("keywords", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_lesson_notes_level_class", "lesson_notes", ["level", "class_name"], unique=False)
    for column in ("subject_id", "strand_id", "indicator_id"):
        op.create_index(f"ix_lesson_notes_{column}", "lesson_notes", [column], unique=False)


def downgrade():
    for column in ("subject_id", "strand_id", "indicator_id"):
        op.drop_index(f"ix_lesson_notes_{column}", table_name="lesson_notes")
    op.drop_index("ix_lesson_notes_level_class", table_name="lesson_notes")
    op.drop_table("lesson_notes")
    op.drop_table("lessons")
    for column in ("content_standard_id", "sub_strand_id", "strand_id", "subject_id"):
        op.drop_index(f"ix_curriculum_indicators_{column}", table_name="curriculum_indicators")
    op.drop_table("curriculum_indicators")
    for column in ("sub_strand_id", "strand_id", "subject_id"):
        op.drop_index(f"ix_curriculum_content_standards_{column}", table_name="curriculum_content_standards")
    op.drop_table("curriculum_content_standards")
    op.drop_index("ix_curriculum_sub_strands_subject_id", table_name="curriculum_sub_strands")
    op.drop_index("ix_curriculum_sub_strands_strand_id", table_name="curriculum_sub_strands")
    op.drop_table("curriculum_sub_strands")
    op.drop_index("ix_curriculum_strands_subject_class", table_name="curriculum_strands")
    op.drop_index("ix_curriculum_strands_subject_id", table_name="curriculum_strands")
    op.drop_table("curriculum_strands")
    op.drop_index("ix_subjects_level_name", table_name="subjects")
    op.drop_table("subjects")
