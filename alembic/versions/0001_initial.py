"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("role", sa.Enum("student", "teacher", "admin", name="userrole"), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("is_premium", sa.Boolean, nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role_active", "users", ["role", "is_active"], unique=False)

    op.create_table(
        "user_coins",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("coin_balance", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_user_coins_user_id", "user_coins", ["user_id"], unique=True)

    op.create_table(
        "payment_transactions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("reference", sa.String(128), nullable=False),
        sa.Column("paystack_reference", sa.String(128), nullable=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("coin_amount", sa.Integer, nullable=False),
        sa.Column("package_id", sa.String(64), nullable=False),
        sa.Column("status", sa.Enum("pending", "completed", "failed", name="paymentstatus"), nullable=False),
        sa.Column("paystack_data", sa.JSON, nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_payment_transactions_reference", "payment_transactions", ["reference"], unique=True)
    op.create_index("ix_payment_transactions_paystack_reference", "payment_transactions", ["paystack_reference"], unique=False)
    op.create_index("ix_payment_transactions_user_status", "payment_transactions", ["user_id", "status"], unique=False)
    op.create_index(
        "ix_payment_transactions_paystack_ref_user",
        "payment_transactions",
        ["paystack_reference", "user_id"],
        unique=False,
    )

    op.create_table(
        "curricula",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("level", sa.String(8), nullable=False),
        sa.Column("class_name", sa.String(64), nullable=False),
        sa.Column("subject", sa.String(128), nullable=False),
        sa.Column("course", sa.String(128), nullable=True),
        sa.Column("pdf_url", sa.String(1024), nullable=False, server_default=""),
        sa.Column("thumbnail_url", sa.String(1024), nullable=False, server_default=""),
        *_timestamps(),
    )
    op.create_index("ix_curricula_level_subject", "curricula", ["level", "subject"], unique=False)

    op.create_table(
        "quizzes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("questions", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "textbooks",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("content", sa.JSON, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "past_questions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("exam_type", sa.String(32), nullable=False),
        sa.Column("subject_name", sa.String(128), nullable=False),
        sa.Column("subject_id", sa.String(64), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("course", sa.String(128), nullable=True),
        sa.Column("level", sa.String(8), nullable=False),
        sa.Column("questions_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("coin_price", sa.Integer, nullable=False, server_default="0"),
        sa.Column("has_paper_1", sa.Boolean, nullable=False, server_default=sa.text("true")),
        sa.Column("has_paper_2", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("questions", sa.JSON, nullable=False),
        sa.Column("created_by", sa.String(64), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_past_questions_exam_subject_year",
        "past_questions",
        ["exam_type", "subject_name", "year"],
        unique=False,
    )


def downgrade():
    op.drop_index("ix_past_questions_exam_subject_year", table_name="past_questions")
    op.drop_table("past_questions")
    op.drop_table("textbooks")
    op.drop_table("quizzes")
    op.drop_index("ix_curricula_level_subject", table_name="curricula")
    op.drop_table("curricula")
    op.drop_index("ix_payment_transactions_paystack_ref_user", table_name="payment_transactions")
    op.drop_index("ix_payment_transactions_user_status", table_name="payment_transactions")
    op.drop_index("ix_payment_transactions_paystack_reference", table_name="payment_transactions")
    op.drop_index("ix_payment_transactions_reference", table_name="payment_transactions")
    op.drop_table("payment_transactions")
    op.drop_index("ix_user_coins_user_id", table_name="user_coins")
    op.drop_table("user_coins")
    op.drop_index("ix_users_role_active", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    sa.Enum(name="paymentstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
