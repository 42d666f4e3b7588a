"""Initial schema — the 5 Palate tables.

Revision ID: 001_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── 1. accounts ─────────────────────────────────────────────────
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String, unique=True, index=True, nullable=True),
        sa.Column("first_name", sa.String, nullable=True),
        sa.Column("last_name", sa.String, nullable=True),
        sa.Column("profile_image_url", sa.String, nullable=True),
        sa.Column("company_name", sa.String, nullable=True),
        sa.Column("company_logo", sa.String, nullable=True),
        sa.Column(
            "brand_color",
            sa.String(7),
            server_default="#F59E0B",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # ── 2. questionnaires ───────────────────────────────────────────
    op.create_table(
        "questionnaires",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(64),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "is_published",
            sa.Boolean,
            server_default="false",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_questionnaires_account_id", "questionnaires", ["account_id"]
    )

    # ── 3. questions ────────────────────────────────────────────────
    op.create_table(
        "questions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "questionnaire_id",
            sa.String(64),
            sa.ForeignKey("questionnaires.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_text", sa.Text, nullable=False),
        sa.Column(
            "question_type",
            sa.String,
            nullable=False,
            comment="multiple-choice / rating / text",
        ),
        sa.Column(
            "options",
            postgresql.JSONB,
            nullable=True,
            comment="Ordered option strings (multiple-choice only)",
        ),
        sa.Column("order", sa.Integer, server_default="0", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_questions_questionnaire_id", "questions", ["questionnaire_id"]
    )

    # ── 4. products ─────────────────────────────────────────────────
    op.create_table(
        "products",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(64),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.String, nullable=True),
        sa.Column(
            "tags",
            postgresql.JSONB,
            nullable=True,
            comment="Matching keywords, stored as entered",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_products_account_id", "products", ["account_id"])

    # ── 5. responses ────────────────────────────────────────────────
    op.create_table(
        "responses",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "questionnaire_id",
            sa.String(64),
            sa.ForeignKey("questionnaires.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("customer_email", sa.String, nullable=True),
        sa.Column(
            "answers",
            postgresql.JSONB,
            nullable=False,
            comment="Question id -> answer value",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_responses_questionnaire_id", "responses", ["questionnaire_id"]
    )


def downgrade() -> None:
    op.drop_table("responses")
    op.drop_table("products")
    op.drop_table("questions")
    op.drop_table("questionnaires")
    op.drop_table("accounts")
