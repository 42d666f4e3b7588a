"""
Palate — Questionnaire models (questionnaires, their questions and the
customer responses submitted against them).
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from palate.database import Base, new_id, utcnow

QUESTION_TYPES = ("multiple-choice", "rating", "text")


class Questionnaire(Base):
    __tablename__ = "questionnaires"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    account_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    # ── Relationships ──────────────────────────────────────────────
    account: Mapped["Account"] = relationship("Account", back_populates="questionnaires")
    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="questionnaire", passive_deletes=True
    )
    responses: Mapped[list["Response"]] = relationship(
        "Response", back_populates="questionnaire", passive_deletes=True
    )

    def __repr__(self) -> str:
        return (
            f"<Questionnaire {self.id} account={self.account_id} "
            f"published={self.is_published}>"
        )


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    questionnaire_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(
        String, nullable=False, comment="multiple-choice / rating / text"
    )
    options: Mapped[list | None] = mapped_column(
        JSONB, nullable=True, comment="Ordered option strings (multiple-choice only)"
    )
    order: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # ── Relationships ──────────────────────────────────────────────
    questionnaire: Mapped["Questionnaire"] = relationship(
        "Questionnaire", back_populates="questions"
    )

    def __repr__(self) -> str:
        return f"<Question #{self.order} type={self.question_type!r}>"


class Response(Base):
    """One customer's submitted answer set. Never updated after insert."""

    __tablename__ = "responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    questionnaire_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("questionnaires.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    customer_email: Mapped[str | None] = mapped_column(String, nullable=True)
    answers: Mapped[dict] = mapped_column(
        JSONB, nullable=False, comment="Question id -> answer value"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # ── Relationships ──────────────────────────────────────────────
    questionnaire: Mapped["Questionnaire"] = relationship(
        "Questionnaire", back_populates="responses"
    )

    def __repr__(self) -> str:
        return f"<Response {self.id} questionnaire={self.questionnaire_id}>"
