"""
Palate — Account model (the tenant).
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from palate.database import Base, new_id, utcnow

DEFAULT_BRAND_COLOR = "#F59E0B"


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[str | None] = mapped_column(
        String, unique=True, index=True, nullable=True
    )
    first_name: Mapped[str | None] = mapped_column(String, nullable=True)
    last_name: Mapped[str | None] = mapped_column(String, nullable=True)
    profile_image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    company_name: Mapped[str | None] = mapped_column(String, nullable=True)
    company_logo: Mapped[str | None] = mapped_column(String, nullable=True)
    brand_color: Mapped[str] = mapped_column(
        String(7),
        default=DEFAULT_BRAND_COLOR,
        server_default=DEFAULT_BRAND_COLOR,
        nullable=False,
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
    # Children are removed by the database (ON DELETE CASCADE).
    questionnaires: Mapped[list["Questionnaire"]] = relationship(
        "Questionnaire", back_populates="account", passive_deletes=True
    )
    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="account", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Account {self.id} company={self.company_name!r}>"
