from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from i18n_backend.app.core.database import Base


class Locale(Base):
    __tablename__ = "locales"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    translations: Mapped[list[Translation]] = relationship(
        back_populates="locale", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Locale {self.code}>"


class Translation(Base):
    """A translated value addressed by its derived key.

    ``key`` is ``<locale-code>:<digest>`` (see ``services.key_codec``);
    ``raw_key`` keeps the readable scope-qualified key. A NULL ``value``
    marks a key known to be untranslated in this locale.
    """

    __tablename__ = "translations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    locale_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("locales.id", ondelete="CASCADE"), nullable=False
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    raw_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    locale: Mapped[Locale] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("locale_id", "key", name="uq_translations_locale_key"),
        Index("ix_translations_raw_key", "raw_key"),
    )
