"""Automatic per-user log of /api/predict calls."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from symptom_intake.db.session import Base
from symptom_intake.utils.encryption import EncryptedText


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchHistory(Base):
    __tablename__ = "search_history"
    __table_args__ = (
        Index("ix_search_history_user_ts", "user_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    symptoms: Mapped[str] = mapped_column(EncryptedText, nullable=False)
    disease: Mapped[str] = mapped_column(String(255), nullable=False)
    severity: Mapped[str] = mapped_column(String(64), nullable=False)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    user = relationship("User", back_populates="search_history")
