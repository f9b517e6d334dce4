from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from symptom_intake.models.search_history import SearchHistory

logger = logging.getLogger("symptom_intake")

DEFAULT_LIST_LIMIT = 50


def create_entry(
    db: Session,
    user_id: str,
    symptoms: str,
    disease: str,
    severity: str,
    file_name: Optional[str] = None,
) -> SearchHistory:
    """Insert a history row for ``user_id``."""
    entry = SearchHistory(
        user_id=str(user_id),
        symptoms=symptoms or "",
        disease=disease,
        severity=severity,
        file_name=file_name or None,
    )
    try:
        db.add(entry)
        db.commit()
        db.refresh(entry)
    except Exception:
        db.rollback()
        raise
    logger.info({"function": "create_entry", "entry_id": entry.id, "disease": disease})
    return entry


def list_entries(db: Session, user_id: str, limit: int = DEFAULT_LIST_LIMIT) -> List[SearchHistory]:
    return (
        db.query(SearchHistory)
        .filter(SearchHistory.user_id == str(user_id))
        .order_by(SearchHistory.timestamp.desc())
        .limit(limit)
        .all()
    )


def delete_entry(db: Session, user_id: str, entry_id: str) -> bool:
    entry = (
        db.query(SearchHistory)
        .filter(SearchHistory.id == entry_id, SearchHistory.user_id == str(user_id))
        .first()
    )
    if not entry:
        return False
    db.delete(entry)
    db.commit()
    return True


def delete_all(db: Session, user_id: str) -> int:
    removed = (
        db.query(SearchHistory)
        .filter(SearchHistory.user_id == str(user_id))
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info({"function": "delete_all", "user_id": str(user_id), "removed": removed})
    return removed


__all__ = ["create_entry", "list_entries", "delete_entry", "delete_all"]
