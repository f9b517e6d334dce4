# symptom_intake/routes/search_history_routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from symptom_intake.auth.deps import get_current_user
from symptom_intake.db.session import get_db
from symptom_intake.models.user import User
from symptom_intake.schemas.history import (
    MessageOut,
    SearchHistoryCreate,
    SearchHistoryCreated,
    SearchHistoryList,
)
from symptom_intake.services import search_history

router = APIRouter(prefix="/api/search-history", tags=["search-history"])


@router.get("", response_model=SearchHistoryList)
def list_search_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = search_history.list_entries(db, str(current_user.id))
    return {"success": True, "count": len(items), "data": items}


@router.post("", response_model=SearchHistoryCreated, status_code=status.HTTP_201_CREATED)
def create_search_entry(
    payload: SearchHistoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    entry = search_history.create_entry(
        db,
        user_id=str(current_user.id),
        symptoms=payload.symptoms,
        disease=payload.disease,
        severity=payload.severity,
        file_name=payload.file_name,
    )
    return {"success": True, "data": entry}


@router.delete("", response_model=MessageOut)
def clear_search_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    search_history.delete_all(db, str(current_user.id))
    return {"success": True, "message": "Search history cleared successfully"}


@router.delete("/{entry_id}", response_model=MessageOut)
def delete_search_entry(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not search_history.delete_entry(db, str(current_user.id), entry_id):
        raise HTTPException(status_code=404, detail="Search entry not found")
    return {"success": True, "message": "Search entry deleted successfully"}
