# symptom_intake/routes/history_routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from symptom_intake.auth.deps import get_current_user
from symptom_intake.db.session import get_db
from symptom_intake.models.prediction_history import PredictionHistory
from symptom_intake.models.user import User
from symptom_intake.schemas.history import (
    MessageOut,
    PredictionHistoryCreate,
    PredictionHistoryCreated,
    PredictionHistoryList,
)

router = APIRouter(prefix="/api/history", tags=["history"])

HISTORY_LIMIT = 50


@router.get("", response_model=PredictionHistoryList)
def list_prediction_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = (
        db.query(PredictionHistory)
        .filter(PredictionHistory.user_id == str(current_user.id))
        .order_by(PredictionHistory.created_at.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
    return {"success": True, "history": items}


@router.post("", response_model=PredictionHistoryCreated, status_code=status.HTTP_201_CREATED)
def save_prediction(
    payload: PredictionHistoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = PredictionHistory(
        user_id=str(current_user.id),
        symptoms=payload.symptoms,
        disease=payload.disease,
        severity=payload.severity,
        symptoms_match=payload.symptoms_match,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return {"success": True, "history": item}


@router.delete("/{entry_id}", response_model=MessageOut)
def delete_prediction(
    entry_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = (
        db.query(PredictionHistory)
        .filter(PredictionHistory.id == entry_id, PredictionHistory.user_id == str(current_user.id))
        .first()
    )
    if not item:
        raise HTTPException(status_code=404, detail="History entry not found")
    db.delete(item)
    db.commit()
    return {"success": True, "message": "History entry deleted"}
