# symptom_intake/routes/predict_routes.py
import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from symptom_intake.auth.deps import get_optional_user
from symptom_intake.db.session import get_db
from symptom_intake.models.user import User
from symptom_intake.schemas.recommendation import Recommendation, RuleSummary
from symptom_intake.services import classifier, enrichment, extraction, search_history
from symptom_intake.utils.rate_limit import PREDICT_RATE_LIMIT, limiter

router = APIRouter(prefix="/api", tags=["predict"])
logger = logging.getLogger("symptom_intake")

MAX_FILE_MB = int(os.getenv("MAX_FILE_MB", "10"))
REPORT_SEPARATOR = "\n\n--- Medical Report Content ---\n"
HISTORY_SYMPTOMS_CHARS = 200


def merge_symptoms(typed: str, extracted: Optional[str]) -> str:
    """Typed text first, then the report text under a labelled header."""
    typed = typed or ""
    if extracted is None:
        return typed
    if typed:
        return typed + REPORT_SEPARATOR + extracted
    return extracted


@router.post("/predict", response_model=Recommendation, status_code=status.HTTP_200_OK)
@limiter.limit(PREDICT_RATE_LIMIT)
async def predict(
    request: Request,
    symptoms: str = Form(""),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    """Classify typed symptoms and/or an uploaded report.

    Anonymous callers get a result too; only authenticated calls are written
    to search history.
    """
    extracted = None
    file_name = None
    if file is not None:
        data = await file.read()
        if len(data) > MAX_FILE_MB * 1024 * 1024:
            raise HTTPException(
                status_code=413,
                detail=f"File size exceeds the {MAX_FILE_MB}MB limit",
            )
        file_name = file.filename or "upload"
        extracted = extraction.extract_text(data, file_name, file.content_type or "")
        logger.info({
            "function": "predict",
            "stage": "extracted",
            "filename": file_name,
            "content_type": file.content_type,
            "chars": len(extracted),
        })

    symptoms_text = merge_symptoms(symptoms, extracted)
    if not symptoms_text.strip():
        raise HTTPException(
            status_code=400,
            detail="Please provide symptoms description or upload a medical report",
        )

    if enrichment.is_enabled():
        enrichment.schedule_analysis(symptoms_text)

    rule_key, prediction = classifier.classify_with_rule(symptoms_text)
    logger.info({
        "function": "predict",
        "rule": rule_key,
        "disease": prediction.disease,
        "authenticated": user is not None,
    })

    if user is not None:
        try:
            search_history.create_entry(
                db,
                user_id=str(user.id),
                symptoms=symptoms_text[:HISTORY_SYMPTOMS_CHARS],
                disease=prediction.disease,
                severity=prediction.severity,
                file_name=file_name,
            )
        except Exception:
            logger.exception("Error saving to search history")

    return prediction


@router.get("/rules", response_model=List[RuleSummary])
def list_rules():
    """Ordered rule table, highest priority first."""
    return classifier.list_rules()
