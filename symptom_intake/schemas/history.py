# symptom_intake/schemas/history.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------- Search history ----------
class SearchHistoryCreate(BaseModel):
    symptoms: str = Field(..., min_length=1)
    disease: str
    severity: str
    file_name: Optional[str] = None


class SearchHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    symptoms: Optional[str] = None
    disease: str
    severity: str
    file_name: Optional[str] = None
    timestamp: datetime


class SearchHistoryList(BaseModel):
    success: bool = True
    count: int
    data: List[SearchHistoryOut]


class SearchHistoryCreated(BaseModel):
    success: bool = True
    data: SearchHistoryOut


# ---------- Prediction history ----------
class PredictionHistoryCreate(BaseModel):
    symptoms: str = Field(..., min_length=1)
    disease: str
    severity: str
    symptoms_match: str


class PredictionHistoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    symptoms: Optional[str] = None
    disease: str
    severity: str
    symptoms_match: str
    created_at: datetime


class PredictionHistoryList(BaseModel):
    success: bool = True
    history: List[PredictionHistoryOut]


class PredictionHistoryCreated(BaseModel):
    success: bool = True
    history: PredictionHistoryOut


class MessageOut(BaseModel):
    success: bool = True
    message: str
