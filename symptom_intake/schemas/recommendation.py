# symptom_intake/schemas/recommendation.py
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class Tip(BaseModel):
    model_config = ConfigDict(frozen=True)

    icon: str
    title: str
    detail: str


class FoodToEat(BaseModel):
    model_config = ConfigDict(frozen=True)

    icon: str
    name: str
    benefit: str


class FoodToAvoid(BaseModel):
    model_config = ConfigDict(frozen=True)

    icon: str
    name: str
    reason: str


class DietPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    foods_to_eat: Tuple[FoodToEat, ...]
    foods_to_avoid: Tuple[FoodToAvoid, ...]


class Recommendation(BaseModel):
    """Structured guidance returned for a symptom description."""

    model_config = ConfigDict(frozen=True)

    disease: str = Field(..., description="Condition label, possibly a composite of several conditions.")
    severity: str = Field(..., description="Coarse severity label (e.g. 'Mild to Moderate', 'Unknown').")
    description: str
    symptoms_match: str = Field(..., description="Fixed editorial confidence percentage, e.g. '92%'.")
    tips: Tuple[Tip, ...]
    diet_plan: DietPlan
    when_to_see_doctor: Tuple[str, ...]


class RuleSummary(BaseModel):
    key: str
    keywords: Tuple[str, ...]
    disease: str
    severity: str
    conditions: Tuple[str, ...] = ()
