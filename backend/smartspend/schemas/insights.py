from pydantic import BaseModel
from typing import Dict, List, Literal
from datetime import datetime


class TrendPrediction(BaseModel):
    current_amount: float
    predicted_amount: float
    trend: Literal["increasing", "decreasing", "stable"]
    percent_change: float
    average_monthly: float
    confidence: Literal["high", "moderate"]


class Recommendation(BaseModel):
    category: str
    message: str
    potential_savings: float
    recommendation_type: str = "pattern"  # "pattern", "budget" or "local"


class InsightsOut(BaseModel):
    mode: Literal["server", "local"]
    predictions: Dict[str, TrendPrediction]
    recommendations: List[Recommendation]
    generated_at: datetime
