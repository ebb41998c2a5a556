from pydantic import BaseModel, Field
from typing import Optional
from datetime import date


class SatisfactionSurveyCreate(BaseModel):
    """Survey response. Score is rejected outside 0-100, never clamped."""
    employee_id: int
    score: float = Field(..., ge=0, le=100)
    survey_date: date
    comments: Optional[str] = None


class PerformanceMetricCreate(BaseModel):
    """
    One review period. Teams record either an objective completion rate,
    a 0-5 score with goals met, or both.
    """
    employee_id: int
    period: str = Field(..., min_length=1)  # e.g. '2024-Q3'
    score: Optional[float] = Field(None, ge=0, le=5)
    goals_met: Optional[float] = Field(None, ge=0, le=100)
    objective_completion_rate: Optional[float] = Field(None, ge=0, le=100)
    manager_rating: Optional[float] = Field(None, ge=0, le=10)


class FeedbackCreate(BaseModel):
    employee_id: int
    from_user_id: int
    feedback_type: str = "General"  # 'Praise', 'Improvement', 'Concern', 'General'
    text: str
    feedback_date: Optional[date] = None
