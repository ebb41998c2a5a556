from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date


class EmployeeActionRequest(BaseModel):
    employeeId: int


class DepartmentActionRequest(BaseModel):
    department: str = Field(..., min_length=1)


class AttritionRiskResponse(BaseModel):
    success: bool
    message: str
    riskScore: Optional[float] = None
    urgencyLevel: Optional[str] = None
    explanation: Optional[str] = None


class TeamAnalysis(BaseModel):
    department: str
    teamSize: int
    avgScore: float
    avgGoalsMet: float
    avgCompletion: float
    keyTalentCount: int
    keyTalentPercentage: float
    performanceTrend: str
    topPerformers: List[str]
    improvementAreas: List[str]
    summary: str


class TeamAnalysisResponse(BaseModel):
    success: bool
    analysis: Optional[TeamAnalysis] = None
    message: Optional[str] = None


class SummarizeFeedbackRequest(BaseModel):
    employeeId: int
    timeframeDays: int = Field(90, ge=1, le=3650)


class SuggestTrainingRequest(BaseModel):
    employeeId: int
    gaps: Optional[str] = None


class EngagementIdeasRequest(BaseModel):
    department: str = Field(..., min_length=1)
    recentTrends: Optional[str] = None


class PolicyEnhancementsRequest(BaseModel):
    recurrentThemes: Optional[str] = None


class PrioritizeHiringRequest(BaseModel):
    attritionForecast: Optional[str] = None


class OpenPositionCreate(BaseModel):
    title: str
    department: str
    priority: str = Field("Medium", pattern="^(Low|Medium|High|Critical)$")
    openings: int = Field(1, ge=1)
    posted_date: Optional[date] = None
