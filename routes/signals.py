from fastapi import APIRouter, Depends, Query
from typing import Dict, Any, Optional
from database.repository import Repository, get_repository
from models.signals import SatisfactionSurveyCreate, PerformanceMetricCreate, FeedbackCreate
from services.auth_service import verify_jwt_token, require_edit_permission
from services.signals_service import SignalsService

router = APIRouter(prefix="/hr", tags=["signals"])


@router.get("/SatisfactionSurvey")
async def list_satisfaction_surveys(
    employee_id: Optional[int] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await SignalsService(repository).list_satisfaction_surveys(employee_id)}


@router.post("/SatisfactionSurvey", status_code=201)
async def create_satisfaction_survey(
    survey: SatisfactionSurveyCreate,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    return {"success": True, "value": await SignalsService(repository).add_satisfaction_survey(survey)}


@router.get("/PerformanceMetrics")
async def list_performance_metrics(
    employee_id: Optional[int] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await SignalsService(repository).list_performance_metrics(employee_id)}


@router.post("/PerformanceMetrics", status_code=201)
async def create_performance_metric(
    metric: PerformanceMetricCreate,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    return {"success": True, "value": await SignalsService(repository).add_performance_metric(metric)}


@router.get("/Feedback")
async def list_feedback(
    employee_id: Optional[int] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await SignalsService(repository).list_feedback(employee_id)}


@router.post("/Feedback", status_code=201)
async def create_feedback(
    feedback: FeedbackCreate,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """Any authenticated user may leave feedback"""
    return {"success": True, "value": await SignalsService(repository).add_feedback(feedback)}
