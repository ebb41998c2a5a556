from fastapi import APIRouter, Depends
from typing import Dict, Any
from database.repository import Repository, get_repository
from core.genai_client import NarrativeClient, get_narrative_client
from models.insights import (
    EmployeeActionRequest,
    SummarizeFeedbackRequest,
    SuggestTrainingRequest,
    EngagementIdeasRequest,
    PolicyEnhancementsRequest,
    PrioritizeHiringRequest,
)
from services.auth_service import verify_jwt_token
from services.genai_service import GenAIService

router = APIRouter(prefix="/genai", tags=["genai"])


def get_genai_service(
    repository: Repository = Depends(get_repository),
    narrative_client: NarrativeClient = Depends(get_narrative_client),
) -> GenAIService:
    return GenAIService(repository, narrative_client)


@router.post("/explainAttritionRisk")
async def explain_attrition_risk(
    request: EmployeeActionRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """Narrative explanation of an employee's attrition risk"""
    return await service.explain_attrition_risk(request.employeeId)


@router.post("/summarizeFeedback")
async def summarize_feedback(
    request: SummarizeFeedbackRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await service.summarize_feedback(request.employeeId, request.timeframeDays)


@router.post("/suggestTraining")
async def suggest_training(
    request: SuggestTrainingRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await service.suggest_training(request.employeeId, request.gaps)


@router.post("/getEngagementIdeas")
async def get_engagement_ideas(
    request: EngagementIdeasRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await service.get_engagement_ideas(request.department, request.recentTrends)


@router.post("/policyEnhancements")
async def policy_enhancements(
    request: PolicyEnhancementsRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await service.policy_enhancements(request.recurrentThemes)


@router.post("/prioritizeHiring")
async def prioritize_hiring(
    request: PrioritizeHiringRequest,
    service: GenAIService = Depends(get_genai_service),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await service.prioritize_hiring(request.attritionForecast)
