from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Dict, Any, Optional
from database.repository import Repository, get_repository
from models.insights import (
    EmployeeActionRequest,
    DepartmentActionRequest,
    AttritionRiskResponse,
    TeamAnalysisResponse,
    OpenPositionCreate,
)
from services.auth_service import verify_jwt_token, require_edit_permission
from services.hr_actions_service import HRActionsService
from services.positions_service import PositionsService

router = APIRouter(prefix="/hr", tags=["hr"])

# Entity names exposed on the API -> generated-content tables
GENERATED_ENTITIES = {
    "TrainingRecommendation": "training_recommendations",
    "EngagementIdea": "engagement_ideas",
    "PolicyEnhancement": "policy_enhancements",
}


# ===== ACTIONS =====

@router.post("/generateAttritionRisk", response_model=AttritionRiskResponse)
async def generate_attrition_risk(
    request: EmployeeActionRequest,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await HRActionsService(repository).generate_attrition_risk(request.employeeId)


@router.post("/generateTrainingRecommendations")
async def generate_training_recommendations(
    request: EmployeeActionRequest,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await HRActionsService(repository).generate_training_recommendations(request.employeeId)


@router.post("/analyzeTeamPerformance", response_model=TeamAnalysisResponse)
async def analyze_team_performance(
    request: DepartmentActionRequest,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await HRActionsService(repository).analyze_team_performance(request.department)


@router.post("/generateEngagementIdeas")
async def generate_engagement_ideas(
    request: DepartmentActionRequest,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await HRActionsService(repository).generate_engagement_ideas(request.department)


@router.post("/analyzePolicyGaps")
async def analyze_policy_gaps(
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await HRActionsService(repository).analyze_policy_gaps()


# ===== VIEWS =====

@router.get("/DepartmentSummary")
async def department_summary(
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await HRActionsService(repository).department_summary()}


@router.get("/AttritionRiskSummary")
async def attrition_risk_summary(
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await HRActionsService(repository).attrition_risk_summary()}


@router.get("/AttritionRisk")
async def list_attrition_risks(
    employee_id: Optional[int] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await HRActionsService(repository).list_attrition_risks(employee_id)}


# ===== OPEN POSITIONS =====

@router.get("/OpenPositions")
async def list_open_positions(
    department: Optional[str] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return {"value": await PositionsService(repository).list_open_positions(department)}


@router.post("/OpenPositions", status_code=201)
async def create_open_position(
    position: OpenPositionCreate,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    return {"success": True, "value": await PositionsService(repository).create_open_position(position)}


# ===== GENERATED CONTENT =====

def _table_for(entity: str) -> str:
    table = GENERATED_ENTITIES.get(entity)
    if not table:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown entity: {entity}")
    return table


@router.get("/{entity}")
async def list_generated(
    entity: str,
    employee_id: Optional[int] = Query(default=None),
    department: Optional[str] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """List TrainingRecommendation, EngagementIdea or PolicyEnhancement records"""
    table = _table_for(entity)
    filters = {}
    if employee_id is not None:
        filters['employee_id'] = employee_id
    if department:
        filters['department'] = department
    return {"value": await HRActionsService(repository).list_records(table, filters or None)}


@router.post("/{entity}/{record_id}/{action}")
async def transition_generated(
    entity: str,
    record_id: str,
    action: str,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    """Apply or dismiss a Pending generated record"""
    table = _table_for(entity)
    record = await HRActionsService(repository).transition_status(table, record_id, action)
    return {"success": True, "value": record}
