from fastapi import APIRouter, Depends, Request, Query
from typing import Dict, Any, Optional
from database.repository import Repository, get_repository
from models.employees import EmployeeCreate, EmployeeUpdate
from services.auth_service import verify_jwt_token, require_edit_permission
from services.employee_service import EmployeeService

router = APIRouter(prefix="/hr/Employees", tags=["employees"])


def _client_info(request: Request) -> Dict[str, Optional[str]]:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.get("")
async def list_employees(
    department: Optional[str] = Query(default=None),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """Get all employees, optionally for one department"""
    employees = await EmployeeService(repository).list_employees(department)
    return {"value": employees}


@router.get("/search")
async def search_employees(
    q: str = Query(default=""),
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    """Search employees by name, code, role, department, team or location"""
    employees = await EmployeeService(repository).search_employees(q)
    return {"value": employees}


@router.get("/{employee_id}")
async def get_employee(
    employee_id: int,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(verify_jwt_token)
):
    return await EmployeeService(repository).get_employee(employee_id)


@router.post("", status_code=201)
async def create_employee(
    employee_data: EmployeeCreate,
    request: Request,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    """Create new employee"""
    employee = await EmployeeService(repository).create_employee(
        employee_data,
        created_by=current_user["user_id"],
        **_client_info(request)
    )
    return {
        "success": True,
        "message": f"{employee_data.first_name} {employee_data.last_name} has been added successfully",
        "value": employee
    }


@router.put("/{employee_id}")
async def update_employee(
    employee_id: int,
    employee_data: EmployeeUpdate,
    request: Request,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    """Update existing employee"""
    employee = await EmployeeService(repository).update_employee(
        employee_id,
        employee_data,
        changed_by=current_user["user_id"],
        **_client_info(request)
    )
    return {
        "success": True,
        "message": "Employee updated successfully",
        "value": employee
    }


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: int,
    request: Request,
    repository: Repository = Depends(get_repository),
    current_user: Dict[str, Any] = Depends(require_edit_permission)
):
    employee = await EmployeeService(repository).delete_employee(
        employee_id,
        changed_by=current_user["user_id"],
        **_client_info(request)
    )
    return {
        "success": True,
        "message": "Employee deleted successfully",
        "value": employee
    }
