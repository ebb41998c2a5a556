import logging
import uuid
from datetime import date
from typing import List, Dict, Any, Optional, Callable
from database.repository import Repository
from core.exceptions import NotFoundError, ValidationError
from models.employees import EmployeeCreate, EmployeeUpdate
from modules.risk.tenure import compute_tenure_months
from services.audit_service import log_employee_change

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ('first_name', 'last_name', 'employee_code', 'role', 'department', 'team', 'location')

# Columns an update may change but never clear
REQUIRED_FIELDS = ('first_name', 'last_name', 'role', 'department', 'hire_date', 'hire_type', 'is_key_talent')

# Rows keyed to an employee, removed before the employee row itself
DEPENDENT_TABLES = (
    ('attrition_risks', 'employee_id'),
    ('training_recommendations', 'employee_id'),
    ('satisfaction_surveys', 'employee_id'),
    ('performance_metrics', 'employee_id'),
    ('feedback', 'employee_id'),
    ('feedback', 'from_user_id'),
)


class EmployeeService:
    """CRUD over the employees table. Tenure is recomputed on every write."""

    def __init__(self, repository: Repository, today: Optional[Callable[[], date]] = None):
        self.repository = repository
        self.today = today or date.today

    def require_employee(self, employee_id: int) -> Dict[str, Any]:
        employee = self.repository.find_one('employees', {'id': employee_id})
        if not employee:
            raise NotFoundError(f"Employee with ID {employee_id} not found")
        return employee

    async def list_employees(self, department: Optional[str] = None) -> List[Dict[str, Any]]:
        filters = {'department': department} if department else None
        return self.repository.find('employees', filters, order_by='id')

    async def search_employees(self, term: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring search across name, code and org fields"""
        employees = self.repository.find('employees', order_by='id')
        term = (term or '').strip().lower()
        if not term:
            return employees

        return [
            e for e in employees
            if any(term in str(e.get(field) or '').lower() for field in SEARCH_FIELDS)
        ]

    async def get_employee(self, employee_id: int) -> Dict[str, Any]:
        return self.require_employee(employee_id)

    def _validate_manager(self, manager_id: Optional[int], employee_id: Optional[int] = None):
        if manager_id is None:
            return
        if employee_id is not None and manager_id == employee_id:
            raise ValidationError("Employee cannot be their own manager")
        if not self.repository.find_one('employees', {'id': manager_id}):
            raise ValidationError(f"Manager with ID {manager_id} does not exist")

    async def create_employee(
        self,
        employee_data: EmployeeCreate,
        created_by: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create new employee"""
        self._validate_manager(employee_data.manager_id)

        new_employee = employee_data.model_dump(mode='json')
        new_employee['employee_code'] = employee_data.employee_code or f"AE{uuid.uuid4().hex[:6].upper()}"
        new_employee['tenure_months'] = compute_tenure_months(employee_data.hire_date, self.today())

        employee = self.repository.insert('employees', new_employee)
        logger.info(f"Employee {employee['id']} created ({employee['employee_code']})")

        await log_employee_change(
            self.repository,
            employee_id=employee['id'],
            changed_by=created_by,
            action="CREATE",
            changed_fields={"created": new_employee},
            ip_address=ip_address,
            user_agent=user_agent
        )

        return employee

    async def update_employee(
        self,
        employee_id: int,
        employee_data: EmployeeUpdate,
        changed_by: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Dict[str, Any]:
        """Update existing employee"""
        current = self.require_employee(employee_id)

        update_data = employee_data.model_dump(mode='json', exclude_unset=True)
        cleared = [f for f in REQUIRED_FIELDS if f in update_data and update_data[f] is None]
        if cleared:
            raise ValidationError(f"Cannot clear required fields: {', '.join(cleared)}")
        if 'manager_id' in update_data:
            self._validate_manager(update_data['manager_id'], employee_id)

        hire_date = update_data.get('hire_date', current.get('hire_date'))
        update_data['tenure_months'] = compute_tenure_months(hire_date, self.today())

        # Track what changed
        changed_fields = {}
        for key, new_value in update_data.items():
            old_value = current.get(key)
            if old_value != new_value:
                changed_fields[key] = {"old": old_value, "new": new_value}

        result = self.repository.update('employees', {'id': employee_id}, update_data)

        await log_employee_change(
            self.repository,
            employee_id=employee_id,
            changed_by=changed_by,
            action="UPDATE",
            changed_fields=changed_fields,
            ip_address=ip_address,
            user_agent=user_agent
        )

        return result[0]

    async def delete_employee(
        self,
        employee_id: int,
        changed_by: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Dict[str, Any]:
        """Delete employee along with their signals and generated records"""
        employee = self.require_employee(employee_id)

        for table, column in DEPENDENT_TABLES:
            self.repository.delete(table, {column: employee_id})
        self.repository.update('employees', {'manager_id': employee_id}, {'manager_id': None})
        self.repository.delete('employees', {'id': employee_id})
        logger.info(f"Employee {employee_id} deleted")

        await log_employee_change(
            self.repository,
            employee_id=employee_id,
            changed_by=changed_by,
            action="DELETE",
            changed_fields={"deleted": employee},
            ip_address=ip_address,
            user_agent=user_agent
        )

        return employee
