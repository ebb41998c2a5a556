import logging
from typing import Dict, Any, Optional
from database.repository import Repository

logger = logging.getLogger(__name__)


async def log_employee_change(
    repository: Repository,
    employee_id: int,
    changed_by: Optional[str],
    action: str,
    changed_fields: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None
):
    """Log employee changes to audit table"""
    try:
        audit_entry = {
            "employee_id": employee_id,
            "changed_by": changed_by,
            "action": action,
            "changed_fields": changed_fields,
            "ip_address": ip_address,
            "user_agent": user_agent
        }

        result = repository.insert('employee_audit_log', audit_entry)
        logger.info(f"Audit log created: {action} for employee {employee_id} by {changed_by}")

        return result

    except Exception as e:
        logger.error(f"Failed to create audit log: {e}")
        # Don't fail the operation if audit logging fails
        return None
