from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date


class EmployeeBase(BaseModel):
    first_name: str
    last_name: str
    role: str
    department: str
    team: Optional[str] = None
    location: Optional[str] = None
    hire_date: date
    hire_type: str = "Full-time"
    is_key_talent: bool = False
    manager_id: Optional[int] = None


class EmployeeCreate(EmployeeBase):
    employee_code: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None


class EmployeeUpdate(BaseModel):
    """Partial update. Fields left out are not touched."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    department: Optional[str] = None
    team: Optional[str] = None
    location: Optional[str] = None
    hire_date: Optional[date] = None
    hire_type: Optional[str] = None
    is_key_talent: Optional[bool] = None
    manager_id: Optional[int] = None
