"""
Staff Model
Database schema for staff records and their reporting chain
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field
from beanie import Document, PydanticObjectId


class StaffRole(str, Enum):
    """Role claim carried in the session"""
    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class ReportingAuthority(BaseModel):
    """One approver in a staff member's reporting chain"""
    id: str
    name: str
    designation: str


class Staff(Document):
    """Staff document model"""

    # Identity
    staff_id: str = Field(..., unique=True, index=True)
    first_name: str
    last_name: str
    email: EmailStr = Field(..., unique=True, index=True)
    phone: Optional[str] = None
    gender: Optional[str] = None

    # Employment
    designation: str
    role: StaffRole = StaffRole.EMPLOYEE
    joining_date: datetime = Field(default_factory=datetime.utcnow)

    # Ordered approvers; order is approval precedence
    reporting_authority: List[ReportingAuthority] = []

    # Authentication
    password_hash: str
    is_active: bool = True

    # Profile
    profile_picture: Optional[str] = None

    # Metadata
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    class Settings:
        name = "staff"
        indexes = [
            "staff_id",
            "email",
            "role",
        ]


class StaffCreate(BaseModel):
    """Schema for creating a principal and its staff record"""
    staff_id: str
    first_name: str
    last_name: str
    email: EmailStr
    password: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    designation: str
    role: StaffRole = StaffRole.EMPLOYEE
    reporting_authority: List[ReportingAuthority] = []


class StaffResponse(BaseModel):
    """Schema for staff response (without sensitive data)"""
    id: PydanticObjectId
    staff_id: str
    first_name: str
    last_name: str
    email: EmailStr
    designation: str
    role: StaffRole
    is_active: bool
    reporting_authority: List[ReportingAuthority] = []
    profile_picture: Optional[str] = None

    class Config:
        from_attributes = True
