"""
Leave Model
Database schema for leave requests and their approval chain
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator
from beanie import Document, PydanticObjectId
from enum import Enum


class LeaveType(str, Enum):
    """Types of leave"""
    CL = "CL"
    SL = "SL"
    PL = "PL"

    @property
    def label(self) -> str:
        return LEAVE_TYPE_LABELS[self]


LEAVE_TYPE_LABELS = {
    LeaveType.CL: "Casual Leave",
    LeaveType.SL: "Sick Leave",
    LeaveType.PL: "Personal Leave",
}


class LeaveStatus(str, Enum):
    """Status of a single approval step and of the whole request"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DISAPPROVED = "DISAPPROVED"


class ApprovalStep(BaseModel):
    """
    One approver's decision record.

    id, name and designation are a snapshot taken when the chain is built
    and are never re-resolved against the approver's profile.
    """
    id: str
    name: str
    designation: str
    status: LeaveStatus = LeaveStatus.PENDING
    comment: str = ""
    approved_on: Optional[datetime] = None


class Delegation(BaseModel):
    """Work handed over for the duration of the leave"""
    project: str
    deadline: str
    delegated_to: str
    description: str = ""


class LeaveRequest(Document):
    """Leave application document"""

    # Applicant
    staff_id: str = Field(..., index=True)
    name: str

    # Leave Details
    leave_type: LeaveType
    start_date: datetime
    end_date: datetime
    no_of_days: int
    reason: str
    address_during_leave: str = ""
    emergency_contact_name: str = ""
    emergency_contact_number: str = ""
    delegation_of_duties: List[Delegation] = []
    attachment: Optional[str] = None

    # Approval Workflow
    approval_status: List[ApprovalStep]
    current_approver: str
    status: LeaveStatus = LeaveStatus.PENDING

    # Metadata
    applied_on: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status != LeaveStatus.PENDING

    class Settings:
        name = "leaves"
        indexes = [
            "staff_id",
            "status",
            "current_approver",
            "approval_status.id",
            "applied_on",
        ]


class LeaveCreate(BaseModel):
    """Schema for applying for leave"""
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    address_during_leave: str = ""
    emergency_contact_name: str = ""
    emergency_contact_number: str = ""
    delegation_of_duties: List[Delegation] = []
    attachment_base64: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveUpdate(BaseModel):
    """Schema for editing the non-decision fields of a pending request"""
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    address_during_leave: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None
    delegation_of_duties: Optional[List[Delegation]] = None
    attachment_base64: Optional[str] = None


class DecisionRequest(BaseModel):
    """Schema for approving/disapproving the active step"""
    decision: LeaveStatus
    comment: str = ""


class LeaveResponse(BaseModel):
    """Schema for leave response"""
    id: PydanticObjectId
    staff_id: str
    name: str
    leave_type: LeaveType
    start_date: datetime
    end_date: datetime
    no_of_days: int
    reason: str
    address_during_leave: str
    emergency_contact_name: str
    emergency_contact_number: str
    delegation_of_duties: List[Delegation]
    attachment: Optional[str] = None
    approval_status: List[ApprovalStep]
    current_approver: str
    status: LeaveStatus
    applied_on: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LeaveListResponse(BaseModel):
    """Schema for list of leaves"""
    total: int
    leaves: List[LeaveResponse]
