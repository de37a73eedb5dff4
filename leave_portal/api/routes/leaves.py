"""
Leave Routes
Leave application, approval chain decisions and listings
"""
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List, Optional
from datetime import datetime

from leave_portal.models.leave import (
    DecisionRequest,
    LeaveCreate,
    LeaveListResponse,
    LeaveRequest,
    LeaveResponse,
    LeaveStatus,
    LeaveUpdate,
)
from leave_portal.models.session import SessionContext
from leave_portal.api.routes.auth import get_active_session, get_current_session
from leave_portal.services import leave_service


router = APIRouter()


def _listing(leaves: List[LeaveRequest], status_filter: Optional[LeaveStatus] = None) -> dict:
    if status_filter:
        leaves = [l for l in leaves if l.status == status_filter]
    return {
        "total": len(leaves),
        "leaves": [LeaveResponse.model_validate(l) for l in leaves],
    }


@router.post("/apply", status_code=status.HTTP_201_CREATED)
async def apply_leave(
    request: LeaveCreate,
    session: SessionContext = Depends(get_active_session)
):
    """
    Apply for leave; the request starts with the applicant's first reporting authority
    """
    try:
        leave = await leave_service.create_leave_request(session, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {
        "message": "Leave application submitted successfully",
        "id": str(leave.id),
        "status": leave.status,
        "no_of_days": leave.no_of_days,
        "current_approver": leave.current_approver,
    }


@router.get("/my", response_model=LeaveListResponse)
async def get_my_leaves(
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    session: SessionContext = Depends(get_current_session)
):
    """
    Get leave applications for the current staff member
    """
    return _listing(await leave_service.list_for_staff(session.user_id), status_filter)


@router.get("/pending", response_model=LeaveListResponse)
async def get_pending_approvals(
    session: SessionContext = Depends(get_current_session)
):
    """
    Requests currently waiting on the caller's decision
    """
    return _listing(await leave_service.list_pending(session.user_id))


@router.get("/history", response_model=LeaveListResponse)
async def get_approval_history(
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    session: SessionContext = Depends(get_current_session)
):
    """
    Every request in which the caller appears as an approver
    """
    return _listing(await leave_service.list_history(session.user_id), status_filter)


@router.get("/staff/{staff_id}", response_model=LeaveListResponse)
async def get_staff_leaves(
    staff_id: str,
    status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
    session: SessionContext = Depends(get_current_session)
):
    """
    Leave history of one staff member (Admin or self)
    """
    if not session.is_admin and session.user_id != staff_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can view another staff member's leaves"
        )
    return _listing(await leave_service.list_for_staff(staff_id), status_filter)


@router.get("/{leave_id}", response_model=LeaveResponse)
async def get_leave(
    leave_id: str,
    session: SessionContext = Depends(get_current_session)
):
    """
    Get a single leave request (applicant, any approver in its chain, or Admin)
    """
    leave = await leave_service.get_request(leave_id)
    in_chain = any(step.id == session.user_id for step in leave.approval_status)
    if not (session.is_admin or in_chain or leave.staff_id == session.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this leave request"
        )
    return LeaveResponse.model_validate(leave)


@router.patch("/{leave_id}", response_model=LeaveResponse)
async def update_leave(
    leave_id: str,
    request: LeaveUpdate,
    session: SessionContext = Depends(get_active_session)
):
    """
    Edit a pending leave request (applicant only)
    """
    try:
        leave = await leave_service.update_request_fields(session, leave_id, request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return LeaveResponse.model_validate(leave)


@router.delete("/{leave_id}")
async def delete_leave(
    leave_id: str,
    session: SessionContext = Depends(get_active_session)
):
    """
    Delete a pending leave request (applicant only)
    """
    await leave_service.delete_request(session, leave_id)
    return {
        "message": "Leave application deleted",
        "id": leave_id
    }


@router.post("/{leave_id}/decision")
async def decide_leave(
    leave_id: str,
    request: DecisionRequest,
    session: SessionContext = Depends(get_active_session)
):
    """
    Approve or disapprove the step currently waiting on the caller
    """
    leave = await leave_service.decide(
        leave_id,
        session.user_id,
        request.decision,
        request.comment,
        datetime.utcnow(),
    )
    return {
        "message": f"Leave step {request.decision.value.lower()}",
        "status": leave.status,
        "leave": LeaveResponse.model_validate(leave),
    }
