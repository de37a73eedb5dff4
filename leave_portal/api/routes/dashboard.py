"""
Dashboard Routes
Leave counters for applicants and approvers
"""
from fastapi import APIRouter, Depends
from datetime import datetime

from leave_portal.models.leave import LeaveResponse
from leave_portal.models.session import SessionContext
from leave_portal.api.routes.auth import get_current_session
from leave_portal.services import leave_service, leave_views


router = APIRouter()


@router.get("/overview")
async def get_dashboard_overview(
    session: SessionContext = Depends(get_current_session)
):
    """
    Personal leave statistics for the current staff member
    """
    leaves = await leave_service.list_for_staff(session.user_id)
    summary = leave_views.staff_summary(leaves, datetime.utcnow().date())

    return {
        "total": summary["total"],
        "pending": summary["pending"],
        "approved": summary["approved"],
        "disapproved": summary["disapproved"],
        "recent": [LeaveResponse.model_validate(l) for l in summary["recent"]],
        "upcoming": [LeaveResponse.model_validate(l) for l in summary["upcoming"]],
    }


@router.get("/approvals")
async def get_approval_overview(
    session: SessionContext = Depends(get_current_session)
):
    """
    Pending workload and this month's decisions for the current approver
    """
    history = await leave_service.list_history(session.user_id)
    return leave_views.approver_summary(history, session.user_id, datetime.utcnow().date())
