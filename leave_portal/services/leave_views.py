"""
Query Views
Read-only projections over the leave collection used by the dashboards.
Every call re-reads the store; nothing here is cached.
"""
from datetime import date, datetime
from typing import Dict, Iterable, List, Union

from leave_portal.models.leave import LeaveRequest, LeaveStatus
from leave_portal.services import leave_store
from leave_portal.services.approval_workflow import active_step


def pending_for_approver(leaves: Iterable[LeaveRequest], approver_id: str) -> List[LeaveRequest]:
    """Requests whose active step belongs to approver_id"""
    result = []
    for leave in leaves:
        step = active_step(leave.approval_status)
        if step is not None and step.id == approver_id and step.status == LeaveStatus.PENDING:
            result.append(leave)
    return result


def history_for_approver(leaves: Iterable[LeaveRequest], approver_id: str) -> List[LeaveRequest]:
    """Requests with any step for approver_id, decided, active or not yet reached"""
    return [
        leave for leave in leaves
        if any(step.id == approver_id for step in leave.approval_status)
    ]


def all_for_staff_member(leaves: Iterable[LeaveRequest], staff_id: str) -> List[LeaveRequest]:
    return [leave for leave in leaves if leave.staff_id == staff_id]


async def list_pending(approver_id: str) -> List[LeaveRequest]:
    candidates = await leave_store.find_leaves({
        "approval_status.id": approver_id,
        "status": LeaveStatus.PENDING.value,
    })
    return pending_for_approver(candidates, approver_id)


async def list_history(approver_id: str) -> List[LeaveRequest]:
    candidates = await leave_store.find_leaves({"approval_status.id": approver_id})
    return history_for_approver(candidates, approver_id)


async def list_for_staff(staff_id: str) -> List[LeaveRequest]:
    candidates = await leave_store.find_leaves({"staff_id": staff_id})
    return all_for_staff_member(candidates, staff_id)


def _day(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def staff_summary(leaves: List[LeaveRequest], today: date) -> Dict:
    """Counters plus recent and upcoming leaves for one applicant"""
    newest_first = sorted(leaves, key=lambda l: l.applied_on, reverse=True)
    upcoming = [
        l for l in leaves
        if l.status == LeaveStatus.APPROVED and _day(l.start_date) > today
    ]
    upcoming.sort(key=lambda l: l.start_date)

    return {
        "total": len(leaves),
        "pending": sum(1 for l in leaves if l.status == LeaveStatus.PENDING),
        "approved": sum(1 for l in leaves if l.status == LeaveStatus.APPROVED),
        "disapproved": sum(1 for l in leaves if l.status == LeaveStatus.DISAPPROVED),
        "recent": newest_first[:3],
        "upcoming": upcoming,
    }


def approver_summary(history: List[LeaveRequest], approver_id: str, today: date) -> Dict:
    """Pending workload and this month's decisions for one approver"""
    this_month = [
        l for l in history
        if l.applied_on.year == today.year and l.applied_on.month == today.month
    ]

    def decided(status: LeaveStatus) -> int:
        return sum(
            1 for l in this_month
            if any(s.id == approver_id and s.status == status for s in l.approval_status)
        )

    return {
        "pending": len(pending_for_approver(history, approver_id)),
        "this_month": {
            "approved": decided(LeaveStatus.APPROVED),
            "disapproved": decided(LeaveStatus.DISAPPROVED),
        },
    }
