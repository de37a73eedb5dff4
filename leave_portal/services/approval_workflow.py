"""
Approval State Machine
Advances a leave request through its approver chain one step at a time.

A request is decided strictly in chain order. The active step is the first
PENDING step, and there is none once any step is DISAPPROVED. The aggregate
status and the current approver are always derived from the step list
before a write, never set independently.
"""
import logging
from datetime import datetime
from typing import List, Optional, Union

from leave_portal.exceptions import (
    AlreadyFinalized,
    CommentRequired,
    ConcurrentModification,
    InvalidDecision,
    NotCurrentApprover,
    NotFound,
)
from leave_portal.models.leave import ApprovalStep, LeaveRequest, LeaveStatus
from leave_portal.services import leave_store

logger = logging.getLogger(__name__)

DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.DISAPPROVED)


def active_step_index(steps: List[ApprovalStep]) -> Optional[int]:
    """Index of the step awaiting a decision, or None if the chain is closed"""
    for index, step in enumerate(steps):
        if step.status == LeaveStatus.DISAPPROVED:
            return None
        if step.status == LeaveStatus.PENDING:
            return index
    return None


def active_step(steps: List[ApprovalStep]) -> Optional[ApprovalStep]:
    index = active_step_index(steps)
    return steps[index] if index is not None else None


def aggregate_status(steps: List[ApprovalStep]) -> LeaveStatus:
    if any(step.status == LeaveStatus.DISAPPROVED for step in steps):
        return LeaveStatus.DISAPPROVED
    if steps and all(step.status == LeaveStatus.APPROVED for step in steps):
        return LeaveStatus.APPROVED
    return LeaveStatus.PENDING


def resolve_current_approver(steps: List[ApprovalStep]) -> str:
    """The active step's approver, else whoever acted last"""
    step = active_step(steps)
    if step is not None:
        return step.id

    acted = [s for s in steps if s.status != LeaveStatus.PENDING]
    if acted:
        return acted[-1].id
    return steps[0].id if steps else ""


def refresh_derived(leave: LeaveRequest) -> LeaveRequest:
    """Recompute status and current_approver from the steps"""
    leave.status = aggregate_status(leave.approval_status)
    leave.current_approver = resolve_current_approver(leave.approval_status)
    return leave


def normalize_decision(decision: Union[LeaveStatus, str]) -> LeaveStatus:
    try:
        value = LeaveStatus(decision)
    except ValueError:
        raise InvalidDecision(f"Unknown decision {decision!r}")
    if value not in DECISIONS:
        raise InvalidDecision()
    return value


def check_decision(
    leave: LeaveRequest,
    approver_id: str,
    decision: LeaveStatus,
    comment: str,
) -> ApprovalStep:
    """Validate a decision against the current state and return the active step"""
    step = active_step(leave.approval_status)
    if step is None:
        raise AlreadyFinalized(f"Leave request {leave.id} is already {leave.status.value}")

    if step.id != approver_id:
        raise NotCurrentApprover(
            f"Leave request {leave.id} is awaiting a decision from {step.name}"
        )

    if decision == LeaveStatus.DISAPPROVED and not (comment or "").strip():
        raise CommentRequired()

    return step


def apply_decision(
    leave: LeaveRequest,
    approver_id: str,
    decision: Union[LeaveStatus, str],
    comment: str,
    timestamp: datetime,
) -> LeaveRequest:
    """Mutate the active step in memory and re-derive the aggregate fields"""
    decision = normalize_decision(decision)
    step = check_decision(leave, approver_id, decision, comment)

    step.status = decision
    step.comment = comment or ""
    step.approved_on = timestamp
    leave.updated_at = timestamp
    return refresh_derived(leave)


async def decide(
    leave_id: str,
    approver_id: str,
    decision: Union[LeaveStatus, str],
    comment: str = "",
    timestamp: Optional[datetime] = None,
) -> LeaveRequest:
    """
    Record approver_id's decision on the active step of a leave request.

    The write is conditional on the version that was read, so of two
    concurrent calls exactly one is applied. The loser is re-validated
    against the fresh document to report why it lost.
    """
    decision = normalize_decision(decision)
    timestamp = timestamp or datetime.utcnow()

    leave = await leave_store.get_leave(leave_id)
    apply_decision(leave, approver_id, decision, comment, timestamp)

    if not await leave_store.replace_if_unchanged(leave):
        logger.warning(
            "Conflicting write on leave %s by approver %s", leave_id, approver_id
        )
        fresh = await leave_store.find_leave(leave_id)
        if fresh is None:
            raise NotFound(f"Leave request {leave_id} not found")
        check_decision(fresh, approver_id, decision, comment)
        raise ConcurrentModification()

    logger.info(
        "Leave %s %s by %s; status=%s current_approver=%s",
        leave.id,
        decision.value,
        approver_id,
        leave.status.value,
        leave.current_approver,
    )
    return leave
