"""
Approval Chain Builder
Turns a staff member's reporting authorities into the initial approval steps
"""
from typing import List

from leave_portal.exceptions import EmptyChain
from leave_portal.models.leave import ApprovalStep, LeaveStatus
from leave_portal.models.staff import Staff


def build_approval_chain(staff: Staff) -> List[ApprovalStep]:
    """
    Build one PENDING step per reporting authority, preserving order.

    Approver identity is copied into each step, so later profile changes
    do not rewrite the history of the request.
    """
    if not staff.reporting_authority:
        raise EmptyChain(
            f"Staff member {staff.staff_id} has no reporting authority configured"
        )

    return [
        ApprovalStep(
            id=authority.id,
            name=authority.name,
            designation=authority.designation,
            status=LeaveStatus.PENDING,
            comment="",
            approved_on=None,
        )
        for authority in staff.reporting_authority
    ]
