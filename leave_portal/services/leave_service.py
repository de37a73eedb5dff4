"""
Leave Service
Entry points used by the API: create, decide, list, edit and delete requests
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Union

from pymongo.errors import PyMongoError

from leave_portal.exceptions import (
    AlreadyFinalized,
    ConcurrentModification,
    NotFound,
    NotRequestOwner,
    StoreUnavailable,
)
from leave_portal.models.leave import LeaveCreate, LeaveRequest, LeaveStatus, LeaveUpdate
from leave_portal.models.session import SessionContext
from leave_portal.models.staff import Staff
from leave_portal.services import approval_workflow, leave_store, leave_views, notifications
from leave_portal.services.approval_chain import build_approval_chain
from leave_portal.services.leave_days import count_working_days, to_datetime
from leave_portal.services.storage import storage_service

logger = logging.getLogger(__name__)


async def _load_staff(staff_id: str) -> Staff:
    try:
        staff = await Staff.find_one(Staff.staff_id == staff_id)
    except PyMongoError as e:
        raise StoreUnavailable() from e
    if staff is None:
        raise NotFound(f"Staff member {staff_id} not found")
    return staff


def _store_attachment(data: str, staff_id: str) -> str:
    return storage_service.upload(data, f"leave-attachments/{staff_id}/{uuid.uuid4().hex}")


def _discard_attachment(url: Optional[str]):
    """Remove an attachment stored for a write that did not land"""
    if url:
        storage_service.remove(url)


async def create_leave_request(session: SessionContext, payload: LeaveCreate) -> LeaveRequest:
    """Build the approval chain for the applicant and store a new PENDING request"""
    staff = await _load_staff(session.user_id)
    steps = build_approval_chain(staff)

    attachment = None
    if payload.attachment_base64:
        attachment = _store_attachment(payload.attachment_base64, staff.staff_id)

    leave = LeaveRequest(
        staff_id=staff.staff_id,
        name=staff.full_name,
        leave_type=payload.leave_type,
        start_date=to_datetime(payload.start_date),
        end_date=to_datetime(payload.end_date),
        no_of_days=count_working_days(payload.start_date, payload.end_date),
        reason=payload.reason,
        address_during_leave=payload.address_during_leave,
        emergency_contact_name=payload.emergency_contact_name,
        emergency_contact_number=payload.emergency_contact_number,
        delegation_of_duties=payload.delegation_of_duties,
        attachment=attachment,
        approval_status=steps,
        current_approver=steps[0].id,
    )
    approval_workflow.refresh_derived(leave)

    await leave_store.insert_leave(leave)
    logger.info(
        "Leave %s created for %s with %d approver(s)", leave.id, leave.staff_id, len(steps)
    )

    await notifications.notify_next_approver(leave)
    return leave


async def decide(
    leave_id: str,
    approver_id: str,
    decision: Union[LeaveStatus, str],
    comment: str = "",
    timestamp: Optional[datetime] = None,
) -> LeaveRequest:
    """Apply an approver's decision, then notify whoever is affected"""
    leave = await approval_workflow.decide(leave_id, approver_id, decision, comment, timestamp)

    if leave.status == LeaveStatus.PENDING:
        await notifications.notify_next_approver(leave, forwarded=True)
    else:
        await notifications.notify_applicant(leave)
    return leave


async def get_request(leave_id: str) -> LeaveRequest:
    return await leave_store.get_leave(leave_id)


async def list_pending(approver_id: str) -> List[LeaveRequest]:
    return await leave_views.list_pending(approver_id)


async def list_history(approver_id: str) -> List[LeaveRequest]:
    return await leave_views.list_history(approver_id)


async def list_for_staff(staff_id: str) -> List[LeaveRequest]:
    return await leave_views.list_for_staff(staff_id)


def _check_editable(leave: LeaveRequest, session: SessionContext):
    if leave.staff_id != session.user_id:
        raise NotRequestOwner()
    if leave.is_terminal:
        raise AlreadyFinalized(f"Leave request {leave.id} is already {leave.status.value}")


async def update_request_fields(session: SessionContext, leave_id: str, patch: LeaveUpdate) -> LeaveRequest:
    """Edit descriptive fields of the applicant's own PENDING request"""
    leave = await leave_store.get_leave(leave_id)
    _check_editable(leave, session)

    changes = patch.model_dump(exclude_unset=True, exclude={"attachment_base64"})
    start = changes.pop("start_date", None) or leave.start_date
    end = changes.pop("end_date", None) or leave.end_date
    # Raises ValueError for an inverted range
    no_of_days = count_working_days(start, end)

    for field, value in changes.items():
        if value is not None:
            setattr(leave, field, getattr(patch, field))

    leave.start_date = to_datetime(start)
    leave.end_date = to_datetime(end)
    leave.no_of_days = no_of_days
    new_attachment = None
    if patch.attachment_base64:
        new_attachment = _store_attachment(patch.attachment_base64, leave.staff_id)
        leave.attachment = new_attachment
    leave.updated_at = datetime.utcnow()
    approval_workflow.refresh_derived(leave)

    try:
        written = await leave_store.replace_if_unchanged(leave)
    except StoreUnavailable:
        _discard_attachment(new_attachment)
        raise

    if not written:
        _discard_attachment(new_attachment)
        fresh = await leave_store.find_leave(leave_id)
        if fresh is None:
            raise NotFound(f"Leave request {leave_id} not found")
        _check_editable(fresh, session)
        raise ConcurrentModification()

    logger.info("Leave %s updated by %s", leave.id, session.user_id)
    return leave


async def delete_request(session: SessionContext, leave_id: str) -> None:
    """Hard delete the applicant's own PENDING request"""
    leave = await leave_store.get_leave(leave_id)
    _check_editable(leave, session)

    if not await leave_store.delete_if_pending(leave_id):
        fresh = await leave_store.find_leave(leave_id)
        if fresh is None:
            raise NotFound(f"Leave request {leave_id} not found")
        raise AlreadyFinalized(f"Leave request {leave_id} is already {fresh.status.value}")

    logger.info("Leave %s deleted by %s", leave_id, session.user_id)
