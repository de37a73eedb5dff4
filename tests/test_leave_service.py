import base64
from datetime import date, datetime

import pytest

from leave_portal.exceptions import (
    AlreadyFinalized,
    ConcurrentModification,
    EmptyChain,
    NotFound,
    NotRequestOwner,
)
from leave_portal.models.leave import Delegation, LeaveCreate, LeaveRequest, LeaveStatus, LeaveType, LeaveUpdate
from leave_portal.models.notification import Notification, NotificationType
from leave_portal.models.session import SessionContext
from leave_portal.models.staff import StaffRole
from leave_portal.services import leave_service, leave_store
from leave_portal.services.storage import storage_service
from tests.factories import create_staff

pytestmark = pytest.mark.usefixtures("db")

T1 = datetime(2024, 6, 1, 10, 0)


def session_for(staff_id: str, role=StaffRole.EMPLOYEE) -> SessionContext:
    return SessionContext(user_id=staff_id, name=f"{staff_id} Tester", role=role)


def leave_payload(**overrides) -> LeaveCreate:
    data = dict(
        leave_type=LeaveType.SL,
        start_date=date(2024, 6, 7),
        end_date=date(2024, 6, 10),
        reason="Medical appointment",
        address_during_leave="Home",
        emergency_contact_name="Sam",
        emergency_contact_number="+91-9000000000",
        delegation_of_duties=[
            Delegation(project="Payroll", deadline="2024-06-12", delegated_to="EMP9")
        ],
    )
    data.update(overrides)
    return LeaveCreate(**data)


@pytest.fixture
async def applicant():
    await create_staff("A", role=StaffRole.MANAGER)
    await create_staff("B", role=StaffRole.MANAGER)
    return await create_staff("EMP1", chain=["A", "B"])


async def test_create_builds_chain_and_counts_working_days(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    stored = await LeaveRequest.get(leave.id)
    assert stored.staff_id == "EMP1"
    assert stored.name == "Emp1 Tester"
    assert stored.no_of_days == 2
    assert stored.status == LeaveStatus.PENDING
    assert stored.current_approver == "A"
    assert [s.id for s in stored.approval_status] == ["A", "B"]
    assert stored.delegation_of_duties[0].project == "Payroll"


async def test_create_notifies_first_approver(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    notes = await Notification.find(Notification.recipient_id == "A").to_list()
    assert len(notes) == 1
    assert notes[0].type == NotificationType.LEAVE_APPLIED
    assert notes[0].leave_id == str(leave.id)
    assert await Notification.find(Notification.recipient_id == "B").count() == 0


async def test_create_without_approvers_fails():
    await create_staff("LONER")

    with pytest.raises(EmptyChain):
        await leave_service.create_leave_request(session_for("LONER"), leave_payload())

    assert await LeaveRequest.find().count() == 0


async def test_create_for_unknown_staff_fails():
    with pytest.raises(NotFound):
        await leave_service.create_leave_request(session_for("GHOST"), leave_payload())


async def test_create_stores_attachment(applicant, tmp_path, monkeypatch):
    monkeypatch.setattr(storage_service, "root", str(tmp_path))
    encoded = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode()

    leave = await leave_service.create_leave_request(
        session_for("EMP1"), leave_payload(attachment_base64=encoded)
    )

    assert leave.attachment.startswith("/uploads/leave-attachments/EMP1/")
    assert leave.attachment.endswith(".pdf")


async def test_decide_forwards_then_notifies_applicant(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    await leave_service.decide(str(leave.id), "A", LeaveStatus.APPROVED, "", T1)
    forwarded = await Notification.find(Notification.recipient_id == "B").to_list()
    assert [n.type for n in forwarded] == [NotificationType.LEAVE_FORWARDED]

    final = await leave_service.decide(str(leave.id), "B", LeaveStatus.APPROVED, "", T1)
    assert final.status == LeaveStatus.APPROVED
    to_applicant = await Notification.find(Notification.recipient_id == "EMP1").to_list()
    assert [n.type for n in to_applicant] == [NotificationType.LEAVE_APPROVED]


async def test_applicant_can_edit_pending_request(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    updated = await leave_service.update_request_fields(
        session_for("EMP1"),
        str(leave.id),
        LeaveUpdate(end_date=date(2024, 6, 14), reason="Surgery recovery"),
    )

    stored = await LeaveRequest.get(leave.id)
    assert updated.no_of_days == 6
    assert stored.no_of_days == 6
    assert stored.reason == "Surgery recovery"
    assert stored.end_date == datetime(2024, 6, 14)
    assert stored.approval_status == leave.approval_status
    assert stored.version == leave.version + 1


async def test_edit_rejects_inverted_dates(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    with pytest.raises(ValueError):
        await leave_service.update_request_fields(
            session_for("EMP1"), str(leave.id), LeaveUpdate(end_date=date(2024, 6, 1))
        )


async def test_only_applicant_can_edit(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    with pytest.raises(NotRequestOwner):
        await leave_service.update_request_fields(
            session_for("A"), str(leave.id), LeaveUpdate(reason="hijack")
        )


async def test_terminal_request_cannot_be_edited_or_deleted(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())
    await leave_service.decide(str(leave.id), "A", LeaveStatus.DISAPPROVED, "busy", T1)

    with pytest.raises(AlreadyFinalized):
        await leave_service.update_request_fields(
            session_for("EMP1"), str(leave.id), LeaveUpdate(reason="please")
        )
    with pytest.raises(AlreadyFinalized):
        await leave_service.delete_request(session_for("EMP1"), str(leave.id))

    assert await LeaveRequest.get(leave.id) is not None


async def test_delete_pending_request(applicant):
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    with pytest.raises(NotRequestOwner):
        await leave_service.delete_request(session_for("A"), str(leave.id))

    await leave_service.delete_request(session_for("EMP1"), str(leave.id))

    assert await LeaveRequest.get(leave.id) is None
    with pytest.raises(NotFound):
        await leave_service.delete_request(session_for("EMP1"), str(leave.id))


async def test_lost_edit_discards_new_attachment(applicant, tmp_path, monkeypatch):
    monkeypatch.setattr(storage_service, "root", str(tmp_path))
    leave = await leave_service.create_leave_request(session_for("EMP1"), leave_payload())

    async def lost_write(leave):
        return False

    monkeypatch.setattr(leave_store, "replace_if_unchanged", lost_write)
    encoded = "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode()

    with pytest.raises(ConcurrentModification):
        await leave_service.update_request_fields(
            session_for("EMP1"), str(leave.id), LeaveUpdate(attachment_base64=encoded)
        )

    attachments = tmp_path / "leave-attachments" / "EMP1"
    assert list(attachments.iterdir()) == []
    stored = await LeaveRequest.get(leave.id)
    assert stored.attachment is None
