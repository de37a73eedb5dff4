from datetime import date, datetime

import pytest

from leave_portal.models.leave import LeaveStatus
from leave_portal.services import leave_store, leave_views
from leave_portal.services.approval_workflow import apply_decision
from tests.factories import create_leave, new_leave

pytestmark = pytest.mark.usefixtures("db")

T1 = datetime(2024, 6, 1, 10, 0)


def ids(leaves):
    return [l.reason for l in leaves]


async def test_pending_only_for_active_step():
    waiting_on_a = new_leave(["A", "B"])
    waiting_on_a.reason = "first"
    waiting_on_b = new_leave(["A", "B"])
    waiting_on_b.reason = "second"
    apply_decision(waiting_on_b, "A", LeaveStatus.APPROVED, "", T1)

    leaves = [waiting_on_a, waiting_on_b]

    assert ids(leave_views.pending_for_approver(leaves, "A")) == ["first"]
    assert ids(leave_views.pending_for_approver(leaves, "B")) == ["second"]


async def test_halted_request_is_pending_for_nobody():
    leave = new_leave(["A", "B"])
    apply_decision(leave, "A", LeaveStatus.DISAPPROVED, "no", T1)

    assert leave_views.pending_for_approver([leave], "A") == []
    assert leave_views.pending_for_approver([leave], "B") == []


async def test_history_includes_every_step_state():
    decided = new_leave(["A", "B"])
    decided.reason = "decided"
    apply_decision(decided, "A", LeaveStatus.APPROVED, "", T1)
    not_reached = new_leave(["C", "A"])
    not_reached.reason = "not reached"
    unrelated = new_leave(["C"])
    unrelated.reason = "unrelated"

    history = leave_views.history_for_approver([decided, not_reached, unrelated], "A")

    assert ids(history) == ["decided", "not reached"]


async def test_all_for_staff_member():
    mine = new_leave(staff_id="EMP1")
    theirs = new_leave(staff_id="EMP2")

    assert leave_views.all_for_staff_member([mine, theirs], "EMP2") == [theirs]


async def test_list_views_read_current_store_state():
    leave = await create_leave(["A", "B"])
    assert [l.id for l in await leave_views.list_pending("A")] == [leave.id]
    assert await leave_views.list_pending("B") == []

    stored = await leave_views.list_pending("A")
    apply_decision(stored[0], "A", LeaveStatus.APPROVED, "", T1)
    assert await leave_store.replace_if_unchanged(stored[0])

    assert await leave_views.list_pending("A") == []
    assert [l.id for l in await leave_views.list_pending("B")] == [leave.id]
    assert [l.id for l in await leave_views.list_history("A")] == [leave.id]
    assert [l.id for l in await leave_views.list_for_staff("EMP1")] == [leave.id]
    assert await leave_views.list_for_staff("EMP2") == []


async def test_staff_summary_counts_and_upcoming():
    pending = new_leave(["A"])
    approved_future = new_leave(["A"])
    approved_future.start_date = datetime(2024, 7, 1)
    apply_decision(approved_future, "A", LeaveStatus.APPROVED, "", T1)
    approved_past = new_leave(["A"])
    approved_past.start_date = datetime(2024, 5, 1)
    apply_decision(approved_past, "A", LeaveStatus.APPROVED, "", T1)
    rejected = new_leave(["A"])
    apply_decision(rejected, "A", LeaveStatus.DISAPPROVED, "no", T1)

    summary = leave_views.staff_summary(
        [pending, approved_future, approved_past, rejected], date(2024, 6, 15)
    )

    assert summary["total"] == 4
    assert summary["pending"] == 1
    assert summary["approved"] == 2
    assert summary["disapproved"] == 1
    assert len(summary["recent"]) == 3
    assert summary["upcoming"] == [approved_future]


async def test_approver_summary_uses_own_step():
    approved_by_a = new_leave(["A", "B"])
    approved_by_a.applied_on = datetime(2024, 6, 3)
    apply_decision(approved_by_a, "A", LeaveStatus.APPROVED, "", T1)
    apply_decision(approved_by_a, "B", LeaveStatus.DISAPPROVED, "no", T1)

    waiting = new_leave(["A"])
    waiting.applied_on = datetime(2024, 6, 4)

    last_month = new_leave(["A"])
    last_month.applied_on = datetime(2024, 5, 20)
    apply_decision(last_month, "A", LeaveStatus.APPROVED, "", T1)

    summary = leave_views.approver_summary(
        [approved_by_a, waiting, last_month], "A", date(2024, 6, 15)
    )

    assert summary == {
        "pending": 1,
        "this_month": {"approved": 1, "disapproved": 0},
    }
