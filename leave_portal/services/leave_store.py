"""
Leave Request Store
Persistence primitives for leave documents with optimistic concurrency
"""
import logging
from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from leave_portal.exceptions import NotFound, StoreUnavailable
from leave_portal.models.leave import LeaveRequest, LeaveStatus

logger = logging.getLogger(__name__)


def parse_leave_id(leave_id: Any) -> PydanticObjectId:
    """Convert an external id to an ObjectId, treating malformed ids as unknown"""
    try:
        return PydanticObjectId(leave_id)
    except (InvalidId, TypeError):
        raise NotFound(f"Leave request {leave_id} not found")


async def find_leave(leave_id: Any) -> Optional[LeaveRequest]:
    object_id = parse_leave_id(leave_id)
    try:
        return await LeaveRequest.get(object_id)
    except PyMongoError as e:
        logger.error("Failed to load leave %s: %s", leave_id, e)
        raise StoreUnavailable() from e


async def get_leave(leave_id: Any) -> LeaveRequest:
    leave = await find_leave(leave_id)
    if leave is None:
        raise NotFound(f"Leave request {leave_id} not found")
    return leave


async def find_leaves(query: Dict[str, Any]) -> List[LeaveRequest]:
    try:
        return await LeaveRequest.find(query).sort("-applied_on").to_list()
    except PyMongoError as e:
        logger.error("Failed to query leaves %s: %s", query, e)
        raise StoreUnavailable() from e


async def insert_leave(leave: LeaveRequest) -> LeaveRequest:
    try:
        await leave.insert()
    except PyMongoError as e:
        logger.error("Failed to insert leave for %s: %s", leave.staff_id, e)
        raise StoreUnavailable() from e
    return leave


async def replace_if_unchanged(leave: LeaveRequest) -> bool:
    """
    Write the whole document only if the stored version still matches the
    version it was loaded with. Returns False when another write got there
    first; the in-memory version is left untouched in that case.
    """
    expected_version = leave.version
    leave.version = expected_version + 1
    fields = leave.model_dump(exclude={"id", "revision_id"})

    try:
        result = await LeaveRequest.find_one(
            {"_id": leave.id, "version": expected_version}
        ).update({"$set": fields})
    except PyMongoError as e:
        leave.version = expected_version
        logger.error("Failed to write leave %s: %s", leave.id, e)
        raise StoreUnavailable() from e

    if result.matched_count == 0:
        leave.version = expected_version
        return False
    return True


async def delete_if_pending(leave_id: Any) -> bool:
    """Hard delete a request only while its aggregate status is PENDING"""
    object_id = parse_leave_id(leave_id)
    try:
        result = await LeaveRequest.find_one(
            {"_id": object_id, "status": LeaveStatus.PENDING.value}
        ).delete()
    except PyMongoError as e:
        logger.error("Failed to delete leave %s: %s", leave_id, e)
        raise StoreUnavailable() from e
    return bool(result and result.deleted_count)
