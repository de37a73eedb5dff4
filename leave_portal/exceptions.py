"""
Workflow Errors
Typed failures raised by the leave services and rendered by the API
"""
from fastapi import status


class LeaveWorkflowError(Exception):
    """Base class for recoverable leave workflow failures"""

    code = "leave_error"
    status_code = status.HTTP_400_BAD_REQUEST
    retryable = False
    default_message = "Leave request could not be processed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "detail": self.message,
            "retryable": self.retryable,
        }


class NotFound(LeaveWorkflowError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Leave request not found"


class EmptyChain(LeaveWorkflowError):
    code = "empty_chain"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "No reporting authority is configured for this staff member"


class AlreadyFinalized(LeaveWorkflowError):
    code = "already_finalized"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Leave request has already been finalized"


class NotCurrentApprover(LeaveWorkflowError):
    code = "not_current_approver"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not the current approver for this leave request"


class CommentRequired(LeaveWorkflowError):
    code = "comment_required"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "A comment is required when disapproving a leave request"


class InvalidDecision(LeaveWorkflowError):
    code = "invalid_decision"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Decision must be APPROVED or DISAPPROVED"


class NotRequestOwner(LeaveWorkflowError):
    code = "not_request_owner"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Only the applicant can change this leave request"


class ConcurrentModification(LeaveWorkflowError):
    code = "concurrent_modification"
    status_code = status.HTTP_409_CONFLICT
    retryable = True
    default_message = "Leave request was modified concurrently, please retry"


class StoreUnavailable(LeaveWorkflowError):
    code = "store_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True
    default_message = "Leave store is temporarily unavailable, please retry"
