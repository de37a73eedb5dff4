"""
API error handlers
Renders workflow failures as JSON the client can act on
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from leave_portal.exceptions import LeaveWorkflowError

logger = logging.getLogger(__name__)


async def leave_workflow_error_handler(request: Request, exc: LeaveWorkflowError):
    if exc.retryable:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(LeaveWorkflowError, leave_workflow_error_handler)
