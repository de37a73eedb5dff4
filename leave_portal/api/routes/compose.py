"""
Smart Compose Routes
AI word suggestions for the leave form
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from leave_portal.ai.smart_compose import ComposeKind, smart_compose_service
from leave_portal.models.session import SessionContext
from leave_portal.api.routes.auth import get_current_session


router = APIRouter()


class SuggestRequest(BaseModel):
    """Suggestion request"""
    text: str
    kind: ComposeKind = "reason"


class SuggestResponse(BaseModel):
    """Suggestion response"""
    suggestion: str


@router.post("/suggest", response_model=SuggestResponse)
async def suggest_word(
    request: SuggestRequest,
    session: SessionContext = Depends(get_current_session)
):
    """
    Suggest the next word for a partially typed reason or project description
    """
    suggestion = await smart_compose_service.suggest(request.text, request.kind)
    return {"suggestion": suggestion}
