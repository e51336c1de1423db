"""Conversational analyst endpoint."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from models.schemas import ChatRequest, ChatResponse
from services.analyst import Analyst, get_analyst
from services.auth import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user: CurrentUser = Depends(get_current_user),
    analyst: Analyst = Depends(get_analyst),
):
    """Continue a conversation, optionally with the full CSV in context.

    The dataset analysis is only returned with the first message.
    """
    if not request.messages:
        raise HTTPException(status_code=400, detail="At least one message is required")

    try:
        return await analyst.converse(
            request.messages,
            csv_content=request.csv_content,
            is_first_message=request.is_first_message,
        )
    except Exception as e:
        logger.error("Chat for %s failed: %s", user.id, e)
        raise HTTPException(status_code=500, detail=f"Chat failed: {str(e)}")
