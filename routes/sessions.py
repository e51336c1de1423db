"""Chat session and message history endpoints."""
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from db.client import get_supabase
from models.schemas import (
    MessageCreate, MessageResponse,
    SessionCreate, SessionRename, SessionResponse,
)
from services.auth import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


def session_title(file_name: Optional[str] = None) -> str:
    return f"Analysis: {file_name}" if file_name else "New Analysis"


def get_owned_session(supabase: Client, session_id: str, user_id: str) -> Dict[str, Any]:
    """Session row owned by user_id.

    Raises:
        HTTPException: 404 if the session does not exist for this user
    """
    result = supabase.table("chat_sessions")\
        .select("*")\
        .eq("id", session_id)\
        .eq("user_id", user_id)\
        .execute()

    if not result.data:
        raise HTTPException(status_code=404, detail="Session not found")

    return result.data[0]


def append_message(
    supabase: Client, session_id: str, user_id: str, message: MessageCreate
) -> Dict[str, Any]:
    """Insert one chat_messages row and return it."""
    result = supabase.table("chat_messages").insert({
        "session_id": session_id,
        "user_id": user_id,
        **message.model_dump(),
    }).execute()

    if not result.data:
        raise HTTPException(status_code=500, detail="Failed to save message")

    return result.data[0]


def _to_message(row: Dict[str, Any]) -> MessageResponse:
    return MessageResponse(
        id=row["id"],
        session_id=row["session_id"],
        role=row["role"],
        content=row["content"],
        observation=row.get("observation"),
        interpretation=row.get("interpretation"),
        actionable_conclusion=row.get("actionable_conclusion"),
        chart=row.get("chart"),
        created_at=row["created_at"],
    )


@router.post("/sessions", response_model=SessionResponse)
async def create_session(
    session: SessionCreate,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Create a new chat session for a dataset."""
    try:
        result = supabase.table("chat_sessions").insert({
            "user_id": user.id,
            "file_id": session.file_id,
            "title": session_title(session.file_name),
        }).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create session")

        created = result.data[0]

        return SessionResponse(
            id=created["id"],
            title=created["title"],
            file_id=created.get("file_id"),
            file_name=session.file_name,
            created_at=created["created_at"],
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Creating session failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to create session: {str(e)}")


@router.get("/sessions", response_model=List[SessionResponse])
async def list_sessions(
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get the caller's sessions, newest first, with message counts."""
    try:
        result = supabase.table("chat_sessions")\
            .select("*")\
            .eq("user_id", user.id)\
            .order("created_at", desc=True)\
            .execute()

        sessions = result.data or []
        if not sessions:
            return []

        ids = [s["id"] for s in sessions]
        messages = supabase.table("chat_messages")\
            .select("session_id")\
            .in_("session_id", ids)\
            .execute()
        counts = Counter(m["session_id"] for m in messages.data or [])

        file_ids = [s["file_id"] for s in sessions if s.get("file_id")]
        file_names = {}
        if file_ids:
            files = supabase.table("uploaded_files")\
                .select("id, file_name")\
                .in_("id", file_ids)\
                .execute()
            file_names = {f["id"]: f["file_name"] for f in files.data or []}

        return [
            SessionResponse(
                id=s["id"],
                title=s.get("title") or "Untitled Session",
                file_id=s.get("file_id"),
                file_name=file_names.get(s.get("file_id")),
                message_count=counts.get(s["id"], 0),
                created_at=s["created_at"],
            )
            for s in sessions
        ]

    except Exception as e:
        logger.error("Listing sessions failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch sessions: {str(e)}")


@router.patch("/sessions/{session_id}", response_model=SessionResponse)
async def rename_session(
    session_id: str,
    body: SessionRename,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Rename a session."""
    title = body.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")

    try:
        get_owned_session(supabase, session_id, user.id)

        result = supabase.table("chat_sessions")\
            .update({"title": title})\
            .eq("id", session_id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to rename session")

        updated = result.data[0]

        return SessionResponse(
            id=updated["id"],
            title=updated["title"],
            file_id=updated.get("file_id"),
            created_at=updated["created_at"],
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Renaming session %s failed: %s", session_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to rename session: {str(e)}")


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Delete a session and its messages."""
    try:
        get_owned_session(supabase, session_id, user.id)

        supabase.table("chat_messages").delete().eq("session_id", session_id).execute()
        supabase.table("chat_sessions").delete().eq("id", session_id).execute()

        return {"success": True, "message": "Session deleted"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Deleting session %s failed: %s", session_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to delete session: {str(e)}")


@router.get("/sessions/{session_id}/messages", response_model=List[MessageResponse])
async def get_messages(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get all messages of a session, ordered by created_at asc."""
    try:
        get_owned_session(supabase, session_id, user.id)

        result = supabase.table("chat_messages")\
            .select("*")\
            .eq("session_id", session_id)\
            .order("created_at", desc=False)\
            .execute()

        return [_to_message(row) for row in result.data or []]

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Fetching messages for %s failed: %s", session_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch messages: {str(e)}")


@router.post("/sessions/{session_id}/messages", response_model=MessageResponse)
async def create_message(
    session_id: str,
    message: MessageCreate,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Append a message to a session."""
    try:
        get_owned_session(supabase, session_id, user.id)
        return _to_message(append_message(supabase, session_id, user.id, message))

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Saving message for %s failed: %s", session_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to create message: {str(e)}")
