"""Predefined Q&A override management."""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from db.client import get_supabase
from models.schemas import QAPairIn, QAPairResponse
from services.auth import CurrentUser, get_current_user
from services.qa_lookup import normalize_keywords

logger = logging.getLogger(__name__)

router = APIRouter()


def fetch_active_rules(supabase: Client, user_id: str) -> List[Dict[str, Any]]:
    """Active rules of a user, oldest first (the matching order)."""
    result = supabase.table("qa_pairs")\
        .select("*")\
        .eq("user_id", user_id)\
        .eq("is_active", True)\
        .order("created_at", desc=False)\
        .execute()
    return result.data or []


def _validated(qa: QAPairIn) -> Dict[str, Any]:
    keywords = normalize_keywords(qa.keywords)
    if not qa.question.strip() or not keywords:
        raise HTTPException(
            status_code=400, detail="Question and at least one keyword are required"
        )
    return {
        "question": qa.question.strip(),
        "keywords": keywords,
        "is_active": qa.is_active,
        "observation_content": qa.observation_content or None,
        "interpretation_content": qa.interpretation_content or None,
        "actionable_content": qa.actionable_content or None,
    }


def _to_response(row: Dict[str, Any]) -> QAPairResponse:
    return QAPairResponse(
        id=row["id"],
        question=row["question"],
        keywords=row.get("keywords") or [],
        is_active=row.get("is_active", True),
        observation_content=row.get("observation_content"),
        interpretation_content=row.get("interpretation_content"),
        actionable_content=row.get("actionable_content"),
        created_at=row["created_at"],
    )


@router.get("/qa-pairs", response_model=List[QAPairResponse])
async def list_qa_pairs(
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Get the caller's Q&A pairs, newest first."""
    try:
        result = supabase.table("qa_pairs")\
            .select("*")\
            .eq("user_id", user.id)\
            .order("created_at", desc=True)\
            .execute()
        return [_to_response(row) for row in result.data or []]

    except Exception as e:
        logger.error("Listing Q&A pairs failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to load Q&A pairs: {str(e)}")


@router.post("/qa-pairs", response_model=QAPairResponse)
async def create_qa_pair(
    qa: QAPairIn,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Create a Q&A pair."""
    data = _validated(qa)

    try:
        result = supabase.table("qa_pairs").insert({**data, "user_id": user.id}).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save Q&A pair")

        return _to_response(result.data[0])

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Creating Q&A pair failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to save Q&A pair: {str(e)}")


@router.put("/qa-pairs/{qa_id}", response_model=QAPairResponse)
async def update_qa_pair(
    qa_id: str,
    qa: QAPairIn,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Replace a Q&A pair's question, keywords, contents and active flag."""
    data = _validated(qa)

    try:
        result = supabase.table("qa_pairs")\
            .update(data)\
            .eq("id", qa_id)\
            .eq("user_id", user.id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=404, detail="Q&A pair not found")

        return _to_response(result.data[0])

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Updating Q&A pair %s failed: %s", qa_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to save Q&A pair: {str(e)}")


@router.delete("/qa-pairs/{qa_id}")
async def delete_qa_pair(
    qa_id: str,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Delete a Q&A pair."""
    try:
        result = supabase.table("qa_pairs")\
            .delete()\
            .eq("id", qa_id)\
            .eq("user_id", user.id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=404, detail="Q&A pair not found")

        return {"success": True, "message": "Q&A pair deleted"}

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Deleting Q&A pair %s failed: %s", qa_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to delete Q&A pair: {str(e)}")
