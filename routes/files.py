"""Dataset profiling endpoints for the dashboard."""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client

from config import Settings
from db.client import get_settings, get_supabase
from models.schemas import ProfileResponse
from services.auth import CurrentUser, get_current_user
from services.profiler import profile_dataset, summarize
from services.storage import get_file_row, load_dataset_text
from services.tabular import parse_table

logger = logging.getLogger(__name__)

router = APIRouter()


def _profile_file(supabase: Client, settings: Settings, file_row: Dict[str, Any]) -> ProfileResponse:
    text = load_dataset_text(supabase, settings.storage_bucket, file_row)
    dataset = parse_table(text, max_rows=settings.profile_max_rows)

    if dataset is None:
        return ProfileResponse(
            status="no_data", file_id=file_row["id"], file_name=file_row.get("file_name")
        )

    profile = profile_dataset(dataset)
    return ProfileResponse(
        status="ready",
        file_id=file_row["id"],
        file_name=file_row.get("file_name"),
        profile=profile,
        summary=summarize(profile),
    )


@router.get("/files/{file_id}/profile", response_model=ProfileResponse)
async def get_file_profile(
    file_id: str,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
):
    """Parse and profile an uploaded dataset.

    Files with fewer than two lines come back with status "no_data".
    """
    try:
        file_row = get_file_row(supabase, file_id, user.id)
        if not file_row:
            raise HTTPException(status_code=404, detail="File not found")

        return _profile_file(supabase, settings, file_row)

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Profiling file %s failed: %s", file_id, e)
        raise HTTPException(status_code=500, detail=f"Profiling failed: {str(e)}")


@router.get("/dashboard/latest", response_model=ProfileResponse)
async def get_latest_dashboard(
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
):
    """Profile the dataset behind the caller's most recent session."""
    try:
        sessions = supabase.table("chat_sessions")\
            .select("id, file_id")\
            .eq("user_id", user.id)\
            .order("created_at", desc=True)\
            .limit(1)\
            .execute()

        if not sessions.data or not sessions.data[0].get("file_id"):
            return ProfileResponse(status="no_data")

        file_row = get_file_row(supabase, sessions.data[0]["file_id"], user.id)
        if not file_row:
            return ProfileResponse(status="no_data")

        return _profile_file(supabase, settings, file_row)

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Loading latest dashboard failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Dashboard failed: {str(e)}")
