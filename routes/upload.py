"""Dataset upload endpoint."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from supabase import Client

from config import Settings
from db.client import get_settings, get_supabase
from models.schemas import UploadResponse
from services.auth import CurrentUser, get_current_user
from services.storage import build_file_path, upload_file

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_MIME_TYPES = {
    "text/csv",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
ALLOWED_EXTENSIONS = (".csv", ".xls", ".xlsx")


def is_allowed(file_name: str, mime_type: str) -> bool:
    return mime_type in ALLOWED_MIME_TYPES or file_name.lower().endswith(ALLOWED_EXTENSIONS)


@router.post("/upload", response_model=UploadResponse)
async def upload_dataset(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
):
    """Store a CSV/Excel file and record its metadata.

    Steps:
    1. Reject anything that is not CSV/XLS/XLSX (by MIME type or extension)
    2. Upload the raw bytes under {user_id}/{epoch_ms}_{file_name}
    3. Insert the uploaded_files row and return its id
    """
    file_name = file.filename or "dataset.csv"
    mime_type = file.content_type or ""

    if not is_allowed(file_name, mime_type):
        raise HTTPException(status_code=400, detail="Please upload a CSV or Excel file.")

    try:
        file_bytes = await file.read()
        file_path = build_file_path(user.id, file_name)

        upload_file(supabase, settings.storage_bucket, file_path, file_bytes, mime_type)

        result = supabase.table("uploaded_files").insert({
            "user_id": user.id,
            "file_name": file_name,
            "file_path": file_path,
            "file_size": len(file_bytes),
            "mime_type": mime_type,
        }).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to record uploaded file")

        created = result.data[0]
        logger.info("Stored %s (%d bytes) at %s", file_name, len(file_bytes), file_path)

        return UploadResponse(
            file_id=created["id"],
            file_name=file_name,
            file_path=file_path,
            file_size=len(file_bytes),
            mime_type=mime_type,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Upload of %s failed: %s", file_name, e)
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")
