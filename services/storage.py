"""Supabase Storage helpers for dataset upload/download."""
import time
from typing import Any, Dict, Optional

from supabase import Client

from services.tabular import read_table_text


def build_file_path(user_id: str, file_name: str, timestamp_ms: Optional[int] = None) -> str:
    """Per-user storage path: {user_id}/{epoch_ms}_{file_name}."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{user_id}/{timestamp_ms}_{file_name}"


def upload_file(
    supabase: Client, bucket: str, path: str, file_bytes: bytes, content_type: str
) -> str:
    """Upload file to Supabase Storage.

    Args:
        supabase: Supabase client
        bucket: Storage bucket name
        path: Object path inside the bucket
        file_bytes: File content as bytes
        content_type: MIME type stored with the object

    Returns:
        The object path inside the bucket
    """
    supabase.storage.from_(bucket).upload(
        path=path,
        file=file_bytes,
        file_options={"content-type": content_type or "application/octet-stream"},
    )

    return path


def download_file(supabase: Client, bucket: str, path: str) -> bytes:
    """Download file from Supabase Storage.

    Returns:
        File content as bytes
    """
    return supabase.storage.from_(bucket).download(path)


def get_file_row(supabase: Client, file_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    """Metadata row of an uploaded file owned by user_id, or None."""
    result = supabase.table("uploaded_files")\
        .select("*")\
        .eq("id", file_id)\
        .eq("user_id", user_id)\
        .execute()
    return result.data[0] if result.data else None


def load_dataset_text(supabase: Client, bucket: str, file_row: Dict[str, Any]) -> str:
    """Download an uploaded file and return it as comma-delimited text."""
    raw = download_file(supabase, bucket, file_row["file_path"])
    return read_table_text(raw, file_row.get("file_name"))
