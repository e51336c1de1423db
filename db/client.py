"""Supabase client construction and request-scoped accessors."""
from fastapi import Request
from supabase import Client, create_client

from config import Settings


def create_supabase(settings: Settings) -> Client:
    """Create the Supabase client used for the lifetime of the process.

    Raises:
        ValueError: If the Supabase URL or service key is not configured.
    """
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "Supabase is not configured. Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )
    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase(request: Request) -> Client:
    """FastAPI dependency returning the client built at startup."""
    return request.app.state.supabase


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the application settings."""
    return request.app.state.settings
