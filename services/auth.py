"""Caller resolution from Supabase access tokens."""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import Client

from db.client import get_supabase

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    id: str
    email: Optional[str] = None
    token: str = ""


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="No authorization header")
    if not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return authorization[7:].strip()


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    supabase: Client = Depends(get_supabase),
) -> CurrentUser:
    """Resolve the caller with Supabase Auth; never trusts client claims."""
    token = bearer_token(authorization)
    try:
        response = supabase.auth.get_user(token)
    except Exception as e:
        logger.warning("Token validation failed: %s", e)
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = getattr(response, "user", None)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return CurrentUser(id=user.id, email=getattr(user, "email", None), token=token)
