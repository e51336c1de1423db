"""Team membership and invitation endpoints.

Every request re-reads the caller's roles from user_roles.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request
from supabase import Client

from config import Settings
from db.client import get_settings, get_supabase
from models.schemas import InvitationCreate, RoleUpdate, TeamListResponse
from services.auth import CurrentUser, get_current_user
from services.team import (
    ADMIN, TeamPolicyError,
    check_removal, check_role_change, has_role,
    invitation_html, send_invitation_email,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def caller_roles(supabase: Client, user_id: str) -> List[Dict[str, Any]]:
    result = supabase.table("user_roles").select("role").eq("user_id", user_id).execute()
    return result.data or []


def require_admin(supabase: Client, user: CurrentUser) -> None:
    if not has_role(caller_roles(supabase, user.id), ADMIN):
        raise HTTPException(status_code=403, detail="Insufficient permissions")


def admin_count(supabase: Client) -> int:
    result = supabase.table("user_roles").select("id").eq("role", ADMIN).execute()
    return len(result.data or [])


def get_member(supabase: Client, member_id: str) -> Dict[str, Any]:
    result = supabase.table("user_roles").select("*").eq("id", member_id).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Team member not found")
    return result.data[0]


@router.get("/team/members", response_model=TeamListResponse)
async def list_team_members(
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """List members (admins and editors); pending invitations for admins only."""
    try:
        roles = caller_roles(supabase, user.id)
        if not has_role(roles, ADMIN, "editor"):
            raise HTTPException(status_code=403, detail="Insufficient permissions")

        members = supabase.table("user_roles")\
            .select("id, user_id, role, created_at")\
            .execute()
        member_rows = members.data or []

        emails = {}
        user_ids = [m["user_id"] for m in member_rows]
        if user_ids:
            profiles = supabase.table("profiles")\
                .select("id, email")\
                .in_("id", user_ids)\
                .execute()
            emails = {p["id"]: p.get("email") for p in profiles.data or []}

        for member in member_rows:
            member["email"] = emails.get(member["user_id"])

        invitations = []
        if has_role(roles, ADMIN):
            invites = supabase.table("team_invitations")\
                .select("*")\
                .eq("status", "pending")\
                .order("created_at", desc=True)\
                .execute()
            invitations = invites.data or []

        logger.info("Fetched %d members and %d invitations", len(member_rows), len(invitations))

        return TeamListResponse(members=member_rows, invitations=invitations)

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Listing team members failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to fetch team members: {str(e)}")


@router.post("/team/invitations")
async def send_team_invitation(
    invite: InvitationCreate,
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
    settings: Settings = Depends(get_settings),
):
    """Create an invitation and e-mail its link.

    The invitation is kept even if the e-mail cannot be sent.
    """
    if not invite.email.strip():
        raise HTTPException(status_code=400, detail="Email and role are required")

    try:
        require_admin(supabase, user)

        token = str(uuid4())
        expires_at = datetime.now(timezone.utc) + timedelta(days=settings.invite_expiry_days)

        result = supabase.table("team_invitations").insert({
            "email": invite.email.strip(),
            "role": invite.role,
            "message": invite.message,
            "token": token,
            "invited_by": user.id,
            "expires_at": expires_at.isoformat(),
        }).execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create invitation")

        profile = supabase.table("profiles").select("email").eq("id", user.id).execute()
        inviter_email = (profile.data[0].get("email") if profile.data else None) \
            or user.email or "team@neurika.ai"

        link = f"{request.headers.get('origin', '')}/auth?invite={token}"
        email_sent = await send_invitation_email(
            settings,
            invite.email.strip(),
            invitation_html(inviter_email, invite.role, link, invite.message, settings.invite_expiry_days),
        )

        return {
            "success": True,
            "invitation": result.data[0],
            "email_sent": email_sent,
            "message": "Invitation sent successfully",
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error("Sending invitation failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to send invitation: {str(e)}")


@router.delete("/team/members/{member_id}")
async def remove_team_member(
    member_id: str,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Remove a member; never yourself and never the last admin."""
    try:
        require_admin(supabase, user)

        target = get_member(supabase, member_id)
        check_removal(target, user.id, admin_count(supabase))

        supabase.table("user_roles").delete().eq("id", member_id).execute()
        logger.info("Removed member %s", member_id)

        return {"success": True, "message": "Team member removed successfully"}

    except TeamPolicyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Removing member %s failed: %s", member_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to remove team member: {str(e)}")


@router.patch("/team/members/{member_id}/role")
async def update_member_role(
    member_id: str,
    body: RoleUpdate,
    user: CurrentUser = Depends(get_current_user),
    supabase: Client = Depends(get_supabase),
):
    """Change a member's role; no self-demotion and no demoting the last admin."""
    try:
        require_admin(supabase, user)

        target = get_member(supabase, member_id)
        check_role_change(target, user.id, body.new_role, admin_count(supabase))

        result = supabase.table("user_roles")\
            .update({"role": body.new_role})\
            .eq("id", member_id)\
            .execute()

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to update role")

        logger.info("Updated role for member %s to %s", member_id, body.new_role)

        return {
            "success": True,
            "member": result.data[0],
            "message": "Role updated successfully",
        }

    except TeamPolicyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error("Updating role of %s failed: %s", member_id, e)
        raise HTTPException(status_code=500, detail=f"Failed to update role: {str(e)}")
