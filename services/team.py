"""Team role checks and invitation e-mails."""
import logging
from html import escape
from typing import Any, Dict, List, Optional

import httpx

from config import Settings

logger = logging.getLogger(__name__)

ADMIN = "admin"

ROLE_DESCRIPTIONS = {
    "reader": "View only access",
    "editor": "Can edit and comment",
    "admin": "Full access",
}

RESEND_URL = "https://api.resend.com/emails"


class TeamPolicyError(ValueError):
    """A role change or removal that would break a team invariant."""


def check_removal(target: Dict[str, Any], caller_id: str, admin_count: int) -> None:
    """Validate removing `target` (a user_roles row) on behalf of `caller_id`.

    Raises:
        TeamPolicyError: On self-removal or removal of the last admin.
    """
    if target.get("user_id") == caller_id:
        raise TeamPolicyError("You cannot remove yourself from the team")
    if target.get("role") == ADMIN and admin_count <= 1:
        raise TeamPolicyError("Cannot remove the last admin")


def check_role_change(
    target: Dict[str, Any], caller_id: str, new_role: str, admin_count: int
) -> None:
    """Validate changing `target`'s role to `new_role`.

    Raises:
        TeamPolicyError: On self-demotion or demotion of the last admin.
    """
    if target.get("role") != ADMIN or new_role == ADMIN:
        return
    if target.get("user_id") == caller_id:
        raise TeamPolicyError("You cannot remove your own admin role")
    if admin_count <= 1:
        raise TeamPolicyError("Cannot demote the last admin")


def has_role(roles: List[Dict[str, Any]], *wanted: str) -> bool:
    return any(r.get("role") in wanted for r in roles)


def invitation_html(inviter_email: str, role: str, link: str, message: Optional[str], days: int) -> str:
    inviter_email, link = escape(inviter_email), escape(link)
    message = escape(message) if message else message
    personal = f"<p><strong>Personal message:</strong><br/>{message}</p>" if message else ""
    return (
        "<h1>You've been invited to join Neurika</h1>"
        "<p>Hello!</p>"
        f"<p>{inviter_email} has invited you to join their Neurika team as a "
        f"<strong>{role}</strong> ({ROLE_DESCRIPTIONS[role]}).</p>"
        f"{personal}"
        "<p>Click the link below to accept the invitation:</p>"
        f'<a href="{link}">Accept Invitation</a>'
        f"<p>Or copy and paste this link into your browser:<br/>{link}</p>"
        f"<p>This invitation will expire in {days} days.</p>"
        "<p>Best regards,<br/>The Neurika Team</p>"
    )


async def send_invitation_email(settings: Settings, to: str, html: str) -> bool:
    """Send the invitation through Resend.

    Returns:
        True if the e-mail was accepted. Failures are logged, never raised.
    """
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set, invitation e-mail to %s not sent", to)
        return False

    try:
        async with httpx.AsyncClient(timeout=15.0) as client:
            response = await client.post(
                RESEND_URL,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
                json={
                    "from": settings.invite_from,
                    "to": [to],
                    "subject": "You've been invited to join Neurika",
                    "html": html,
                },
            )
    except httpx.RequestError as e:
        logger.error("Invitation e-mail to %s failed: %s", to, e)
        return False

    if response.status_code >= 400:
        logger.error("Invitation e-mail to %s rejected (%s): %s", to, response.status_code, response.text)
        return False

    logger.info("Invitation e-mail sent to %s", to)
    return True
