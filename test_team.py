"""Tests for team role guards and invitation rendering."""
import asyncio

import pytest

from config import Settings
from services.team import (
    TeamPolicyError,
    check_removal, check_role_change,
    invitation_html, send_invitation_email,
)

ADMIN_ROW = {"id": "m1", "user_id": "u1", "role": "admin"}
EDITOR_ROW = {"id": "m2", "user_id": "u2", "role": "editor"}


def test_admin_cannot_demote_self():
    with pytest.raises(TeamPolicyError, match="your own admin role"):
        check_role_change(ADMIN_ROW, "u1", "editor", admin_count=3)


def test_last_admin_cannot_be_demoted():
    with pytest.raises(TeamPolicyError, match="last admin"):
        check_role_change(ADMIN_ROW, "someone-else", "reader", admin_count=1)


def test_role_change_allowed():
    check_role_change(ADMIN_ROW, "someone-else", "editor", admin_count=2)
    check_role_change(EDITOR_ROW, "u1", "admin", admin_count=1)
    check_role_change(ADMIN_ROW, "u1", "admin", admin_count=1)


def test_cannot_remove_self():
    with pytest.raises(TeamPolicyError, match="remove yourself"):
        check_removal(EDITOR_ROW, "u2", admin_count=5)


def test_last_admin_cannot_be_removed_by_anyone():
    with pytest.raises(TeamPolicyError, match="last admin"):
        check_removal(ADMIN_ROW, "u9", admin_count=1)


def test_removal_allowed():
    check_removal(ADMIN_ROW, "u9", admin_count=2)
    check_removal(EDITOR_ROW, "u1", admin_count=1)


def test_invitation_html():
    html = invitation_html("boss@example.com", "editor", "https://app/auth?invite=t", "Welcome!", 7)

    assert "boss@example.com" in html
    assert "Can edit and comment" in html
    assert 'href="https://app/auth?invite=t"' in html
    assert "Welcome!" in html
    assert "expire in 7 days" in html


def test_invitation_html_escapes_user_values():
    html = invitation_html(
        "<b>boss</b>@example.com", "reader", 'https://evil"><script>', "<img src=x>", 7
    )

    assert "<script>" not in html
    assert "<img" not in html
    assert "&lt;b&gt;boss&lt;/b&gt;@example.com" in html
    assert 'href="https://evil&quot;&gt;&lt;script&gt;"' in html


def test_invitation_email_skipped_without_key():
    settings = Settings(resend_api_key=None)

    sent = asyncio.run(send_invitation_email(settings, "new@example.com", "<p>hi</p>"))

    assert sent is False
