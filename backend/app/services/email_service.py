"""
Transactional email through the Brevo HTTP API.
"""
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional
import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape
from app.core.config import settings

logger = logging.getLogger(__name__)

templates = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent.parent / "templates"),
    autoescape=select_autoescape(["html"])
)


def _format_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}" if value else ""


def render_trip_invite_email(
    invitee_name: str,
    inviter_name: str,
    trip_title: str,
    trip_description: Optional[str],
    trip_dates: str,
    role: str,
    invite_link: str,
    expires_at: str
) -> str:
    """Build the HTML body of a trip invitation."""
    return templates.get_template("emails/trip_invite.html").render(
        invitee_name=invitee_name,
        inviter_name=inviter_name,
        trip_title=trip_title,
        trip_description=trip_description,
        trip_dates=trip_dates,
        role=role,
        invite_link=invite_link,
        expires_at=expires_at,
    )


def send_trip_invite_email(
    to_email: str,
    inviter_name: str,
    trip_title: str,
    trip_description: Optional[str],
    start_date: date,
    end_date: date,
    role: str,
    token: str,
    expires_at: datetime
) -> bool:
    """
    Send the invite email. Returns False when email is not configured.

    Raises httpx.HTTPError on transport or API failures; callers decide
    whether that is fatal.
    """
    if not settings.BREVO_API_KEY or not settings.BREVO_SENDER_EMAIL:
        logger.warning("BREVO_API_KEY or BREVO_SENDER_EMAIL not configured. Skipping invite email.")
        return False

    invite_link = f"{settings.APP_BASE_URL.rstrip('/')}/invites/{token}"
    body = render_trip_invite_email(
        invitee_name=to_email.split("@")[0],
        inviter_name=inviter_name,
        trip_title=trip_title,
        trip_description=trip_description,
        trip_dates=f"{_format_date(start_date)} - {_format_date(end_date)}",
        role=role,
        invite_link=invite_link,
        expires_at=f"{_format_date(expires_at)} {expires_at:%H:%M}",
    )

    payload = {
        "sender": {"email": settings.BREVO_SENDER_EMAIL, "name": settings.BREVO_SENDER_NAME},
        "to": [{"email": to_email}],
        "subject": f'{inviter_name} invited you to join "{trip_title}" on {settings.APP_NAME}',
        "htmlContent": body,
    }
    headers = {"api-key": settings.BREVO_API_KEY, "accept": "application/json"}

    response = httpx.post(settings.BREVO_API_URL, json=payload, headers=headers, timeout=10.0)
    response.raise_for_status()
    logger.info(f"Invite email sent to {to_email} for trip '{trip_title}'")
    return True
