import logging
import os
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)

EMAIL_OUTBOX: list[tuple[str, str, str]] = []

ROLE_CAPABILITIES = {
    "owner": [
        "View all files and folders",
        "Edit and upload files",
        "Manage user access",
        "Delete the dataroom",
    ],
    "admin": [
        "View all files and folders",
        "Edit and upload files",
        "Manage user access",
    ],
    "editor": ["View all files and folders", "Edit and upload files"],
    "viewer": ["View all files and folders"],
}


def send_email(to_email: str, subject: str, message: str):
    if os.getenv("TESTING") == "1":
        EMAIL_OUTBOX.append((to_email, subject, message))
        return
    server = os.getenv("SMTP_SERVER")
    if not server:
        logger.info("SMTP_SERVER not set; email to %s not relayed", to_email)
        return
    from_addr = os.getenv("EMAIL_FROM", "noreply@example.com")
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = from_addr
    msg["To"] = to_email
    msg.set_content(message)
    with smtplib.SMTP(server) as s:
        s.send_message(msg)


def render_invitation(
    dataroom_name: str | None,
    inviter_name: str | None,
    inviter_email: str | None,
    role: str,
) -> tuple[str, str]:
    """Return ``(subject, body)`` for a dataroom invitation."""

    dataroom_label = dataroom_name or "a dataroom"
    inviter = inviter_name or inviter_email or "A colleague"
    login_url = os.getenv("APP_BASE_URL", "http://localhost:3000").rstrip("/") + "/login"
    capabilities = "\n".join(f"  - {line}" for line in ROLE_CAPABILITIES.get(role, []))
    subject = f'You\'ve been invited to access "{dataroom_label}"'
    body = (
        "Hello,\n\n"
        f'{inviter} has invited you to access the dataroom "{dataroom_label}" '
        f"with {role} permissions.\n\n"
        f"Your access level: {role.upper()}\n"
        "What you can do:\n"
        f"{capabilities}\n\n"
        "To access the dataroom, please sign in or create an account at:\n"
        f"{login_url}\n"
    )
    return subject, body
