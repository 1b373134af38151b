import logging
import os
from uuid import UUID

from celery import Celery

from .database import session_scope
from . import models, notify

logger = logging.getLogger(__name__)

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "memory://")
celery_app = Celery("tasks", broker=CELERY_BROKER_URL)
celery_app.conf.task_always_eager = (
    CELERY_BROKER_URL == "memory://" or os.getenv("TESTING") == "1"
)


@celery_app.task
def send_invitation_email(dataroom_id: str, invited_by_user_id: str, user_email: str, role: str):
    with session_scope() as db:
        dataroom = db.get(models.Dataroom, UUID(dataroom_id))
        inviter = db.get(models.User, UUID(invited_by_user_id))
        subject, body = notify.render_invitation(
            dataroom.name if dataroom else None,
            inviter.full_name if inviter else None,
            inviter.email if inviter else None,
            role,
        )
    logger.info("invitation email to %s: %s\n%s", user_email, subject, body)
    notify.send_email(user_email, subject, body)
    return {"success": True}


def schedule_invitation_email(dataroom_id, invited_by_user_id, user_email: str, role: str) -> None:
    """Dispatch the invitation email without waiting on delivery.

    Failures are logged and dropped; the grant that triggered the email stays.
    """

    args = (str(dataroom_id), str(invited_by_user_id), user_email, role)
    try:
        if celery_app.conf.task_always_eager:
            send_invitation_email(*args)
        else:
            send_invitation_email.delay(*args)
    except Exception:
        logger.exception("failed to dispatch invitation email to %s", user_email)
