"""
Outbound notifications.

Messages go through Django's mail framework, so the transport is chosen
by ``EMAIL_BACKEND`` (console by default, SMTP or anything else in
deployment).  Delivery failures are reported in the result rather than
raised; callers decide what a failed send means for them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    to: Optional[str]
    subject: str
    body: str


@dataclass(frozen=True)
class DeliveryResult:
    delivered: bool
    detail: str = ''


def send(notification: Notification) -> DeliveryResult:
    if not notification.to:
        logger.info("Notification '%s' skipped: no recipient", notification.subject)
        return DeliveryResult(False, 'No recipient email on file')
    try:
        sent = send_mail(
            notification.subject,
            notification.body,
            settings.DEFAULT_FROM_EMAIL,
            [notification.to],
        )
    except (OSError, ConnectionError) as e:
        logger.warning("Notification '%s' to %s failed: %s", notification.subject, notification.to, e)
        return DeliveryResult(False, str(e))
    logger.info("Notification '%s' sent to %s", notification.subject, notification.to)
    return DeliveryResult(bool(sent), 'sent' if sent else 'not sent')
