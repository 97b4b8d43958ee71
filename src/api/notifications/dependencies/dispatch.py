"""Process-wide dispatch engine.

The dispatcher is shared by request handlers and the outbox worker so
its per-channel concurrency limits apply to the whole process.
"""

from functools import lru_cache

from infrastructure.database.dependencies import get_session_factory
from infrastructure.settings import get_notification_settings, get_smtp_settings
from notifications.application.services import NotificationDispatcher
from notifications.infrastructure.channels.smtp import SmtpEmailSender
from notifications.infrastructure.channels.webhook import HttpWebhookSender
from notifications.infrastructure.store import SqlNotificationStore


@lru_cache
def get_notification_store() -> SqlNotificationStore:
    return SqlNotificationStore(get_session_factory())


@lru_cache
def get_notification_dispatcher() -> NotificationDispatcher:
    """Get the cached dispatch engine."""
    settings = get_notification_settings()
    return NotificationDispatcher(
        store=get_notification_store(),
        email_sender=SmtpEmailSender(
            get_smtp_settings(), timeout_seconds=settings.delivery_timeout_seconds
        ),
        webhook_sender=HttpWebhookSender(),
        delivery_timeout_seconds=settings.delivery_timeout_seconds,
        email_concurrency=settings.email_concurrency,
        webhook_concurrency=settings.webhook_concurrency,
        timezone=settings.timezone,
        timestamp_format=settings.timestamp_format,
    )
