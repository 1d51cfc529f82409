"""Infrastructure implementations of application service interfaces."""

from projectgrid.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
    SendGridNotificationService,
    build_notification_service,
)

__all__ = [
    "LogOnlyNotificationService",
    "SendGridNotificationService",
    "build_notification_service",
]
