"""
Notification service layer.

Each module corresponds to one notification concern and works on
Notification rows directly. Reminder eligibility and deduplication are
decided by the compliance app before anything here is called.
"""

# =====================================================
# DEADLINE REMINDERS (IN-APP)
# =====================================================
from .deadline import (
    InAppNotifier,
    build_reminder_message,
)

# =====================================================
# DEADLINE REMINDERS (EMAIL)
# =====================================================
from .mailer import (
    DeadlineMailer,
)

# =====================================================
# CLEANUP
# =====================================================
from .cleanup import (
    cleanup_archived_notifications,
    cleanup_expired_reminder_notifications,
    run_notification_cleanup,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # In-app
    "InAppNotifier",
    "build_reminder_message",

    # Email
    "DeadlineMailer",

    # Cleanup
    "cleanup_archived_notifications",
    "cleanup_expired_reminder_notifications",
    "run_notification_cleanup",
]
