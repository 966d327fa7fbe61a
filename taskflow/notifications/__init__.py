"""Assignment notifications for taskflow."""

from taskflow.notifications.notifier import notify_assignee, AssignmentNotification

__all__ = [
    "notify_assignee",
    "AssignmentNotification",
]
