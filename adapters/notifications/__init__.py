"""Notification collaborators for medication reminders."""

from .local import LocalReminderScheduler

__all__ = ["LocalReminderScheduler"]
