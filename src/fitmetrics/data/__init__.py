"""Loading activity logs from files."""

from fitmetrics.data.log_loader import ActivityLog, LogLoader

__all__ = ["ActivityLog", "LogLoader"]
