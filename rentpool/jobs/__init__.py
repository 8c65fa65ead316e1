"""Jobs module for scheduled tasks."""

from rentpool.jobs import scheduler

__all__ = ["scheduler"]
