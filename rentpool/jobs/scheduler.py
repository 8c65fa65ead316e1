"""
Job Scheduler Module.

Runs the expired request cleanup on an interval and once at startup.
"""

from datetime import datetime, timezone

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from config.settings import get_settings
from rentpool.pool.service import RequestPoolService, create_pool_service

scheduler_log = logger.bind(module="Scheduler")

# Scheduler instance
_scheduler = AsyncIOScheduler(timezone=get_settings().scheduler.timezone)

# Pool service (lazy initialized)
_service: RequestPoolService | None = None


async def get_service() -> RequestPoolService:
    """Get or create the pool service."""
    global _service
    if _service is None:
        _service = await create_pool_service()
    return _service


def set_service(service: RequestPoolService | None) -> None:
    """Use an already built pool service for scheduled jobs."""
    global _service
    _service = service


async def run_cleanup_job() -> None:
    """Scheduled job expiring requests that outlived their pool window."""
    try:
        scheduler_log.info("Running expired request cleanup...")
        service = await get_service()
        expired = await service.cleanup_expired_requests()
        scheduler_log.info(f"Cleanup done: {expired} requests expired")
    except Exception as e:
        scheduler_log.error(f"Cleanup job failed: {e}")


def setup_jobs() -> None:
    """Setup scheduler jobs."""
    settings = get_settings().scheduler

    _scheduler.add_job(
        run_cleanup_job,
        IntervalTrigger(
            minutes=settings.cleanup_interval_minutes,
            timezone=settings.timezone,
        ),
        id="cleanup_job",
        name=f"Expired request cleanup (every {settings.cleanup_interval_minutes} min)",
        replace_existing=True,
    )

    # Run immediately on startup
    _scheduler.add_job(
        run_cleanup_job,
        trigger="date",
        run_date=datetime.now(timezone.utc),
        id="cleanup_job_startup",
        name="Startup cleanup",
        replace_existing=True,
    )
    scheduler_log.info(
        f"Cleanup scheduled every {settings.cleanup_interval_minutes} min, "
        f"startup run queued"
    )


def start() -> None:
    """Start the scheduler."""
    setup_jobs()
    _scheduler.start()
    scheduler_log.info("Scheduler started")


def shutdown() -> None:
    """Shutdown the scheduler."""
    _scheduler.shutdown(wait=False)
    scheduler_log.info("Scheduler stopped")
