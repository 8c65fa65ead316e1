"""
Request pool worker.

Connects to PostgreSQL and Redis and runs the pool maintenance scheduler.
"""

import asyncio
import logging
import signal
import sys

from dotenv import load_dotenv

# Load .env file at startup
load_dotenv()

from loguru import logger  # noqa: E402

from config.settings import get_settings  # noqa: E402


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(level: str) -> None:
    """Route loguru to stderr and stdlib loggers into loguru."""
    logger.configure(extra={"module": "Worker"})
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[module]: <14}</cyan> | <level>{message}</level>",
        level=level,
    )
    for name in ("apscheduler", "asyncpg"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


log = logger.bind(module="Worker")

from rentpool.connections.postgres import close_postgres  # noqa: E402
from rentpool.connections.redis import close_redis  # noqa: E402
from rentpool.jobs import scheduler  # noqa: E402
from rentpool.pool.service import create_pool_service  # noqa: E402


async def run() -> None:
    """Run the worker until SIGINT or SIGTERM."""
    service = await create_pool_service()
    scheduler.set_service(service)

    stats = await service.get_pool_stats()
    if stats:
        log.info(
            f"Startup: {stats.active_requests} active requests, "
            f"{stats.available_organizations} organizations with listings"
        )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    scheduler.start()
    try:
        await stop.wait()
    finally:
        scheduler.shutdown()
        await close_redis()
        await close_postgres()
        log.info("Worker stopped")


def main() -> None:
    """Console entry point."""
    configure_logging(get_settings().log_level)
    asyncio.run(run())


if __name__ == "__main__":
    main()
