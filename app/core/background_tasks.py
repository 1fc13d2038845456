"""Background task that keeps booking lifecycles moving.

Once a day-boundary passes, approved bookings whose start date has arrived
become active, active bookings past their end date complete, and bookings
with money still owing after the grace period are flagged overdue.
"""

import asyncio
import logging
from datetime import UTC, datetime

from app.config import settings
from app.database import get_db_context
from app.services.booking_service import BookingService

logger = logging.getLogger(__name__)

# Flag to stop the background task
_stop_lifecycle_sweep = False


async def run_lifecycle_sweep(trigger: str = "scheduled") -> dict[str, int] | None:
    """Run one sweep over all bookings in its own session."""
    started_at = datetime.now(UTC)
    logger.info(f"Starting booking lifecycle sweep (trigger: {trigger})")

    try:
        async with get_db_context() as db:
            counts = await BookingService(db).sweep(now=started_at)
    except Exception as e:
        logger.error(f"Booking lifecycle sweep failed: {e}")
        return None

    duration_ms = int((datetime.now(UTC) - started_at).total_seconds() * 1000)
    logger.info(f"Booking lifecycle sweep completed in {duration_ms}ms: {counts}")
    if counts["failed"]:
        logger.warning(f"{counts['failed']} booking(s) could not be advanced")
    return counts


async def start_lifecycle_scheduler(interval_seconds: int | None = None) -> None:
    """Background task that sweeps bookings every ``interval_seconds``."""
    global _stop_lifecycle_sweep
    _stop_lifecycle_sweep = False
    interval = interval_seconds or settings.lifecycle_sweep_interval_seconds

    logger.info(f"Booking lifecycle scheduler started (every {interval}s)")

    while not _stop_lifecycle_sweep:
        await run_lifecycle_sweep(trigger="scheduled")

        # Wait for next interval (check stop flag every second)
        for _ in range(interval):
            if _stop_lifecycle_sweep:
                break
            await asyncio.sleep(1)

    logger.info("Booking lifecycle scheduler stopped")


def stop_lifecycle_scheduler() -> None:
    """Signal the lifecycle scheduler to stop."""
    global _stop_lifecycle_sweep
    _stop_lifecycle_sweep = True
