"""Worker process for scheduled carryover recalculation.

Runs an asyncio loop that recalculates every active employee's current-year
snapshot once a day. On January 1st the year just closed is recalculated
first so the new year inherits its final carryover. SIGINT/SIGTERM stop the
loop between employees.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import uuid
from datetime import date

from leave_engine.config import configure_logging, get_settings
from leave_engine.db import dispose_engine, get_session_factory
from leave_engine.services.records import get_record_store
from leave_engine.services.rules import get_rule_registry

logger = logging.getLogger(__name__)

RECALCULATION_INTERVAL_SECONDS = 86400  # 24 hours

# Recorded as performed_by on scheduled recalculations.
SYSTEM_ACTOR_ID = uuid.UUID(int=0)


def years_to_recalculate(today: date) -> list[int]:
    """The previous year on January 1st, then always the current year."""
    if today.month == 1 and today.day == 1:
        return [today.year - 1, today.year]
    return [today.year]


async def run_recalculation_loop(stop: asyncio.Event) -> None:
    """Recalculate daily until ``stop`` is set."""
    from leave_engine.services.carryover import bulk_recalculate

    logger.info("Carryover worker started")
    session_factory = get_session_factory()

    while not stop.is_set():
        today = date.today()
        for year in years_to_recalculate(today):
            if stop.is_set():
                break
            try:
                async with session_factory() as session:
                    result = await bulk_recalculate(
                        session,
                        get_record_store(),
                        get_rule_registry(),
                        year,
                        SYSTEM_ACTOR_ID,
                        today=today,
                        should_stop=stop.is_set,
                    )
                logger.info(
                    "Recalculation run for %d: succeeded=%d failed=%d skipped=%d cancelled=%s",
                    year,
                    result.succeeded,
                    result.failed,
                    result.skipped,
                    result.cancelled,
                )
            except Exception:
                logger.exception("Recalculation run failed for %d", year)

        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(stop.wait(), timeout=RECALCULATION_INTERVAL_SECONDS)

    logger.info("Carryover worker stopped")


async def _run() -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)
    try:
        await run_recalculation_loop(stop)
    finally:
        await dispose_engine()


def main() -> None:
    """Entry point for the worker process."""
    configure_logging(get_settings())
    asyncio.run(_run())


if __name__ == "__main__":
    main()
