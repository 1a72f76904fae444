"""Daily prompt timer."""

import asyncio
import datetime
import logging

logger = logging.getLogger(__name__)


def parse_time_of_day(value: str) -> datetime.time:
    """Parse ``HH:MM`` into a time; raises ValueError on anything else."""
    hours, sep, minutes = value.strip().partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit():
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return datetime.time(int(hours), int(minutes))


def next_fire_time(now: datetime.datetime, at: datetime.time) -> datetime.datetime:
    """Next instant at wall-clock *at*: later today, otherwise tomorrow."""
    fire = now.replace(hour=at.hour, minute=at.minute, second=at.second, microsecond=0)
    if fire <= now:
        fire += datetime.timedelta(days=1)
    return fire


async def run_daily(at: datetime.time, fire, clock=datetime.datetime.now, sleep=asyncio.sleep) -> None:
    """
    Await ``fire()`` every day at *at*, forever.

    *clock* and *sleep* are injectable for tests. A failing ``fire()`` is
    logged and the loop carries on with the next day.
    """
    while True:
        now = clock()
        target = next_fire_time(now, at)
        logger.info("Next daily prompt at %s", target.isoformat())
        await sleep((target - now).total_seconds())
        try:
            await fire()
        except Exception:
            logger.exception("Daily prompt failed")
