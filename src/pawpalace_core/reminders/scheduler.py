"""
Scheduler driver for vaccination reminder passes.

Passes run once at startup, once a day at a fixed local wall-clock time, and
on demand. Only one pass runs at a time; a trigger that arrives while a pass
is in flight is skipped and reported as such.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Awaitable, Callable, Optional, Set

from ..utils.config import ReminderSettings
from ..utils.datetime_utils import (
    get_current_utc,
    get_current_utc_date,
    next_daily_run,
    seconds_until,
)
from .service import ReminderRunResult, VaccinationReminderService

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Runs reminder passes on a daily cadence and on demand."""

    def __init__(
        self,
        service: VaccinationReminderService,
        settings: Optional[ReminderSettings] = None,
        clock: Callable[[], datetime] = get_current_utc,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            service: Reminder service that performs each pass
            settings: Trigger time, timezone and startup behavior
            clock: Source of the current aware datetime
            sleep: Coroutine used to wait for the next trigger
        """
        self.service = service
        self.settings = settings or ReminderSettings()
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None
        self._triggers: Set[asyncio.Task] = set()
        self.last_result: Optional[ReminderRunResult] = None

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def next_run_at(self) -> datetime:
        """When the next daily trigger fires."""
        return next_daily_run(
            self._clock(),
            self.settings.hour,
            self.settings.minute,
            self.settings.timezone,
        )

    async def trigger(
        self, as_of: Optional[date] = None, reason: str = "manual"
    ) -> ReminderRunResult:
        """
        Run a pass now unless one is already running.

        Returns:
            The pass result, or a result with ``skipped`` set when another
            pass was in flight
        """
        if self._lock.locked():
            logger.warning(f"Reminder pass ({reason}) skipped: a pass is already running")
            return ReminderRunResult(
                as_of=as_of or get_current_utc_date(),
                started_at=get_current_utc(),
                finished_at=get_current_utc(),
                success=False,
                skipped=True,
            )

        async with self._lock:
            logger.info(f"Reminder pass triggered ({reason})")
            result = await self.service.run(as_of)
            self.last_result = result
            return result

    def _spawn(self, reason: str) -> asyncio.Task:
        task = asyncio.create_task(self.trigger(reason=reason))
        self._triggers.add(task)
        task.add_done_callback(self._triggers.discard)
        return task

    async def _daily_loop(self) -> None:
        target = self.next_run_at()
        while True:
            delay = seconds_until(target, self._clock())
            logger.debug(f"Next reminder pass at {target.isoformat()} (in {delay:.0f}s)")
            await self._sleep(delay)
            self._spawn("daily")
            # never re-fire the same slot if the sleep woke early
            target = next_daily_run(
                max(self._clock(), target),
                self.settings.hour,
                self.settings.minute,
                self.settings.timezone,
            )

    def start(self) -> None:
        """Start the daily loop and, if enabled, an immediate startup pass."""
        if self.is_running:
            return

        self._loop_task = asyncio.create_task(self._daily_loop())
        logger.info(
            f"Reminder scheduler started; daily at {self.settings.hour:02d}:"
            f"{self.settings.minute:02d} {self.settings.timezone}"
        )
        if self.settings.run_on_startup:
            self._spawn("startup")

    async def stop(self) -> None:
        """Cancel the daily loop and any pass still running."""
        tasks = list(self._triggers)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._triggers.clear()
        logger.info("Reminder scheduler stopped")

    async def run_forever(self) -> None:
        """Start the scheduler and block until it is cancelled."""
        self.start()
        try:
            await self._loop_task
        finally:
            await self.stop()
