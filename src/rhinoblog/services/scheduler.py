"""Background cron-driven generation of posts.

This module provides the GenerationScheduler class that fires the scheduled
generation job whenever the configured cron expression comes due. The
schedule lives in memory and is replaced at runtime through ``update``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from rhinoblog.core.settings import settings
from rhinoblog.db.time import utcnow
from rhinoblog.services.cron import CronExpression, CronParseError
from rhinoblog.services.errors import ValidationError
from rhinoblog.services.generation_pipeline import run_scheduled_generation

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_CRON = "0 12 * * *"

Job = Callable[[], Awaitable[object]]


@dataclass(frozen=True)
class ScheduleConfig:
    """Whether scheduled generation is on, and when it fires."""

    enabled: bool = False
    cron_expression: str = DEFAULT_CRON


def parse_schedule(config: ScheduleConfig) -> CronExpression:
    """Validate the config's cron expression, raising ValidationError if unusable."""
    try:
        expression = CronExpression(config.cron_expression)
        expression.next_run()
    except CronParseError as exc:
        raise ValidationError(f"Invalid cron expression: {exc}") from exc
    return expression


class GenerationScheduler:
    """Runs ``job`` at each cron occurrence while the schedule is enabled.

    ``update`` swaps the schedule and wakes the loop, so a new expression
    takes effect immediately. The loop also re-checks every poll interval.
    """

    def __init__(
        self,
        job: Job,
        config: ScheduleConfig | None = None,
        poll_interval: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the scheduler.

        Args:
            job: Coroutine function executed on every firing.
            config: Initial schedule; defaults to the configured settings.
            poll_interval: Upper bound on how long the loop sleeps between checks.
            clock: Source of the current time.
        """
        initial = config or ScheduleConfig(
            enabled=settings.schedule_enabled,
            cron_expression=settings.schedule_cron,
        )
        self._expression = parse_schedule(initial)
        self._config = initial
        self._job = job
        self._clock = clock
        if poll_interval is None:
            poll_interval = settings.schedule_poll_interval_seconds
        self._poll_interval = max(0.01, float(poll_interval))
        self._next_fire: datetime | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self._changed = asyncio.Event()
        self.last_run_at: datetime | None = None
        self.run_count = 0
        self._reschedule()

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    @property
    def next_fire(self) -> datetime | None:
        """Next planned firing, or None while disabled."""
        return self._next_fire

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _reschedule(self) -> None:
        if self._config.enabled:
            self._next_fire = self._expression.next_run(self._clock())
        else:
            self._next_fire = None

    def update(self, config: ScheduleConfig) -> ScheduleConfig:
        """Replace the schedule; raises ValidationError for a bad expression."""
        expression = parse_schedule(config)
        self._expression = expression
        self._config = config
        self._reschedule()
        self._changed.set()
        logger.info(
            "Generation schedule updated: enabled=%s cron=%r next=%s",
            config.enabled,
            config.cron_expression,
            self._next_fire,
        )
        return self._config

    async def start(self) -> None:
        """Start the background scheduling loop."""

        if self._task is None or self._task.done():
            # Events bind to the loop that first waits on them.
            self._stopping = asyncio.Event()
            self._changed = asyncio.Event()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background scheduling loop."""

        if self._task is None:
            return

        self._stopping.set()
        self._changed.set()
        await self._task
        self._task = None

    async def run_now(self) -> None:
        """Execute the job once; failures are logged and swallowed."""
        try:
            await self._job()
        except Exception:  # noqa: BLE001
            logger.exception("Scheduled generation job failed")
        finally:
            self.last_run_at = self._clock()
            self.run_count += 1

    def _seconds_until_fire(self) -> float:
        if self._next_fire is None:
            return self._poll_interval
        remaining = (self._next_fire - self._clock()).total_seconds()
        return max(0.0, min(remaining, self._poll_interval))

    async def _run(self) -> None:
        while not self._stopping.is_set():
            due = self._next_fire
            if due is not None and self._clock() >= due:
                logger.info("Running scheduled generation due at %s", due.isoformat())
                await self.run_now()
                self._reschedule()
                continue

            self._changed.clear()
            try:
                await asyncio.wait_for(self._changed.wait(), timeout=self._seconds_until_fire())
            except TimeoutError:
                pass


class _GenerationSchedulerSingleton:
    """Singleton wrapper for GenerationScheduler."""

    _instance: GenerationScheduler | None = None

    @classmethod
    def get_instance(cls) -> GenerationScheduler:
        """Get or create the singleton GenerationScheduler instance."""
        if cls._instance is None:
            cls._instance = GenerationScheduler(run_scheduled_generation)
        return cls._instance


def get_generation_scheduler() -> GenerationScheduler:
    """Return the process-wide generation scheduler."""
    return _GenerationSchedulerSingleton.get_instance()
