"""Repeating-task scheduler used to drive availability refreshes."""

from collections.abc import Awaitable, Callable
from typing import Optional, Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from structlog import get_logger

logger = get_logger(__name__)

RepeatingTask = Callable[[], Awaitable[object]]


class Scheduler(Protocol):
    """Schedules and cancels repeating async tasks."""

    def schedule_repeating(self, func: RepeatingTask, interval_seconds: float, job_id: str) -> None:
        ...

    def cancel(self, job_id: str) -> None:
        ...


class ApschedulerScheduler:
    """Scheduler backed by APScheduler's AsyncIOScheduler.

    Must be used from inside a running event loop.
    """

    def __init__(self, scheduler: Optional[AsyncIOScheduler] = None):
        self.scheduler = scheduler or AsyncIOScheduler()

    def schedule_repeating(self, func: RepeatingTask, interval_seconds: float, job_id: str) -> None:
        """Register func to run every interval_seconds, replacing any job with the same id."""
        self.scheduler.add_job(
            func,
            IntervalTrigger(seconds=interval_seconds),
            id=job_id,
            name=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info("Registered repeating job", job_id=job_id, interval_seconds=interval_seconds)

    def cancel(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
            logger.info("Cancelled repeating job", job_id=job_id)
        except JobLookupError:
            logger.warning("Job not found, nothing to cancel", job_id=job_id)

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
