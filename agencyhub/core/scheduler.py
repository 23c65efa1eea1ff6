"""Scheduler for the periodic due-date automation check."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from agencyhub.core.config import Settings, constants, settings
from agencyhub.core.scheduler_tracker import JobTracker, job_tracker, retry_job_with_backoff
from agencyhub.services.automation_service import AutomationService


logger = logging.getLogger(__name__)


class DueDateScheduler:
    """Runs ``AutomationService.check_due_dates`` on a fixed interval.

    Decides *when* to check; the service decides *what* to check. Tests call
    ``run_once`` instead of waiting on the interval.
    """

    def __init__(
        self,
        *,
        service: AutomationService,
        config: Settings | None = None,
        scheduler: AsyncIOScheduler | None = None,
        tracker: JobTracker | None = None,
    ) -> None:
        self._service = service
        self._config = config or settings
        self._scheduler = scheduler or AsyncIOScheduler()
        self._tracker = tracker or job_tracker

    @property
    def job_id(self) -> str:
        return constants.DUE_DATE_CHECK_JOB_ID

    async def _check(self) -> None:
        await self._service.check_due_dates()

    async def run_once(self) -> bool:
        """Run one due-date check with retry and job tracking."""
        return await retry_job_with_backoff(
            self._check,
            self.job_id,
            max_retries=self._config.automation_job_max_retries,
            base_delay=self._config.automation_job_retry_base_delay,
            tracker=self._tracker,
        )

    def start(self) -> None:
        """Register the interval job and start the scheduler.

        This should be called during FastAPI app startup.
        """
        interval = self._config.automation_due_date_check_interval_seconds
        logger.info("Starting scheduler")

        self._scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(seconds=interval),
            id=self.job_id,
            name="Check Due-Date Automations",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled due-date automation check: every {interval}s")

        self._scheduler.start()
        logger.info("Scheduler started successfully")

    def stop(self) -> None:
        """Stop the scheduler.

        This should be called during FastAPI app shutdown.
        """
        logger.info("Stopping scheduler")
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
