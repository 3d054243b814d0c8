"""Scheduler for periodic loved-track syncs."""

import logging
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger


class SyncScheduler:
    """Manages scheduled syncs."""

    def __init__(
        self,
        logger: logging.Logger,
        sync_function: Callable[[], object],
        check_interval_minutes: int = 60,
        use_cron: bool = False,
        cron_schedule: str = "0 */2 * * *"
    ):
        """Initialize scheduler.

        Args:
            logger: Logger instance
            sync_function: Function to call for syncs (should take no args)
            check_interval_minutes: Sync interval in minutes (if not using cron)
            use_cron: Whether to use cron-style scheduling
            cron_schedule: Cron schedule string (if use_cron is True)
        """
        self.logger = logger
        self.sync_function = sync_function
        self.check_interval_minutes = check_interval_minutes
        self.use_cron = use_cron
        self.cron_schedule = cron_schedule

        self.scheduler = BackgroundScheduler()
        self._job_id = "jam_sync"

    def _build_trigger(self):
        if self.use_cron:
            self.logger.info(f"Starting scheduler with cron schedule: {self.cron_schedule}")
            return CronTrigger.from_crontab(self.cron_schedule)

        self.logger.info(
            f"Starting scheduler with interval: {self.check_interval_minutes} minutes"
        )
        return IntervalTrigger(minutes=self.check_interval_minutes)

    def start(self) -> None:
        """Start the scheduler."""
        try:
            # Never run two syncs at once
            self.scheduler.add_job(
                self._safe_sync_function,
                trigger=self._build_trigger(),
                id=self._job_id,
                name="Loved Tracks Sync",
                replace_existing=True,
                max_instances=1,
                coalesce=True
            )

            self.scheduler.start()
            self.logger.info("Scheduler started successfully")

        except Exception as e:
            self.logger.error(f"Failed to start scheduler: {e}")
            raise

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        try:
            if self.scheduler.running:
                self.logger.info("Stopping scheduler...")
                self.scheduler.shutdown(wait=True)
                self.logger.info("Scheduler stopped")
        except Exception as e:
            self.logger.error(f"Error stopping scheduler: {e}")

    def _safe_sync_function(self) -> None:
        """Run the sync without letting errors stop the scheduler."""
        try:
            self.logger.debug("Running scheduled sync")
            self.sync_function()
        except Exception as e:
            self.logger.error(f"Error in scheduled sync: {e}", exc_info=True)

    def get_next_run_time(self) -> Optional[str]:
        """Get the next scheduled run time.

        Returns:
            Next run time as string, or None if scheduler not running
        """
        job = self.scheduler.get_job(self._job_id)
        if job and job.next_run_time:
            return str(job.next_run_time)
        return None

    def is_running(self) -> bool:
        return self.scheduler.running
