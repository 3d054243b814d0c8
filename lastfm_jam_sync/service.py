"""Background service running scheduled loved-track syncs."""

import signal
import sys
import time
from pathlib import Path
from typing import Optional

from .config.settings import Settings
from .core.scheduler import SyncScheduler
from .core.sync import JamSyncService
from .errors import JamSyncError
from .utils.logger import setup_logger
from .utils.platform import is_windows


class JamSyncDaemon:
    """Runs the sync periodically until stopped."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize the service.

        Args:
            config_path: Path to configuration file (optional)
        """
        self.running = False
        self.config_path = config_path

        self.settings = Settings.from_file_or_default(config_path)

        self.logger = setup_logger(
            log_file=self.settings.logging.path,
            level=self.settings.logging.level,
            max_size_mb=self.settings.logging.max_size_mb,
            backup_count=self.settings.logging.backup_count,
            console=True
        )

        self.logger.info("Initializing Last.fm Jam Sync service")

        self.service = JamSyncService.from_settings(self.settings, self.logger)
        self.scheduler: Optional[SyncScheduler] = None

    def run_sync(self) -> None:
        """Main job: import new loved tracks."""
        try:
            self.logger.info("=== Starting scheduled sync ===")
            summary = self.service.sync(self.settings.webhook.limit)
            self.logger.info(f"=== Scheduled sync complete: {summary.as_dict()} ===")
        except JamSyncError as e:
            self.logger.error(f"Sync failed: {e}")
        except Exception as e:
            self.logger.error(f"Error in run_sync: {e}", exc_info=True)

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            self.shutdown()

        # Windows uses SIGBREAK, Linux/macOS use SIGTERM
        signal.signal(signal.SIGINT, signal_handler)

        if is_windows():
            signal.signal(signal.SIGBREAK, signal_handler)
        else:
            signal.signal(signal.SIGTERM, signal_handler)

    def start(self) -> None:
        """Start the scheduled service."""
        try:
            self.running = True
            self.setup_signal_handlers()

            self.scheduler = SyncScheduler(
                logger=self.logger,
                sync_function=self.run_sync,
                check_interval_minutes=self.settings.scheduler.check_interval_minutes,
                use_cron=self.settings.scheduler.use_cron_schedule,
                cron_schedule=self.settings.scheduler.cron_schedule
            )
            self.scheduler.start()

            next_run = self.scheduler.get_next_run_time()
            if next_run:
                self.logger.info(f"Next sync scheduled for: {next_run}")

            self.logger.info("Service started successfully")
            self.logger.info("Press Ctrl+C to stop")

            self.logger.info("Running initial sync...")
            self.run_sync()

            self._keep_alive()

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
            self.shutdown()
        except Exception as e:
            self.logger.error(f"Service error: {e}", exc_info=True)
            self.shutdown()
            raise

    def _keep_alive(self) -> None:
        """Keep the service alive.

        Windows doesn't support signal.pause(), so we use a sleep loop.
        """
        if is_windows():
            while self.running:
                time.sleep(1)
        else:
            while self.running:
                signal.pause()

    def shutdown(self) -> None:
        """Graceful shutdown."""
        if not self.running:
            return

        self.logger.info("Shutting down service...")
        self.running = False

        if self.scheduler:
            self.scheduler.stop()

        self.service.remote.close()
        self.logger.info("Service stopped")

        sys.exit(0)


def main():
    """Main entry point."""
    service = JamSyncDaemon()
    service.start()


if __name__ == "__main__":
    main()
