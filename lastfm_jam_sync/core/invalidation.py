"""Cache invalidation hooks called after jams were imported."""

import logging
import subprocess
import sys
from typing import List, Optional, Protocol

from ..config.settings import Settings
from ..errors import InvalidationError


class CacheInvalidator(Protocol):
    """Signals the host that cached renderings of jam collections are stale."""

    def invalidate(self) -> None:
        ...


class NullCacheInvalidator:
    """Invalidator used when the host has no cache to flush."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def invalidate(self) -> None:
        self.logger.debug("No cache invalidation command configured")


class CommandCacheInvalidator:
    """Runs a host command (e.g. a CMS cache-clear) to invalidate caches."""

    def __init__(
        self,
        command: List[str],
        logger: logging.Logger,
        timeout: int = 60
    ):
        """Initialize the invalidator.

        Args:
            command: Command argv to run
            logger: Logger instance
            timeout: Timeout in seconds
        """
        if not command:
            raise ValueError("command must not be empty")

        self.command = command
        self.logger = logger
        self.timeout = timeout

    def _get_subprocess_kwargs(self) -> dict:
        """Get subprocess kwargs with Windows compatibility.

        Returns:
            Dictionary of kwargs for subprocess.run
        """
        kwargs = {
            'capture_output': True,
            'text': True,
            'timeout': self.timeout
        }

        # Windows-specific: hide subprocess window
        if sys.platform == 'win32':
            startupinfo = subprocess.STARTUPINFO()
            startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
            startupinfo.wShowWindow = subprocess.SW_HIDE

            kwargs['startupinfo'] = startupinfo
            kwargs['creationflags'] = subprocess.CREATE_NO_WINDOW

        return kwargs

    def invalidate(self) -> None:
        """Run the invalidation command.

        Raises:
            InvalidationError: If the command cannot be run or exits non-zero
        """
        cmd = ' '.join(self.command)
        self.logger.debug(f"Running cache invalidation: {cmd}")

        try:
            result = subprocess.run(self.command, **self._get_subprocess_kwargs())
        except subprocess.TimeoutExpired as e:
            raise InvalidationError(f"Cache invalidation timed out after {self.timeout}s: {cmd}") from e
        except OSError as e:
            raise InvalidationError(f"Cache invalidation could not start: {e}") from e

        if result.returncode != 0:
            error_msg = (result.stderr or result.stdout or "Unknown error").strip()
            raise InvalidationError(
                f"Cache invalidation exited with code {result.returncode}: {error_msg[:500]}"
            )

        self.logger.info("Cache invalidated")


def build_invalidator(settings: Settings, logger: logging.Logger) -> CacheInvalidator:
    """Choose the invalidator for the configured cache command."""
    command: Optional[List[str]] = settings.cache.invalidate_command
    if command:
        return CommandCacheInvalidator(command, logger, timeout=settings.cache.timeout)
    return NullCacheInvalidator(logger)
