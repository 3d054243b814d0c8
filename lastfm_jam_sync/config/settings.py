"""Configuration management for Last.fm Jam Sync."""

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from ..utils.platform import get_config_dir, get_default_content_dir

DEFAULT_API_URL = "https://ws.audioscrobbler.com/2.0/"
DEFAULT_LIMIT = 20


@dataclass
class LastfmConfig:
    """Last.fm API configuration."""

    api_key: Optional[str] = None
    user: Optional[str] = None
    base_url: str = DEFAULT_API_URL
    timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0 seconds")


@dataclass
class ContentConfig:
    """Where jam records are written."""

    root: Optional[Path] = None
    directory: str = "jams"
    timezone: str = "UTC"

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.root is None:
            self.root = get_default_content_dir()
        elif isinstance(self.root, str):
            self.root = Path(self.root).expanduser()

        if not self.directory or Path(self.directory).name != self.directory:
            raise ValueError("directory must be a single directory name")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {self.timezone}")

    @property
    def jams_path(self) -> Path:
        return self.root / self.directory


@dataclass
class WebhookConfig:
    """Webhook trigger configuration."""

    limit: int = DEFAULT_LIMIT
    secret: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 8085

    def __post_init__(self):
        """Validate configuration."""
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

        if not (0 < self.port < 65536):
            raise ValueError("port must be between 1 and 65535")


@dataclass
class SchedulerConfig:
    """Scheduler configuration."""

    check_interval_minutes: int = 60
    use_cron_schedule: bool = False
    cron_schedule: str = "0 */2 * * *"

    def __post_init__(self):
        """Validate configuration."""
        if self.check_interval_minutes < 5:
            raise ValueError("check_interval_minutes must be >= 5")


@dataclass
class CacheConfig:
    """Cache invalidation hook configuration."""

    invalidate_command: Optional[Union[List[str], str]] = None
    timeout: int = 60

    def __post_init__(self):
        """Normalize the command to an argv list."""
        if isinstance(self.invalidate_command, str):
            self.invalidate_command = shlex.split(self.invalidate_command)

        if not self.invalidate_command:
            self.invalidate_command = None

        if self.timeout < 1:
            raise ValueError("timeout must be >= 1 second")


@dataclass
class LoggingConfig:
    """Logging configuration."""

    path: Optional[Path] = None
    level: str = "INFO"
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.path is None:
            self.path = get_config_dir() / 'sync.log'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")


@dataclass(frozen=True)
class SyncConfig:
    """Explicit settings the sync orchestrator needs."""

    api_key: Optional[str]
    user: Optional[str]
    content_root: Path
    webhook_limit: int = DEFAULT_LIMIT
    webhook_secret: Optional[str] = None
    timezone: str = "UTC"


@dataclass
class Settings:
    """Main settings container."""

    lastfm: LastfmConfig = field(default_factory=LastfmConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def sync_config(self) -> SyncConfig:
        """Build the orchestrator configuration from these settings."""
        return SyncConfig(
            api_key=self.lastfm.api_key,
            user=self.lastfm.user,
            content_root=self.content.jams_path,
            webhook_limit=self.webhook.limit,
            webhook_secret=self.webhook.secret,
            timezone=self.content.timezone,
        )

    @classmethod
    def from_file(cls, config_path: Path) -> 'Settings':
        """Load settings from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls(
            lastfm=LastfmConfig(**(data.get('lastfm') or {})),
            content=ContentConfig(**(data.get('content') or {})),
            webhook=WebhookConfig(**(data.get('webhook') or {})),
            scheduler=SchedulerConfig(**(data.get('scheduler') or {})),
            cache=CacheConfig(**(data.get('cache') or {})),
            logging=LoggingConfig(**(data.get('logging') or {})),
        )

    @classmethod
    def from_file_or_default(cls, config_path: Optional[Path] = None) -> 'Settings':
        """Load settings from file or return defaults.

        Args:
            config_path: Path to configuration file (optional)

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        if config_path.exists():
            try:
                return cls.from_file(config_path)
            except Exception as e:
                logging.warning(f"Failed to load config from {config_path}: {e}")
                logging.warning("Using default configuration")
                return cls()
        else:
            logging.info(f"Config file not found at {config_path}, using defaults")
            return cls()

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save settings to YAML file.

        Args:
            config_path: Path to save configuration (default: config.yaml in config dir)
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'lastfm': {
                'api_key': self.lastfm.api_key,
                'user': self.lastfm.user,
                'base_url': self.lastfm.base_url,
                'timeout': self.lastfm.timeout
            },
            'content': {
                'root': str(self.content.root) if self.content.root else None,
                'directory': self.content.directory,
                'timezone': self.content.timezone
            },
            'webhook': {
                'limit': self.webhook.limit,
                'secret': self.webhook.secret,
                'host': self.webhook.host,
                'port': self.webhook.port
            },
            'scheduler': {
                'check_interval_minutes': self.scheduler.check_interval_minutes,
                'use_cron_schedule': self.scheduler.use_cron_schedule,
                'cron_schedule': self.scheduler.cron_schedule
            },
            'cache': {
                'invalidate_command': self.cache.invalidate_command,
                'timeout': self.cache.timeout
            },
            'logging': {
                'path': str(self.logging.path) if self.logging.path else None,
                'level': self.logging.level,
                'max_size_mb': self.logging.max_size_mb,
                'backup_count': self.logging.backup_count
            }
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
