"""HTTP webhook that triggers a loved-tracks sync."""

import logging
import secrets
import threading
from typing import Any, Dict, Optional, Protocol

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .config.settings import Settings
from .models.result import SyncSummary
from .utils.logger import get_logger

SYNC_PATH = "/webhook/sync-jams"


class SyncRunner(Protocol):
    def sync(self, limit: Optional[int] = None) -> SyncSummary:
        ...


def _secret_matches(provided: Optional[str], expected: str) -> bool:
    if provided is None:
        return False
    return secrets.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))


async def _provided_secret(request: Request) -> Optional[str]:
    """Read the secret from the form body, falling back to the query string."""
    content_type = request.headers.get('content-type', '')
    if content_type.startswith(('application/x-www-form-urlencoded', 'multipart/form-data')):
        form = await request.form()
        value = form.get('secret')
        if isinstance(value, str):
            return value
    return request.query_params.get('secret')


def _failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse({'success': False, 'error': error}, status_code=status_code)


def create_app(
    settings: Settings,
    service: Optional[SyncRunner] = None,
    logger: Optional[logging.Logger] = None
) -> FastAPI:
    """Build the webhook application.

    Args:
        settings: Loaded settings (secret and limit are read once, at build time)
        service: Sync service (default: built from settings)
        logger: Logger instance

    Returns:
        FastAPI application
    """
    logger = logger or get_logger('webhook')
    config = settings.sync_config()
    if service is None:
        from .core.sync import JamSyncService
        service = JamSyncService.from_settings(settings, logger)

    app = FastAPI(title="Last.fm Jam Sync")
    sync_lock = threading.Lock()

    @app.get("/health", tags=["system"])
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    @app.post(SYNC_PATH, tags=["sync"])
    async def sync_jams(request: Request) -> JSONResponse:
        expected = config.webhook_secret
        if expected:
            provided = await _provided_secret(request)
            if not _secret_matches(provided, expected):
                client = request.client.host if request.client else 'unknown'
                logger.warning(f"Rejected sync request from {client}: invalid secret")
                return _failure('Invalid secret', 403)

        if not sync_lock.acquire(blocking=False):
            return _failure('Synchronization already in progress', 409)

        try:
            summary = await run_in_threadpool(service.sync, config.webhook_limit)
        except Exception as e:
            logger.error(f"Webhook sync failed: {e}")
            return _failure(str(e), 500)
        finally:
            sync_lock.release()

        return JSONResponse({
            'success': True,
            'message': 'Jams synchronization completed',
            'data': summary.as_dict(),
        })

    return app
