"""Blocking HTTP client used for Last.fm API calls and cover downloads."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .. import __version__
from ..errors import TransportError

USER_AGENT = f"lastfm-jam-sync/{__version__}"


@dataclass(frozen=True)
class RemoteResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    content: bytes

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.content.decode('utf-8'))


class RemoteClient:
    """Thin wrapper around a requests session.

    No retries. Transport failures are raised as TransportError and the
    caller decides whether they are fatal.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        """Initialize the client.

        Args:
            logger: Logger instance
            timeout: Request timeout in seconds (None waits indefinitely)
            session: Optional preconfigured session
        """
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', USER_AGENT)

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> RemoteResponse:
        """Perform a GET request.

        Args:
            url: Request URL
            params: Optional query parameters

        Returns:
            RemoteResponse with the status code and body

        Raises:
            TransportError: If the request could not be completed. The message
                names the exception type, never the query string.
        """
        try:
            self.logger.debug(f"GET {url}")
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(url, type(e).__name__) from None

        return RemoteResponse(status_code=response.status_code, content=response.content)

    def close(self) -> None:
        self.session.close()
