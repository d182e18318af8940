"""Instance metadata service (IMDSv2) access.

Two narrow capabilities are exposed as protocols so the poll cycle can be
driven by test doubles:

* :class:`TokenProvider` obtains a session token (``PUT /latest/api/token``).
* :class:`MetadataReader` reads one metadata path with that token.

:class:`ImdsClient` implements both on top of :mod:`aiohttp`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from spotwatch._constants import TOKEN_HEADER, TOKEN_PATH, TOKEN_TTL_HEADER
from spotwatch._redact import mask_token
from spotwatch.config import MonitorConfig
from spotwatch.exceptions import MetadataTokenError, SpotwatchError, SpotwatchTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetadataResponse:
    """Status and text body of one metadata read."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status == 200


class TokenProvider(Protocol):
    """Structural interface for anything that can hand out an IMDSv2 token."""

    async def fetch_token(self) -> str:
        ...


class MetadataReader(Protocol):
    """Structural interface for reading a metadata path with a token."""

    async def read(self, path: str, token: str) -> MetadataResponse:
        ...


class ImdsClient:
    """Async IMDSv2 client.

    Usage::

        async with ImdsClient(config) as imds:
            token = await imds.fetch_token()
            response = await imds.read(INTERRUPTION_PATH, token)

    A fresh token is requested on every :meth:`fetch_token` call; nothing
    is cached between poll cycles.
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._timeout = aiohttp.ClientTimeout(total=config.imds_timeout)

    async def __aenter__(self) -> ImdsClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            raise SpotwatchError("Client not initialized. Use 'async with ImdsClient(...) as imds:'")
        return self._http_session

    async def fetch_token(self) -> str:
        """Request a session token valid for ``config.token_ttl`` seconds.

        Raises
        ------
        MetadataTokenError
            On network failure, timeout, non-200 status or an empty body.
        """
        http = self._require_session()
        url = f"{self._config.imds_base_url}{TOKEN_PATH}"
        headers = {TOKEN_TTL_HEADER: str(self._config.token_ttl)}

        _logger.debug("PUT %s", url)

        try:
            async with http.put(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text(errors="replace")
                if resp.status != 200:
                    raise MetadataTokenError(
                        f"HTTP {resp.status} from {TOKEN_PATH}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=TOKEN_PATH,
                    )
        except MetadataTokenError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise MetadataTokenError(
                f"Request to {TOKEN_PATH} failed: {exc!r}",
                endpoint=TOKEN_PATH,
            ) from exc

        token = text.strip()
        if not token:
            raise MetadataTokenError(f"Empty token from {TOKEN_PATH}", status_code=200, endpoint=TOKEN_PATH)

        _logger.debug("Obtained IMDS token %s (ttl=%ss)", mask_token(token), self._config.token_ttl)
        return token

    async def read(self, path: str, token: str) -> MetadataResponse:
        """GET a metadata *path* with *token*.

        Any HTTP answer is returned, whatever its status; the caller decides
        what a 404 means.

        Raises
        ------
        SpotwatchTransportError
            On network failure or timeout.
        """
        http = self._require_session()
        url = f"{self._config.imds_base_url}{path}"
        headers = {TOKEN_HEADER: token}

        _logger.debug("GET %s token=%s", url, mask_token(token))

        try:
            async with http.get(url, headers=headers, timeout=self._timeout) as resp:
                body = await resp.text(errors="replace")
                return MetadataResponse(status=resp.status, body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise SpotwatchTransportError(
                f"Request to {path} failed: {exc!r}",
                endpoint=path,
            ) from exc
