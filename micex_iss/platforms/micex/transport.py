import asyncio
from typing import Dict, Mapping, Optional

import aiohttp

from micex_iss.logger.logger import Logger
from micex_iss.platforms.micex.exceptions import NetworkError
from micex_iss.utils.protocols import QueryValue, TransportResponse


class AiohttpTransport:
    """Transport over an aiohttp session.

    A session passed in by the caller is borrowed and left open on ``close()``;
    a session created here is owned and closed with the transport.
    """

    def __init__(self, logger: Logger, session: Optional[aiohttp.ClientSession] = None,
                 timeout: Optional[float] = None) -> None:
        self.logger = logger
        self.session = session
        self._external_session = session is not None
        self.timeout = timeout

    async def __aenter__(self):
        self._ensure_session()
        return self

    async def __aexit__(self, _exc_type, _exc_val, _exc_tb):
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure an open session exists and return it."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._external_session = False
        return self.session

    @staticmethod
    def serialize_query(query: Optional[Mapping[str, QueryValue]]) -> Dict[str, str]:
        """Render query values as query-string text; ``None`` values are dropped."""
        params = {}
        for key, value in (query or {}).items():
            if value is None:
                continue
            if isinstance(value, bool):
                params[key] = 'true' if value else 'false'
            else:
                params[key] = str(value)
        return params

    async def request(self, url: str, query: Optional[Mapping[str, QueryValue]] = None) -> TransportResponse:
        session = self._ensure_session()
        params = self.serialize_query(query)
        kwargs = {}
        if self.timeout is not None:
            kwargs['timeout'] = aiohttp.ClientTimeout(total=self.timeout)

        self.logger.debug(f"GET {url} params={params}")
        try:
            async with session.get(url, params=params, **kwargs) as response:
                body = await response.read()
                return TransportResponse(status=response.status, reason=response.reason or '', body=body)
        except asyncio.TimeoutError as e:
            self.logger.error(f"Timeout error when requesting {url}: {e}")
            raise NetworkError(url, "timeout") from e
        except aiohttp.ClientError as e:
            self.logger.error(f"Network error when requesting {url}: {type(e).__name__} - {e}")
            raise NetworkError(url, f"{type(e).__name__}: {e}") from e

    async def close(self) -> None:
        """Close the aiohttp session if this transport created it."""
        if self.session and not self._external_session:
            self.logger.debug(f"Closing {self.__class__.__name__} session")
            await self.session.close()
        self.session = None
