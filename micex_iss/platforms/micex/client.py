import json
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from micex_iss.config.loader import config as default_config
from micex_iss.contracts.config import ConfigProtocol
from micex_iss.logger.logger import Logger
from micex_iss.platforms.micex.cache import SecurityInfoCache
from micex_iss.platforms.micex.decoder import decode_named_response, decode_section, index_by
from micex_iss.platforms.micex.exceptions import (
    MalformedResponse,
    MissingParameter,
    NoBoardDefined,
    NotFound,
    UpstreamError,
)
from micex_iss.platforms.micex.models import (
    MarketDataRow,
    Record,
    SecurityDescriptor,
    VenueInfo,
    attach_node,
    attach_nodes,
)
from micex_iss.platforms.micex.transport import AiohttpTransport
from micex_iss.utils.protocols import QueryValue, Transport

# Column used to rank boards of a single security
MARKETDATA_TURNOVER_COLUMN = 'VALTODAY_RUR'
# Column used to rank securities of a market listing
SECURITIES_ORDERING_COLUMN = 'VALTODAY'


def _required(name: str, value: Optional[str]) -> str:
    if value is None or value == '':
        raise MissingParameter(name)
    return value


def _numeric_key(column: str):
    """Sort key treating missing or non-numeric values as the smallest."""
    def key(row: Record) -> float:
        value = row.get(column)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        return float('-inf')
    return key


class MicexClient:
    """
    Async client for the MICEX/MOEX ISS API.

    Endpoints answer with column/row tables which are decoded into dict
    records. A few operations add ranking on top: picking the board with the
    highest turnover for one security, and grouping a market listing by
    security.
    """

    def __init__(
        self,
        logger: Logger,
        transport: Optional[Transport] = None,
        cache: Optional[SecurityInfoCache] = None,
        config: Optional[ConfigProtocol] = None,
    ) -> None:
        self.config = config or default_config
        self.logger = logger
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else AiohttpTransport(
            self.logger, timeout=self.config.REQUEST_TIMEOUT)
        self.cache = cache if cache is not None else SecurityInfoCache()
        self.api_base = self.config.API_BASE

    async def __aenter__(self):
        return self

    async def __aexit__(self, _exc_type, _exc_val, _exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self.transport.close()

    def build_url(self, path: str) -> str:
        return f"{self.api_base}{path}.json"

    async def _request(self, path: str, query: Optional[Mapping[str, QueryValue]] = None) -> Dict[str, Any]:
        url = self.build_url(path)
        response = await self.transport.request(url, dict(query or {}))

        if response.status != 200:
            self.logger.error(f"ISS request {url} failed with status {response.status} {response.reason}")
            error_cls = NotFound if response.status == 404 else UpstreamError
            raise error_cls(response.status, response.reason, url)

        try:
            return json.loads(response.body.decode('utf-8'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            self.logger.error(f"ISS request {url} returned invalid JSON: {e}")
            raise MalformedResponse(f"Invalid JSON from {url}: {e}") from e

    async def fetch_security_definition(self, security: str) -> SecurityDescriptor:
        """Description fields keyed by ``name`` and boards keyed by ``boardid``."""
        security = _required('security', security)
        response = await self._request(f"securities/{security}")

        description = index_by(decode_section(response, 'description'), 'name')
        boards = index_by(decode_section(response, 'boards'), 'boardid')
        try:
            return SecurityDescriptor(description=description, boards=boards)
        except ValidationError as e:
            raise MalformedResponse(f"Unexpected security definition for {security}: {e}") from e

    async def resolve_venue(self, security: str) -> VenueInfo:
        """
        Engine/market pair of the first board in the security definition.

        The first board is taken as listed upstream, without looking at
        trading volume. Results are memoized in ``self.cache``.
        """
        security = _required('security', security)
        venue = self.cache.get(security)
        if venue is not None:
            return venue

        async with self.cache.lock(security):
            venue = self.cache.get(security)
            if venue is not None:
                return venue

            definition = await self.fetch_security_definition(security)
            board = definition.first_board()
            if board is None:
                self.logger.warning(f"Security {security} has no boards in its definition")
                raise NoBoardDefined(security)

            engine, market = board.get('engine'), board.get('market')
            if not engine or not market:
                raise MalformedResponse(f"First board of {security} lacks engine/market: {board}")

            venue = VenueInfo(engine=engine, market=market)
            self.cache.set(security, venue)
            self.logger.debug(f"Resolved {security} to {venue.engine}/{venue.market}")
            return venue

    async def fetch_market_data(self, security: str) -> Optional[MarketDataRow]:
        """Market data for a security on the venue taken from its definition.

        Costs one extra definition request the first time a security is seen.
        """
        venue = await self.resolve_venue(security)
        return await self.fetch_market_data_for_venue(venue.engine, venue.market, security)

    async def fetch_market_data_for_venue(self, engine: str, market: str, security: str) -> Optional[MarketDataRow]:
        """Marketdata row of the board with the highest ruble turnover, or None if there are none."""
        response = await self.fetch_security_data_raw(engine, market, security)
        rows = decode_section(response, 'marketdata')
        if not rows:
            return None
        rows = sorted(rows, key=_numeric_key(MARKETDATA_TURNOVER_COLUMN), reverse=True)
        return attach_node(rows[0])

    async def fetch_security_data_raw(self, engine: str, market: str, security: str) -> Dict[str, Any]:
        """Undecoded response of the per-security endpoint of a venue."""
        engine = _required('engine', engine)
        market = _required('market', market)
        security = _required('security', security)
        return await self._request(f"engines/{engine}/markets/{market}/securities/{security}")

    async def fetch_securities_market_data(
        self,
        engine: str,
        market: str,
        query: Optional[Mapping[str, QueryValue]] = None,
    ) -> Dict[str, MarketDataRow]:
        """
        Marketdata of a venue grouped by security.

        For each SECID the board with the highest VALTODAY wins, among boards
        that report a last price. ``query`` is passed upstream except for
        ``first``, which limits the result to that many top securities by
        VALTODAY. Sorting defaults to VALTODAY descending.
        """
        query = dict(query or {})
        if not query.get('sort_column'):
            query['sort_order'] = 'desc'
            query['sort_column'] = SECURITIES_ORDERING_COLUMN
        first = query.pop('first', None)
        if first is not None:
            first = int(first)

        response = await self.fetch_securities_data_raw(engine, market, query)
        rows = attach_nodes(decode_section(response, 'marketdata'))

        ordering_key = _numeric_key(SECURITIES_ORDERING_COLUMN)
        grouped: Dict[str, MarketDataRow] = {}
        for row in rows:
            if not row['node'].last:
                continue
            secid = row.get('SECID')
            current = grouped.get(secid)
            if current is None or ordering_key(current) < ordering_key(row):
                grouped[secid] = row

        if first:
            winners = sorted(grouped.values(), key=ordering_key, reverse=True)[:first]
            grouped = index_by(winners, 'SECID')
        return grouped

    async def fetch_securities_data_raw(
        self,
        engine: str,
        market: str,
        query: Optional[Mapping[str, QueryValue]] = None,
    ) -> Dict[str, Any]:
        """Undecoded response of the securities listing of a venue."""
        engine = _required('engine', engine)
        market = _required('market', market)
        return await self._request(f"engines/{engine}/markets/{market}/securities", query)

    async def fetch_securities_definitions(self, query: Optional[Mapping[str, QueryValue]] = None) -> List[Record]:
        return decode_named_response(await self._request("securities", query))

    async def fetch_boards(self, engine: str, market: str) -> List[Record]:
        engine = _required('engine', engine)
        market = _required('market', market)
        return decode_named_response(await self._request(f"engines/{engine}/markets/{market}/boards"))

    async def fetch_markets(self, engine: str) -> List[Record]:
        engine = _required('engine', engine)
        return decode_named_response(await self._request(f"engines/{engine}/markets"))

    async def fetch_engines(self) -> List[Record]:
        return decode_named_response(await self._request("engines"))
