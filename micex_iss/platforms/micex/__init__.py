from micex_iss.platforms.micex.cache import SecurityInfoCache
from micex_iss.platforms.micex.client import MicexClient
from micex_iss.platforms.micex.decoder import decode, decode_named_response, decode_table, index_by
from micex_iss.platforms.micex.exceptions import (
    MalformedResponse,
    MicexError,
    MissingParameter,
    NetworkError,
    NoBoardDefined,
    NotFound,
    ShapeMismatch,
    UpstreamError,
)
from micex_iss.platforms.micex.models import MarketNode, SecurityDescriptor, VenueInfo
from micex_iss.platforms.micex.transport import AiohttpTransport

__all__ = [
    'AiohttpTransport',
    'MalformedResponse',
    'MarketNode',
    'MicexClient',
    'MicexError',
    'MissingParameter',
    'NetworkError',
    'NoBoardDefined',
    'NotFound',
    'SecurityDescriptor',
    'SecurityInfoCache',
    'ShapeMismatch',
    'UpstreamError',
    'VenueInfo',
    'decode',
    'decode_named_response',
    'decode_table',
    'index_by',
]
