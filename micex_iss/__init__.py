"""Async client for the MICEX/MOEX ISS market-data API."""

from micex_iss.platforms.micex import (
    AiohttpTransport,
    MalformedResponse,
    MarketNode,
    MicexClient,
    MicexError,
    MissingParameter,
    NetworkError,
    NoBoardDefined,
    NotFound,
    SecurityDescriptor,
    SecurityInfoCache,
    ShapeMismatch,
    UpstreamError,
    VenueInfo,
)

__version__ = "0.1.0"

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
]
