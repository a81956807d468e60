"""
Protocols for strict typing across the codebase.
Replaces dynamic getattr/hasattr checks with compile-time guarantees.
"""
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

QueryValue = Union[int, float, str, bool, None]


@dataclass(frozen=True)
class TransportResponse:
    status: int
    reason: str
    body: bytes


@runtime_checkable
class Transport(Protocol):
    """HTTP collaborator the ISS client fetches through.

    Implementations raise ``NetworkError`` when no HTTP status was received
    and return every status (including non-200) as a ``TransportResponse``.
    """

    async def request(self, url: str, query: Optional[Mapping[str, QueryValue]] = None) -> TransportResponse: ...

    async def close(self) -> None: ...
