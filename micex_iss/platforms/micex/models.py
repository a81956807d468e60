"""Data models for ISS responses."""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Scalar = Union[int, float, str, None]
Record = Dict[str, Scalar]
# A market-data Record with an extra "node" key holding a MarketNode
MarketDataRow = Dict[str, Any]


class VenueInfo(BaseModel):
    """Engine/market pair a security is traded under."""
    model_config = ConfigDict(frozen=True)

    engine: str
    market: str


class SecurityDescriptor(BaseModel):
    """Security definition: description fields keyed by name, boards keyed by boardid."""
    description: Dict[str, Record] = Field(default_factory=dict)
    boards: Dict[str, Record] = Field(default_factory=dict)

    def first_board(self) -> Optional[Record]:
        return next(iter(self.boards.values()), None)


class MarketNode(BaseModel):
    """Normalized last price and turnover picked from whichever aliases a board reports."""
    last: Scalar = None
    volume: Scalar = None
    id: Scalar = None

    @classmethod
    def from_record(cls, record: Record) -> 'MarketNode':
        return cls(
            last=record.get('LAST') or record.get('LASTVALUE'),
            volume=record.get('VALTODAY_RUR') or record.get('VALTODAY') or record.get('VALTODAY_USD'),
            id=record.get('SECID'),
        )


def attach_node(row: Record) -> MarketDataRow:
    """Add the derived ``node`` entry to a decoded market-data row in place."""
    row['node'] = MarketNode.from_record(row)
    return row


def attach_nodes(rows: List[Record]) -> List[MarketDataRow]:
    for row in rows:
        attach_node(row)
    return rows
