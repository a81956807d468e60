"""
Decoding of ISS tabular sections.

Every table on the wire is ``{"columns": [...], "data": [[...], ...]}``; these
helpers turn it into a list of dict records keyed by column name.
"""
from typing import Any, Dict, List, Mapping, Sequence

from micex_iss.platforms.micex.exceptions import MalformedResponse, ShapeMismatch
from micex_iss.platforms.micex.models import Record, Scalar


def decode(columns: Sequence[str], rows: Sequence[Sequence[Scalar]]) -> List[Record]:
    """Zip every row against ``columns``, preserving row order."""
    expected = len(columns)
    records = []
    for index, row in enumerate(rows):
        if len(row) != expected:
            raise ShapeMismatch(index, expected, len(row))
        records.append(dict(zip(columns, row)))
    return records


def decode_table(table: Any, name: str = 'table') -> List[Record]:
    """Decode a single ``{columns, data}`` mapping."""
    if not isinstance(table, Mapping):
        raise MalformedResponse(f"Section '{name}' is not an object")
    columns = table.get('columns')
    data = table.get('data')
    if not isinstance(columns, list) or not isinstance(data, list):
        raise MalformedResponse(f"Section '{name}' lacks columns/data")
    return decode(columns, data)


def decode_section(response: Any, name: str) -> List[Record]:
    """Decode the table stored under ``name`` in a multi-table response."""
    if not isinstance(response, Mapping) or name not in response:
        raise MalformedResponse(f"Response has no '{name}' section")
    return decode_table(response[name], name)


def decode_named_response(wrapper: Any) -> List[Record]:
    """Unwrap a single-table response such as ``{"engines": {...}}`` and decode it."""
    if not isinstance(wrapper, Mapping) or len(wrapper) != 1:
        keys = list(wrapper) if isinstance(wrapper, Mapping) else type(wrapper).__name__
        raise MalformedResponse(f"Expected exactly one top-level key, got {keys}")
    name, table = next(iter(wrapper.items()))
    return decode_table(table, name)


def index_by(records: Sequence[Record], field: str) -> Dict[Scalar, Record]:
    """Key records by ``field``; on duplicates the later record wins."""
    return {record.get(field): record for record in records}
