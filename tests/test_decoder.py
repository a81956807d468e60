import pytest

from micex_iss.platforms.micex.decoder import (
    decode,
    decode_named_response,
    decode_section,
    decode_table,
    index_by,
)
from micex_iss.platforms.micex.exceptions import MalformedResponse, ShapeMismatch
from tests.stubs import table


def test_decode_zips_rows_in_order():
    assert decode(['A', 'B'], [[1, 2], [3, 4]]) == [{'A': 1, 'B': 2}, {'A': 3, 'B': 4}]


def test_decoded_records_rezip_to_original_rows():
    columns = ['SECID', 'BOARDID', 'LAST', 'VALTODAY']
    rows = [['SBER', 'TQBR', 301.5, 1200000], ['GAZP', 'TQBR', None, 0], ['LKOH', 'SMAL', 7000, None]]

    records = decode(columns, rows)

    assert [[record[c] for c in columns] for record in records] == rows


def test_decode_empty_table():
    assert decode(['A'], []) == []


def test_decode_rejects_short_row():
    with pytest.raises(ShapeMismatch) as exc_info:
        decode(['A', 'B'], [[1, 2], [3]])
    assert exc_info.value.row_index == 1
    assert exc_info.value.expected == 2
    assert exc_info.value.actual == 1


def test_shape_mismatch_is_malformed_response():
    with pytest.raises(MalformedResponse):
        decode(['A'], [[1, 2]])


def test_duplicate_column_later_value_wins():
    assert decode(['A', 'A'], [[1, 2]]) == [{'A': 2}]


def test_decode_table_ignores_metadata():
    assert decode_table(table(['X'], [['a']])) == [{'X': 'a'}]


@pytest.mark.parametrize("section", [
    {"columns": ['A']},
    {"data": [[1]]},
    {"columns": 'A', "data": [[1]]},
    ['A'],
])
def test_decode_table_requires_columns_and_data(section):
    with pytest.raises(MalformedResponse):
        decode_table(section)


def test_decode_section_missing_name():
    with pytest.raises(MalformedResponse, match="marketdata"):
        decode_section({"securities": table(['A'], [])}, 'marketdata')


def test_decode_named_response_unwraps_single_key():
    wrapper = {"engines": table(['id', 'name'], [[1, 'stock'], [2, 'state']])}
    assert decode_named_response(wrapper) == [{'id': 1, 'name': 'stock'}, {'id': 2, 'name': 'state'}]


@pytest.mark.parametrize("wrapper", [
    {},
    {"engines": table(['id'], []), "markets": table(['id'], [])},
    [],
    None,
])
def test_decode_named_response_wrong_key_count(wrapper):
    with pytest.raises(MalformedResponse):
        decode_named_response(wrapper)


def test_decode_named_response_without_table_shape():
    with pytest.raises(MalformedResponse):
        decode_named_response({"engines": {"columns": ['id']}})


def test_index_by_last_write_wins_and_keeps_first_position():
    records = [
        {'boardid': 'TQBR', 'n': 1},
        {'boardid': 'SMAL', 'n': 2},
        {'boardid': 'TQBR', 'n': 3},
    ]

    indexed = index_by(records, 'boardid')

    assert list(indexed) == ['TQBR', 'SMAL']
    assert indexed['TQBR']['n'] == 3
