import pytest

from datashares.share import (
    PAY_FOR_BLOB_NAMESPACE_ID,
    SHARE_SIZE,
    SHARE_VERSION_ZERO,
    TX_NAMESPACE_ID,
    Share,
)
from datashares.split_compact import CompactShareSplitter, ShareRange, marshal_delimited_tx
from datashares.utils import parse_delimiter, tx_key


def _fill(prefix, filler=0):
    prefix = bytes(prefix)
    return Share(prefix + bytes([filler]) * (SHARE_SIZE - len(prefix)))


def _splitter(namespace=TX_NAMESPACE_ID):
    return CompactShareSplitter(namespace, SHARE_VERSION_ZERO)


SMALL_TX = bytes([0xA])
LARGE_TX = bytes([0xC]) * 512


def test_marshal_delimited_small_tx():
    assert marshal_delimited_tx(SMALL_TX) == bytes([0x1, 0xA])


def test_marshal_delimited_large_tx_prefix():
    assert marshal_delimited_tx(LARGE_TX)[:2] == bytes([128, 4])


@pytest.mark.parametrize("size", [0, 1, 127, 128, 300, 1000])
def test_marshal_delimited_round_trip(size):
    tx = bytes(range(256)) * (size // 256) + bytes(range(size % 256))
    rest, length = parse_delimiter(marshal_delimited_tx(tx))
    assert length == size
    assert rest == tx


def test_empty_splitter_exports_nothing():
    splitter = _splitter()
    assert splitter.count() == 0
    assert splitter.export(0) == ([], {})


def test_one_small_tx():
    splitter = _splitter()
    splitter.write_tx(SMALL_TX)
    shares, ranges = splitter.export(0)
    expected = _fill(list(TX_NAMESPACE_ID) + [0x1, 0, 0, 0, 0x2, 0, 0, 0, 17, 0x1, 0xA])
    assert shares == [expected]
    assert ranges == {tx_key(SMALL_TX): ShareRange(0, 0)}


def test_two_small_txs():
    splitter = _splitter()
    splitter.write_tx(SMALL_TX)
    splitter.write_tx(bytes([0xB]))
    shares, _ = splitter.export(0)
    expected = _fill(
        list(TX_NAMESPACE_ID) + [0x1, 0, 0, 0, 0x4, 0, 0, 0, 17, 0x1, 0xA, 0x1, 0xB]
    )
    assert shares == [expected]


def test_large_tx_spans_two_shares():
    splitter = _splitter()
    splitter.write_tx(LARGE_TX)
    shares, ranges = splitter.export(0)
    first = _fill(list(TX_NAMESPACE_ID) + [0x1, 0, 0, 0x2, 0x2, 0, 0, 0, 17, 128, 4], 0xC)
    second = _fill(list(TX_NAMESPACE_ID) + [0x0, 0, 0, 0, 0] + [0xC] * 19)
    assert shares == [first, second]
    assert ranges == {tx_key(LARGE_TX): ShareRange(0, 1)}


def test_small_then_large_tx():
    splitter = _splitter()
    splitter.write_tx(SMALL_TX)
    splitter.write_tx(LARGE_TX)
    shares, _ = splitter.export(0)
    first = _fill(
        list(TX_NAMESPACE_ID) + [0x1, 0, 0, 0x2, 0x4, 0, 0, 0, 17, 1, 0xA, 128, 4], 0xC
    )
    second = _fill(list(TX_NAMESPACE_ID) + [0x0, 0, 0, 0, 0] + [0xC] * 21)
    assert shares == [first, second]


def test_large_then_small_tx_sets_reserved_bytes():
    splitter = _splitter()
    splitter.write_tx(LARGE_TX)
    splitter.write_tx(SMALL_TX)
    shares, ranges = splitter.export(0)
    first = _fill(list(TX_NAMESPACE_ID) + [0x1, 0, 0, 0x2, 0x4, 0, 0, 0, 17, 128, 4], 0xC)
    second = _fill(
        list(TX_NAMESPACE_ID) + [0x0, 0, 0, 0, 32] + [0xC] * 19 + [1, 0xA]
    )
    assert shares == [first, second]
    assert ranges[tx_key(LARGE_TX)] == ShareRange(0, 1)
    assert ranges[tx_key(SMALL_TX)] == ShareRange(1, 1)


def test_export_applies_offset():
    splitter = _splitter(PAY_FOR_BLOB_NAMESPACE_ID)
    splitter.write_tx(LARGE_TX)
    _, ranges = splitter.export(2)
    assert ranges == {tx_key(LARGE_TX): ShareRange(2, 3)}


def test_count_matches_export_length():
    splitter = _splitter()
    for _ in range(5):
        splitter.write_tx(LARGE_TX)
        splitter.write_tx(SMALL_TX)
    predicted = splitter.count()
    shares, _ = splitter.export(0)
    assert len(shares) == predicted
    assert all(len(share) == SHARE_SIZE for share in shares)


def test_export_twice_is_stable():
    splitter = _splitter()
    splitter.write_tx(LARGE_TX)
    first, first_ranges = splitter.export(0)
    second, second_ranges = splitter.export(0)
    assert first == second
    assert first_ranges == second_ranges


def test_exported_shares_carry_namespace_and_sequence_start():
    splitter = _splitter(PAY_FOR_BLOB_NAMESPACE_ID)
    splitter.write_tx(LARGE_TX)
    shares, _ = splitter.export(0)
    assert [share.namespace_id() for share in shares] == [PAY_FOR_BLOB_NAMESPACE_ID] * 2
    assert [share.is_sequence_start() for share in shares] == [True, False]
    assert shares[0].sequence_len() == len(marshal_delimited_tx(LARGE_TX))