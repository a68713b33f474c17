import pytest

from datashares.share import (
    PAY_FOR_BLOB_NAMESPACE_ID,
    RESERVED_PADDING_NAMESPACE_ID,
    SHARE_SIZE,
    TAIL_PADDING_NAMESPACE_ID,
    TX_NAMESPACE_ID,
    InfoByte,
    Share,
    ShareError,
    from_bytes,
    new_info_byte,
    new_share,
    parse_info_byte,
    to_bytes,
)


def _pad(data):
    return bytes(data) + bytes(SHARE_SIZE - len(data))


def _padding_share(namespace):
    return Share(_pad(bytes(namespace) + bytes([1]) + bytes(4)))


FIRST_SPARSE = bytes([1] * 8 + [1] + [0, 0, 0, 10] + list(range(1, 11)))
CONTINUATION_SPARSE = bytes([1] * 8 + [0] + list(range(1, 11)))
FIRST_COMPACT = bytes([0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 10, 0, 0, 0, 15] + list(range(1, 11)))
CONTINUATION_COMPACT = bytes([0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0] + list(range(1, 11)))


@pytest.mark.parametrize(
    "data, want",
    [
        (FIRST_SPARSE, 10),
        (bytes([1] * 8 + [1, 0, 0, 1, 67]), 323),
        (bytes([1] * 8 + [0]), 0),
        (bytes([0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 0, 10]), 10),
    ],
)
def test_sequence_len(data, want):
    assert Share(data).sequence_len() == want


@pytest.mark.parametrize(
    "data",
    [
        bytes([0, 0, 0, 0, 0, 0, 0, 1]),
        bytes([0, 0, 0, 0, 0, 0, 0, 1, 1]),
    ],
)
def test_sequence_len_errors(data):
    with pytest.raises(ShareError):
        Share(data).sequence_len()


@pytest.mark.parametrize(
    "data", [FIRST_SPARSE, CONTINUATION_SPARSE, FIRST_COMPACT, CONTINUATION_COMPACT]
)
def test_raw_data(data):
    assert Share(data).raw_data() == bytes(range(1, 11))


@pytest.mark.parametrize(
    "data",
    [
        bytes([0, 0, 0, 0, 0, 0, 0, 1, 1]),
        bytes([0, 0, 0, 0, 0, 0, 0, 1, 1, 0, 0, 10]),
        bytes([0, 0, 0, 0, 0, 0, 0, 1]),
    ],
)
def test_raw_data_errors(data):
    with pytest.raises(ShareError):
        Share(data).raw_data()


@pytest.mark.parametrize(
    "namespace, want",
    [
        (TX_NAMESPACE_ID, True),
        (PAY_FOR_BLOB_NAMESPACE_ID, True),
        (bytes([1, 2, 3, 4, 5, 6, 7, 8]), False),
    ],
)
def test_is_compact_share(namespace, want):
    assert Share(_pad(namespace)).is_compact_share() is want


@pytest.mark.parametrize(
    "share, want",
    [
        (Share(_pad(bytes([1] * 8 + [1, 0, 0, 0, 1, 0xFF]))), False),
        (_padding_share([1] * 8), True),
        (_padding_share(TAIL_PADDING_NAMESPACE_ID), True),
        (_padding_share(RESERVED_PADDING_NAMESPACE_ID), True),
    ],
)
def test_is_padding(share, want):
    assert share.is_padding() is want


def test_is_padding_empty_share_raises():
    with pytest.raises(ShareError):
        Share().is_padding()


def test_new_share_requires_share_size():
    with pytest.raises(ShareError):
        new_share(bytes(SHARE_SIZE + 1))
    assert new_share(bytes(SHARE_SIZE)).to_bytes() == bytes(SHARE_SIZE)


def test_validate_rejects_short_share():
    with pytest.raises(ShareError):
        Share(bytes(10)).validate()


def test_namespace_id_and_version():
    share = Share(FIRST_SPARSE)
    assert share.namespace_id() == bytes([1] * 8)
    assert share.version() == 0
    assert share.is_sequence_start() is True


def test_does_support_versions():
    share = Share(_pad(bytes([1] * 8) + bytes([int(new_info_byte(5, True))])))
    with pytest.raises(ShareError):
        share.does_support_versions([0])
    share.does_support_versions([0, 5])
    assert share.version() == 5


@pytest.mark.parametrize("version, start, value", [(0, True, 1), (0, False, 0), (5, True, 11), (127, False, 254)])
def test_info_byte_round_trip(version, start, value):
    info = new_info_byte(version, start)
    assert int(info) == value
    parsed = parse_info_byte(value)
    assert parsed == InfoByte(value)
    assert parsed.version() == version
    assert parsed.is_sequence_start() is start


def test_info_byte_rejects_large_version():
    with pytest.raises(ShareError):
        new_info_byte(128, True)


def test_to_from_bytes_round_trip():
    chunks = [FIRST_SPARSE, CONTINUATION_COMPACT]
    shares = from_bytes(chunks)
    assert shares == [Share(FIRST_SPARSE), Share(CONTINUATION_COMPACT)]
    assert to_bytes(shares) == chunks