import pytest

from datashares.reserved_bytes import new_reserved_bytes, parse_reserved_bytes
from datashares.share import ShareError

CASES = [
    (bytes([0, 0, 0, 0]), 0),
    (bytes([0, 0, 0, 2]), 2),
    (bytes([0, 0, 0, 4]), 4),
    (bytes([0, 0, 0, 8]), 8),
    (bytes([0, 0, 0, 16]), 16),
    (bytes([0, 0, 0, 32]), 32),
    (bytes([0, 0, 0, 64]), 64),
    (bytes([0, 0, 0, 128]), 128),
    (bytes([0, 0, 1, 0]), 256),
    (bytes([0, 0, 1, 255]), 511),
]


@pytest.mark.parametrize("raw, want", CASES)
def test_parse_reserved_bytes(raw, want):
    assert parse_reserved_bytes(raw) == want


@pytest.mark.parametrize(
    "raw",
    [b"", bytes([1]), bytes([3, 3, 3]), bytes([0, 0, 0, 0, 0]), bytes([0, 0, 3, 232])],
)
def test_parse_reserved_bytes_errors(raw):
    with pytest.raises(ShareError):
        parse_reserved_bytes(raw)


@pytest.mark.parametrize("want, index", CASES)
def test_new_reserved_bytes(want, index):
    assert new_reserved_bytes(index) == want


@pytest.mark.parametrize("index", [512, 1000])
def test_new_reserved_bytes_errors(index):
    with pytest.raises(ShareError):
        new_reserved_bytes(index)