"""Incremental construction of a single share."""

from __future__ import annotations

from datashares.reserved_bytes import new_reserved_bytes, parse_reserved_bytes
from datashares.share import (
    COMPACT_SHARE_RESERVED_BYTES,
    NAMESPACE_SIZE,
    PAY_FOR_BLOB_NAMESPACE_ID,
    SEQUENCE_LEN_BYTES,
    SHARE_INFO_BYTES,
    SHARE_SIZE,
    TX_NAMESPACE_ID,
    Share,
    ShareError,
    new_info_byte,
    new_share,
)
from datashares.utils import zero_pad_if_necessary


def _is_compact_namespace(namespace: bytes) -> bool:
    return bytes(namespace) in (TX_NAMESPACE_ID, PAY_FOR_BLOB_NAMESPACE_ID)


class Builder:
    """Builds one share; call init() before adding data."""

    def __init__(self, namespace: bytes, share_version: int, is_first_share: bool) -> None:
        self.namespace = bytes(namespace)
        self.share_version = share_version
        self.is_first_share = is_first_share
        self.is_compact_share = _is_compact_namespace(self.namespace)
        self._data = bytearray()

    def init(self) -> Builder:
        """Write the share header (namespace, info byte and placeholders)."""
        info_byte = new_info_byte(self.share_version, self.is_first_share)
        data = bytearray(self.namespace)
        data.append(int(info_byte))
        if self.is_first_share:
            data.extend(bytes(SEQUENCE_LEN_BYTES))
        if self.is_compact_share:
            data.extend(bytes(COMPACT_SHARE_RESERVED_BYTES))
        self._data = data
        return self

    def available_bytes(self) -> int:
        return SHARE_SIZE - len(self._data)

    def import_raw_share(self, raw: bytes) -> Builder:
        self._data = bytearray(raw)
        return self

    def add_data(self, data: bytes | None) -> bytes | None:
        """Append as much of data as fits; return the leftover, or None if all fit."""
        data = bytes(data or b"")
        pending_left = SHARE_SIZE - len(self._data)
        if len(data) <= pending_left:
            self._data.extend(data)
            return None
        self._data.extend(data[:pending_left])
        return data[pending_left:]

    def build(self) -> Share:
        return new_share(bytes(self._data))

    def is_empty_share(self) -> bool:
        """Return True if no data has been written after the header."""
        expected = NAMESPACE_SIZE + SHARE_INFO_BYTES
        if self.is_compact_share:
            expected += COMPACT_SHARE_RESERVED_BYTES
        if self.is_first_share:
            expected += SEQUENCE_LEN_BYTES
        return len(self._data) == expected

    def zero_pad_if_necessary(self) -> int:
        """Pad the share to full size and return the number of bytes added."""
        padded, padding = zero_pad_if_necessary(bytes(self._data), SHARE_SIZE)
        self._data = bytearray(padded)
        return padding

    def _index_of_reserved_bytes(self) -> int:
        index = NAMESPACE_SIZE + SHARE_INFO_BYTES
        if self.is_first_share:
            index += SEQUENCE_LEN_BYTES
        return index

    def _is_empty_reserved_bytes(self) -> bool:
        index = self._index_of_reserved_bytes()
        reserved = bytes(self._data[index:index + COMPACT_SHARE_RESERVED_BYTES])
        return parse_reserved_bytes(reserved) == 0

    def maybe_write_reserved_bytes(self) -> None:
        """Record where the next unit starts, unless already recorded."""
        if not self.is_compact_share:
            raise ShareError("this is not a compact share")
        if not self._is_empty_reserved_bytes():
            return
        reserved = new_reserved_bytes(len(self._data))
        index = self._index_of_reserved_bytes()
        self._data[index:index + COMPACT_SHARE_RESERVED_BYTES] = reserved

    def write_sequence_len(self, sequence_len: int) -> None:
        """Write the sequence length into the first share of a sequence."""
        if not self.is_first_share:
            raise ShareError("not the first share")
        start = NAMESPACE_SIZE + SHARE_INFO_BYTES
        end = start + SEQUENCE_LEN_BYTES
        if len(self._data) < end:
            raise ShareError("share is too short to hold a sequence length")
        if not 0 <= sequence_len < 1 << 32:
            raise ShareError(f"sequence length {sequence_len} does not fit in four bytes")
        self._data[start:end] = sequence_len.to_bytes(SEQUENCE_LEN_BYTES, "big")

    def flip_sequence_start(self) -> None:
        """Toggle the sequence start bit of the info byte."""
        if len(self._data) <= NAMESPACE_SIZE:
            raise ShareError("share is too short to contain an info byte")
        self._data[NAMESPACE_SIZE] ^= 0x01


def new_empty_builder() -> Builder:
    """Return a builder with no namespace, meant for importing raw shares."""
    return Builder(b"", 0, False)