"""Compact splitting of transactions into shares of a reserved namespace."""

from __future__ import annotations

from dataclasses import dataclass

from datashares.builder import Builder
from datashares.share import (
    CONTINUATION_COMPACT_SHARE_CONTENT_SIZE,
    FIRST_COMPACT_SHARE_CONTENT_SIZE,
    Share,
)
from datashares.utils import tx_key


@dataclass(frozen=True)
class ShareRange:
    """Indexes of the first and last share occupied by a unit."""

    start: int
    end: int


def _uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def marshal_delimited_tx(tx: bytes) -> bytes:
    """Prefix a transaction with its length encoded as a varint."""
    tx = bytes(tx)
    return _uvarint(len(tx)) + tx


class CompactShareSplitter:
    """Writes units compactly across a growing list of shares of one namespace."""

    def __init__(self, namespace: bytes, share_version: int) -> None:
        self.namespace = bytes(namespace)
        self.share_version = share_version
        self._shares: list[Share] = []
        self._builder = Builder(self.namespace, share_version, True).init()
        self._done = False
        # Ranges assume this splitter is alone in the square; export offsets them.
        self._share_ranges: dict[bytes, ShareRange] = {}

    def write_tx(self, tx: bytes) -> None:
        """Add the delimited transaction and record the shares it occupies."""
        raw = marshal_delimited_tx(tx)
        start = len(self._shares)
        self._write(raw)
        end = self.count() - 1
        self._share_ranges[tx_key(bytes(tx))] = ShareRange(start, end)

    def _write(self, raw: bytes) -> None:
        if self._done:
            if not self._builder.is_empty_share():
                self._shares.pop()
            self._done = False

        self._builder.maybe_write_reserved_bytes()

        while True:
            leftover = self._builder.add_data(raw)
            if leftover is None:
                break
            self._stack_pending()
            raw = leftover

        if self._builder.available_bytes() == 0:
            self._stack_pending()

    def _stack_pending(self) -> None:
        self._shares.append(self._builder.build())
        self._builder = Builder(self.namespace, self.share_version, False).init()

    def export(self, share_range_offset: int = 0) -> tuple[list[Share], dict[bytes, ShareRange]]:
        """Finalize the shares and return them with offset share ranges."""
        if self._is_empty():
            return [], {}

        share_ranges = {
            key: ShareRange(value.start + share_range_offset, value.end + share_range_offset)
            for key, value in self._share_ranges.items()
        }

        if self._done:
            return list(self._shares), share_ranges

        bytes_of_padding = 0
        if not self._builder.is_empty_share():
            bytes_of_padding = self._builder.zero_pad_if_necessary()
            self._stack_pending()

        self._write_sequence_len(self._sequence_len(bytes_of_padding))
        self._done = True
        return list(self._shares), share_ranges

    def _write_sequence_len(self, sequence_len: int) -> None:
        if self._is_empty():
            return
        builder = Builder(self.namespace, self.share_version, True).init()
        builder.import_raw_share(self._shares[0].to_bytes())
        builder.write_sequence_len(sequence_len)
        self._shares[0] = builder.build()

    def _sequence_len(self, bytes_of_padding: int) -> int:
        if not self._shares:
            return 0
        continuation = (len(self._shares) - 1) * CONTINUATION_COMPACT_SHARE_CONTENT_SIZE
        return FIRST_COMPACT_SHARE_CONTENT_SIZE + continuation - bytes_of_padding

    def _is_empty(self) -> bool:
        return not self._shares and self._builder.is_empty_share()

    def count(self) -> int:
        """Number of shares that export would return."""
        if not self._builder.is_empty_share() and not self._done:
            return len(self._shares) + 1
        return len(self._shares)