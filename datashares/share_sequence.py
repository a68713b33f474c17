"""Contiguous runs of shares that belong to the same namespace and blob."""

from __future__ import annotations

from dataclasses import dataclass, field

from datashares.share import (
    CONTINUATION_COMPACT_SHARE_CONTENT_SIZE,
    CONTINUATION_SPARSE_SHARE_CONTENT_SIZE,
    FIRST_COMPACT_SHARE_CONTENT_SIZE,
    FIRST_SPARSE_SHARE_CONTENT_SIZE,
    Share,
    ShareError,
)


@dataclass
class ShareSequence:
    """Shares of one reserved namespace (compact) or one blob (sparse)."""

    namespace_id: bytes
    shares: list[Share] = field(default_factory=list)

    def raw_data(self) -> bytes:
        """Return the sequence's data without headers and trailing padding."""
        data = b"".join(share.raw_data() for share in self.shares)
        sequence_len = self.sequence_len()
        if sequence_len > len(data):
            raise ShareError(
                f"sequence length {sequence_len} exceeds the {len(data)} bytes of data in the sequence"
            )
        return data[:sequence_len]

    def sequence_len(self) -> int:
        if not self.shares:
            raise ShareError(f"invalid sequence length because share sequence {self} has no shares")
        return self.shares[0].sequence_len()

    def validate_sequence_len(self) -> None:
        """Raise ShareError if the share count does not match the sequence length."""
        if not self.shares:
            raise ShareError(f"invalid sequence length because share sequence {self} has no shares")
        needed = _number_of_shares_needed(self.shares[0])
        if len(self.shares) != needed:
            raise ShareError(f"share sequence has {len(self.shares)} shares but needed {needed} shares")


def _number_of_shares_needed(first_share: Share) -> int:
    sequence_len = first_share.sequence_len()
    if first_share.is_compact_share():
        return compact_shares_needed(sequence_len)
    return sparse_shares_needed(sequence_len)


def _shares_needed(sequence_len: int, first_size: int, continuation_size: int) -> int:
    if sequence_len == 0:
        return 0
    if sequence_len <= first_size:
        return 1
    remaining = sequence_len - first_size
    return 1 + -(-remaining // continuation_size)


def compact_shares_needed(sequence_len: int) -> int:
    """Number of compact shares needed to hold sequence_len bytes."""
    return _shares_needed(
        sequence_len, FIRST_COMPACT_SHARE_CONTENT_SIZE, CONTINUATION_COMPACT_SHARE_CONTENT_SIZE
    )


def sparse_shares_needed(sequence_len: int) -> int:
    """Number of sparse shares needed to hold sequence_len bytes."""
    return _shares_needed(
        sequence_len, FIRST_SPARSE_SHARE_CONTENT_SIZE, CONTINUATION_SPARSE_SHARE_CONTENT_SIZE
    )