"""Parsing of shares into transactions, blobs and share sequences."""

from __future__ import annotations

from collections.abc import Iterable

from datashares.parse_compact import parse_compact_shares
from datashares.parse_sparse import parse_sparse_shares
from datashares.share import SUPPORTED_SHARE_VERSIONS, Share, ShareError
from datashares.share_sequence import ShareSequence
from datashares.utils import Blob


def parse_txs(shares: Iterable[Share]) -> list[bytes]:
    """Collect all transactions from the given compact shares."""
    return parse_compact_shares(shares, SUPPORTED_SHARE_VERSIONS)


def parse_blobs(shares: Iterable[Share]) -> list[Blob]:
    """Collect all blobs from the given sparse shares."""
    return parse_sparse_shares(shares, SUPPORTED_SHARE_VERSIONS)


def parse_shares(shares: Iterable[Share]) -> list[ShareSequence]:
    """Group shares into sequences and check each has the right share count."""
    sequences: list[ShareSequence] = []
    current: ShareSequence | None = None
    for share in shares:
        share.validate()
        if share.is_sequence_start():
            if current is not None and current.shares:
                sequences.append(current)
            current = ShareSequence(share.namespace_id(), [share])
        else:
            if current is None or current.namespace_id != share.namespace_id():
                raise ShareError(
                    f"share sequence {current} has inconsistent namespace IDs with share {share}"
                )
            current.shares.append(share)
    if current is not None and current.shares:
        sequences.append(current)

    for sequence in sequences:
        sequence.validate_sequence_len()
    return sequences