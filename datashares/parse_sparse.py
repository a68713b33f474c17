"""Parsing of sparse shares back into blobs."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from datashares.share import Share, ShareError
from datashares.utils import Blob


@dataclass
class _Sequence:
    namespace_id: bytes
    share_version: int
    sequence_len: int
    chunks: list[bytes] = field(default_factory=list)

    def to_blob(self) -> Blob:
        data = b"".join(self.chunks)
        if self.sequence_len > len(data):
            raise ShareError(
                f"sequence length {self.sequence_len} exceeds the {len(data)} bytes of blob data"
            )
        return Blob(self.namespace_id, data[: self.sequence_len], self.share_version)


def parse_sparse_shares(shares: Iterable[Share], supported_versions: Iterable[int]) -> list[Blob]:
    """Return the blobs stored in sparse shares, skipping padding shares.

    Raises ShareError for unsupported share versions or a continuation share
    that has no sequence start before it.
    """
    supported = list(supported_versions)
    sequences: list[_Sequence] = []
    for share in shares:
        version = share.version()
        if version not in supported:
            raise ShareError(
                f"unsupported share version {version} is not present in supported "
                f"share versions {supported}"
            )
        if share.is_padding():
            continue
        if share.is_sequence_start():
            sequences.append(
                _Sequence(share.namespace_id(), version, share.sequence_len(), [share.raw_data()])
            )
        else:
            if not sequences:
                raise ShareError(f"continuation share {share} without a sequence start share")
            sequences[-1].chunks.append(share.raw_data())
    return [sequence.to_blob() for sequence in sequences]