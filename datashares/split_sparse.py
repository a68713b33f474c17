"""Sparse splitting of blobs into shares."""

from __future__ import annotations

from datashares.builder import Builder
from datashares.share import SHARE_VERSION_ZERO, SUPPORTED_SHARE_VERSIONS, Share, ShareError
from datashares.utils import Blob


def _namespace_padding_share(namespace: bytes) -> Share:
    builder = Builder(namespace, SHARE_VERSION_ZERO, True).init()
    builder.write_sequence_len(0)
    builder.zero_pad_if_necessary()
    return builder.build()


class SparseShareSplitter:
    """Splits blobs into shares and counts how many shares they take up."""

    def __init__(self) -> None:
        self._shares: list[Share] = []

    def write(self, blob: Blob) -> None:
        """Split a blob into shares and append them."""
        if blob.share_version not in SUPPORTED_SHARE_VERSIONS:
            raise ShareError(f"unsupported share version: {blob.share_version}")

        data = bytes(blob.data)
        builder = Builder(blob.namespace_id, blob.share_version, True).init()
        builder.write_sequence_len(len(data))

        while True:
            leftover = builder.add_data(data)
            if leftover is None:
                builder.zero_pad_if_necessary()
            self._shares.append(builder.build())
            if leftover is None:
                break
            builder = Builder(blob.namespace_id, blob.share_version, False).init()
            data = leftover

    def remove_blob(self, index: int) -> int:
        """Remove the share at index and any namespace padding after it; return the count removed."""
        if not 0 <= index < len(self._shares):
            raise IndexError(f"share index {index} is out of range")
        removed = 1
        if len(self._shares) > index + 1 and self._shares[index + 1].sequence_len() == 0:
            removed += 1
        del self._shares[index:index + removed]
        return removed

    def write_namespaced_padded_shares(self, count: int) -> None:
        """Append padding shares in the namespace of the last written share."""
        if not self._shares:
            raise ShareError("cannot write empty namespaced shares on an empty SparseShareSplitter")
        if count < 0:
            raise ShareError("cannot write negative namespaced shares")
        if count == 0:
            return
        padding = _namespace_padding_share(self._shares[-1].namespace_id())
        self._shares.extend([padding] * count)

    def export(self) -> list[Share]:
        return list(self._shares)

    def count(self) -> int:
        return len(self._shares)