"""Shares: fixed-size, namespaced chunks of block data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

SHARE_SIZE = 512
NAMESPACE_SIZE = 8
SHARE_INFO_BYTES = 1
SEQUENCE_LEN_BYTES = 4
COMPACT_SHARE_RESERVED_BYTES = 4

FIRST_COMPACT_SHARE_CONTENT_SIZE = (
    SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - SEQUENCE_LEN_BYTES - COMPACT_SHARE_RESERVED_BYTES
)
CONTINUATION_COMPACT_SHARE_CONTENT_SIZE = (
    SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - COMPACT_SHARE_RESERVED_BYTES
)
FIRST_SPARSE_SHARE_CONTENT_SIZE = SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES - SEQUENCE_LEN_BYTES
CONTINUATION_SPARSE_SHARE_CONTENT_SIZE = SHARE_SIZE - NAMESPACE_SIZE - SHARE_INFO_BYTES

SHARE_VERSION_ZERO = 0
MAX_SHARE_VERSION = 127
SUPPORTED_SHARE_VERSIONS = (SHARE_VERSION_ZERO,)

TX_NAMESPACE_ID = bytes([0, 0, 0, 0, 0, 0, 0, 1])
PAY_FOR_BLOB_NAMESPACE_ID = bytes([0, 0, 0, 0, 0, 0, 0, 4])
RESERVED_PADDING_NAMESPACE_ID = bytes([0, 0, 0, 0, 0, 0, 0, 0xFF])
TAIL_PADDING_NAMESPACE_ID = bytes([0xFF] * 7 + [0xFE])


class ShareError(ValueError):
    """Raised when share data is malformed or unsupported."""


@dataclass(frozen=True)
class InfoByte:
    """The byte after the namespace: a 7-bit version and a sequence start bit."""

    value: int

    def version(self) -> int:
        return self.value >> 1

    def is_sequence_start(self) -> bool:
        return bool(self.value & 0x01)

    def __int__(self) -> int:
        return self.value


def new_info_byte(version: int, is_sequence_start: bool) -> InfoByte:
    """Build an info byte, rejecting versions that do not fit in seven bits."""
    if not 0 <= version <= MAX_SHARE_VERSION:
        raise ShareError(f"version {version} must be less than or equal to {MAX_SHARE_VERSION}")
    return InfoByte((version << 1) | int(bool(is_sequence_start)))


def parse_info_byte(value: int) -> InfoByte:
    """Interpret a raw byte value as an info byte."""
    if not 0 <= value <= 0xFF:
        raise ShareError(f"info byte {value} is not a single byte")
    return new_info_byte(value >> 1, bool(value & 0x01))


@dataclass(frozen=True)
class Share:
    """Raw share data, namespace ID included."""

    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.data.hex()

    def validate(self) -> None:
        _validate_size(self.data)

    def namespace_id(self) -> bytes:
        if len(self.data) < NAMESPACE_SIZE:
            raise ShareError(f"share {self} is too short to contain a namespace ID")
        return self.data[:NAMESPACE_SIZE]

    def info_byte(self) -> InfoByte:
        if len(self.data) < NAMESPACE_SIZE + SHARE_INFO_BYTES:
            raise ShareError(f"share {self} is too short to contain an info byte")
        return parse_info_byte(self.data[NAMESPACE_SIZE])

    def version(self) -> int:
        return self.info_byte().version()

    def does_support_versions(self, supported_versions: Iterable[int]) -> None:
        """Raise ShareError unless this share's version is among those given."""
        supported = list(supported_versions)
        version = self.version()
        if version not in supported:
            raise ShareError(
                f"unsupported share version {version} is not present in the list "
                f"of supported share versions {supported}"
            )

    def is_sequence_start(self) -> bool:
        return self.info_byte().is_sequence_start()

    def is_compact_share(self) -> bool:
        return self.namespace_id() in (TX_NAMESPACE_ID, PAY_FOR_BLOB_NAMESPACE_ID)

    def sequence_len(self) -> int:
        """Return the sequence length, or 0 for a continuation share."""
        if not self.is_sequence_start():
            return 0
        start = NAMESPACE_SIZE + SHARE_INFO_BYTES
        end = start + SEQUENCE_LEN_BYTES
        if len(self.data) < end:
            raise ShareError(f"share {self} is too short to contain a sequence length")
        return int.from_bytes(self.data[start:end], "big")

    def is_padding(self) -> bool:
        return self._is_namespace_padding() or self._is_tail_padding() or self._is_reserved_padding()

    def _is_namespace_padding(self) -> bool:
        return self.is_sequence_start() and self.sequence_len() == 0

    def _is_tail_padding(self) -> bool:
        return self.namespace_id() == TAIL_PADDING_NAMESPACE_ID

    def _is_reserved_padding(self) -> bool:
        return self.namespace_id() == RESERVED_PADDING_NAMESPACE_ID

    def to_bytes(self) -> bytes:
        return self.data

    def raw_data(self) -> bytes:
        """Return the data after the namespace, info byte, sequence length and reserved bytes."""
        start = self._raw_data_start_index()
        if len(self.data) < start:
            raise ShareError(f"share {self} is too short to contain raw data")
        return self.data[start:]

    def _raw_data_start_index(self) -> int:
        start = NAMESPACE_SIZE + SHARE_INFO_BYTES
        if self.is_sequence_start():
            start += SEQUENCE_LEN_BYTES
        if self.is_compact_share():
            start += COMPACT_SHARE_RESERVED_BYTES
        return start


def _validate_size(data: bytes) -> None:
    if len(data) != SHARE_SIZE:
        raise ShareError(f"share data must be {SHARE_SIZE} bytes, got {len(data)}")


def new_share(data: bytes) -> Share:
    """Create a share, requiring exactly SHARE_SIZE bytes."""
    _validate_size(data)
    return Share(data)


def to_bytes(shares: Iterable[Share]) -> list[bytes]:
    return [share.data for share in shares]


def from_bytes(chunks: Sequence[bytes]) -> list[Share]:
    return [Share(chunk) for chunk in chunks]