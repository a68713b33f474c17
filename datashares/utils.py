"""Blobs, transaction keys and varint length delimiters."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from datashares.share import ShareError

MAX_VARINT_LEN64 = 10


@dataclass
class Blob:
    """Data posted under a namespace with a share version."""

    namespace_id: bytes
    data: bytes
    share_version: int = 0


def _encode_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _decode_uvarint(buf: bytes) -> int:
    result = 0
    shift = 0
    for i, byte in enumerate(buf):
        if i == MAX_VARINT_LEN64 - 1 and byte > 1:
            raise ShareError("varint overflows a 64-bit integer")
        if byte < 0x80:
            return result | (byte << shift)
        result |= (byte & 0x7F) << shift
        shift += 7
    raise ShareError("unexpected end of varint")


def delim_len(size: int) -> int:
    """Return the number of bytes of the varint delimiter for a unit of this size."""
    return len(_encode_uvarint(size))


def zero_pad_if_necessary(share: bytes, width: int) -> tuple[bytes, int]:
    """Pad share with trailing zeros up to width; return it and the bytes added."""
    missing = width - len(share)
    if missing <= 0:
        return bytes(share), 0
    return bytes(share) + bytes(missing), missing


def parse_delimiter(data: bytes) -> tuple[bytes, int]:
    """Split a varint length delimiter from data; return the rest and the length."""
    if not data:
        return data, 0
    delimiter, _ = zero_pad_if_necessary(data[:MAX_VARINT_LEN64], MAX_VARINT_LEN64)
    unit_len = _decode_uvarint(delimiter)
    return data[delim_len(unit_len):], unit_len


def tx_key(tx: bytes) -> bytes:
    """Return the SHA-256 key that identifies a transaction."""
    return hashlib.sha256(tx).digest()