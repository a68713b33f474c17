"""Reserved bytes of compact shares: the index of the first unit in a share."""

from datashares.share import COMPACT_SHARE_RESERVED_BYTES, SHARE_SIZE, ShareError


def new_reserved_bytes(byte_index: int) -> bytes:
    """Encode a byte index as big-endian reserved bytes."""
    if byte_index >= SHARE_SIZE:
        raise ShareError(f"byte index {byte_index} must be less than share size {SHARE_SIZE}")
    if byte_index < 0:
        raise ShareError(f"byte index {byte_index} must not be negative")
    return byte_index.to_bytes(COMPACT_SHARE_RESERVED_BYTES, "big")


def parse_reserved_bytes(reserved: bytes) -> int:
    """Decode reserved bytes into a byte index."""
    if len(reserved) != COMPACT_SHARE_RESERVED_BYTES:
        raise ShareError(f"reserved bytes must be of length {COMPACT_SHARE_RESERVED_BYTES}")
    byte_index = int.from_bytes(reserved, "big")
    if byte_index >= SHARE_SIZE:
        raise ShareError(f"byte index must be less than share size {SHARE_SIZE}")
    return byte_index