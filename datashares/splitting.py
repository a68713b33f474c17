"""Splitting of block transactions and blobs into shares."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from datashares.share import (
    PAY_FOR_BLOB_NAMESPACE_ID,
    SHARE_VERSION_ZERO,
    TX_NAMESPACE_ID,
    Share,
    ShareError,
)
from datashares.split_compact import CompactShareSplitter, ShareRange
from datashares.split_sparse import SparseShareSplitter
from datashares.utils import Blob

INDEX_WRAPPER_TYPE_ID = "INDX"

_TX_FIELD = 1
_SHARE_INDEXES_FIELD = 2
_TYPE_ID_FIELD = 3

_WIRE_VARINT = 0
_WIRE_FIXED64 = 1
_WIRE_LEN = 2
_WIRE_FIXED32 = 5


@dataclass(frozen=True)
class IndexWrapper:
    """A transaction wrapped together with the share indexes of its blobs."""

    tx: bytes
    share_indexes: tuple[int, ...] = ()
    type_id: str = INDEX_WRAPPER_TYPE_ID


class IncorrectNumberOfIndexesError(ShareError):
    """Raised when the number of share indexes differs from the number of blobs."""

    def __init__(self) -> None:
        super().__init__("number of indexes is not identical to the number of blobs")


class _DecodeError(Exception):
    pass


def _uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _field_key(field_number: int, wire_type: int) -> bytes:
    return _uvarint((field_number << 3) | wire_type)


def _length_delimited(field_number: int, payload: bytes) -> bytes:
    return _field_key(field_number, _WIRE_LEN) + _uvarint(len(payload)) + payload


def marshal_index_wrapper(tx: bytes, share_indexes: Iterable[int]) -> bytes:
    """Encode a transaction and its share indexes as an index wrapper message."""
    tx = bytes(tx)
    indexes = list(share_indexes)
    for index in indexes:
        if not 0 <= index < 1 << 32:
            raise ShareError(f"share index {index} does not fit in 32 bits")
    out = bytearray()
    if tx:
        out += _length_delimited(_TX_FIELD, tx)
    if indexes:
        out += _length_delimited(_SHARE_INDEXES_FIELD, b"".join(_uvarint(i) for i in indexes))
    out += _length_delimited(_TYPE_ID_FIELD, INDEX_WRAPPER_TYPE_ID.encode())
    return bytes(out)


def _read_varint(buf: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(buf) or shift >= 64:
            raise _DecodeError("malformed varint")
        byte = buf[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if byte < 0x80:
            return result & ((1 << 64) - 1), pos
        shift += 7


def _read_bytes(buf: bytes, pos: int) -> tuple[bytes, int]:
    length, pos = _read_varint(buf, pos)
    end = pos + length
    if end > len(buf):
        raise _DecodeError("length-delimited field runs past the end")
    return buf[pos:end], end


def _skip_field(buf: bytes, pos: int, wire_type: int) -> int:
    if wire_type == _WIRE_VARINT:
        return _read_varint(buf, pos)[1]
    if wire_type == _WIRE_LEN:
        return _read_bytes(buf, pos)[1]
    width = {_WIRE_FIXED64: 8, _WIRE_FIXED32: 4}.get(wire_type)
    if width is None or pos + width > len(buf):
        raise _DecodeError(f"cannot skip field of wire type {wire_type}")
    return pos + width


def _decode_index_wrapper(buf: bytes) -> IndexWrapper:
    tx = b""
    indexes: list[int] = []
    type_id = b""
    pos = 0
    while pos < len(buf):
        key, pos = _read_varint(buf, pos)
        field_number, wire_type = key >> 3, key & 0x07
        if field_number == 0:
            raise _DecodeError("illegal field number 0")
        if field_number == _TX_FIELD:
            if wire_type != _WIRE_LEN:
                raise _DecodeError("wrong wire type for tx")
            tx, pos = _read_bytes(buf, pos)
        elif field_number == _SHARE_INDEXES_FIELD:
            if wire_type == _WIRE_VARINT:
                value, pos = _read_varint(buf, pos)
                indexes.append(value & 0xFFFFFFFF)
            elif wire_type == _WIRE_LEN:
                packed, pos = _read_bytes(buf, pos)
                inner = 0
                while inner < len(packed):
                    value, inner = _read_varint(packed, inner)
                    indexes.append(value & 0xFFFFFFFF)
            else:
                raise _DecodeError("wrong wire type for share indexes")
        elif field_number == _TYPE_ID_FIELD:
            if wire_type != _WIRE_LEN:
                raise _DecodeError("wrong wire type for type id")
            type_id, pos = _read_bytes(buf, pos)
        else:
            pos = _skip_field(buf, pos, wire_type)
    return IndexWrapper(tx, tuple(indexes), type_id.decode("utf-8", errors="replace"))


def unmarshal_index_wrapper(tx: bytes) -> IndexWrapper | None:
    """Decode an index wrapper, or return None if tx is not one."""
    try:
        wrapper = _decode_index_wrapper(bytes(tx))
    except _DecodeError:
        return None
    if wrapper.type_id != INDEX_WRAPPER_TYPE_ID:
        return None
    return wrapper


def extract_share_indexes(txs: Iterable[bytes]) -> list[int] | None:
    """Collect share indexes from wrapped transactions.

    Returns None if a wrapped transaction carries no share indexes, which marks
    a block from before share indexes were recorded.
    """
    share_indexes: list[int] = []
    for tx in txs:
        wrapper = unmarshal_index_wrapper(tx)
        if wrapper is None:
            continue
        if not wrapper.share_indexes:
            return None
        share_indexes.extend(wrapper.share_indexes)
    return share_indexes


def split_txs(
    txs: Iterable[bytes],
) -> tuple[list[Share], list[Share], dict[bytes, ShareRange]]:
    """Split transactions into ordinary and pay-for-blob compact shares."""
    tx_writer = CompactShareSplitter(TX_NAMESPACE_ID, SHARE_VERSION_ZERO)
    pfb_writer = CompactShareSplitter(PAY_FOR_BLOB_NAMESPACE_ID, SHARE_VERSION_ZERO)
    for tx in txs:
        writer = pfb_writer if unmarshal_index_wrapper(tx) is not None else tx_writer
        writer.write_tx(tx)
    tx_shares, tx_ranges = tx_writer.export(0)
    pfb_shares, pfb_ranges = pfb_writer.export(len(tx_shares))
    return tx_shares, pfb_shares, merge_maps(tx_ranges, pfb_ranges)


def split_blobs(
    cursor: int,
    indexes: Sequence[int] | None,
    blobs: Iterable[Blob],
    use_share_indexes: bool,
) -> list[Share]:
    """Split blobs into sparse shares, padding up to the given share indexes."""
    indexes = list(indexes or [])
    blobs = list(blobs)
    if use_share_indexes and len(indexes) != len(blobs):
        raise IncorrectNumberOfIndexesError()
    writer = SparseShareSplitter()
    for i, blob in enumerate(blobs):
        writer.write(blob)
        if use_share_indexes and i + 1 < len(indexes):
            writer.write_namespaced_padded_shares(indexes[i + 1] - (writer.count() + cursor))
    return writer.export()


def merge_maps(
    first: Mapping[bytes, ShareRange], second: Mapping[bytes, ShareRange]
) -> dict[bytes, ShareRange]:
    """Merge two share range maps; the second wins on duplicate keys."""
    return {**first, **second}