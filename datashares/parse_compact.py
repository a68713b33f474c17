"""Parsing of compact shares back into their units."""

from __future__ import annotations

from collections.abc import Iterable

from datashares.share import Share, ShareError
from datashares.utils import parse_delimiter


def parse_compact_shares(shares: Iterable[Share], supported_versions: Iterable[int]) -> list[bytes]:
    """Return the units (e.g. transactions) stored in a compact share sequence.

    Raises ShareError if the first share does not start a sequence or any share
    has a version not in supported_versions.
    """
    shares = list(shares)
    if not shares:
        return []
    if not shares[0].is_sequence_start():
        raise ShareError("first share is not the start of a sequence")
    supported = list(supported_versions)
    for share in shares:
        share.does_support_versions(supported)
    raw = b"".join(share.raw_data() for share in shares)
    return _parse_raw_data(raw)


def _parse_raw_data(raw: bytes) -> list[bytes]:
    units: list[bytes] = []
    while True:
        rest, unit_len = parse_delimiter(raw)
        if unit_len == 0:
            return units
        if unit_len > len(rest):
            raise ShareError(f"unit length {unit_len} exceeds the {len(rest)} remaining bytes")
        units.append(rest[:unit_len])
        raw = rest[unit_len:]