# datashares

`datashares` lays transactions and blobs out as fixed-size, namespaced
shares of 512 bytes and reads shares back into the transactions and blobs
they carry.

Every share starts with an 8-byte namespace ID and an info byte holding a
7-bit share version and a sequence-start bit. The first share of a sequence
then carries a 4-byte big-endian sequence length.

Two layouts are supported:

- **Compact shares** hold ordinary transactions (namespace `TX_NAMESPACE_ID`)
  and pay-for-blob transactions (namespace `PAY_FOR_BLOB_NAMESPACE_ID`).
  Each unit is prefixed with a varint length delimiter and units run straight
  on from one share into the next. Four reserved bytes in each compact share
  record the byte index at which the first unit starting in that share begins.
- **Sparse shares** hold blobs. Each blob starts a new share sequence in its
  own namespace, and the last share of a blob is zero padded.

## Installation

```
pip install .
```

The tests need pytest:

```
pip install ".[test]"
pytest
```

## Splitting

```python
from datashares.splitting import split_txs, split_blobs
from datashares.utils import Blob

tx_shares, pfb_shares, ranges = split_txs([b"\x0a", b"\x0b" * 600])

blob = Blob(namespace_id=bytes([1] * 8), data=b"hello", share_version=0)
blob_shares = split_blobs(0, None, [blob], False)
```

`split_txs` returns the shares for ordinary transactions, the shares for
index-wrapped pay-for-blob transactions, and a dict mapping each
transaction's key (`datashares.utils.tx_key`, a SHA-256 digest) to the
`ShareRange` of shares it occupies. Ranges of pay-for-blob transactions are
offset by the number of ordinary transaction shares.

`split_blobs(cursor, indexes, blobs, use_share_indexes)` splits blobs into
sparse shares. With `use_share_indexes` set, `indexes` must hold one share
index per blob (otherwise `IncorrectNumberOfIndexesError` is raised), and
namespace padding shares are inserted so that each blob after the first
starts at its index, counting from `cursor`.

Pay-for-blob transactions are recognised by their index wrapper encoding:
`marshal_index_wrapper(tx, share_indexes)` produces one,
`unmarshal_index_wrapper(tx)` decodes one into an `IndexWrapper` or returns
`None`, and `extract_share_indexes(txs)` collects the share indexes of all
wrapped transactions (or returns `None` if a wrapper carries none).
`merge_maps` merges two share range dicts, the second winning on duplicates.

For finer control, use `CompactShareSplitter` (in `datashares.split_compact`,
with `write_tx`, `count` and `export`) and `SparseShareSplitter` (in
`datashares.split_sparse`, with `write`, `write_namespaced_padded_shares`,
`remove_blob`, `count` and `export`) directly. `marshal_delimited_tx`
prefixes a transaction with its varint length.

## Parsing

```python
from datashares.parse import parse_txs, parse_blobs, parse_shares

txs = parse_txs(tx_shares)
blobs = parse_blobs(blob_shares)
sequences = parse_shares(tx_shares + blob_shares)
```

- `parse_txs` reads the units out of a compact share sequence.
- `parse_blobs` rebuilds blobs from sparse shares, skipping padding shares.
- `parse_shares` groups shares into `ShareSequence` objects and checks that
  each share is 512 bytes, that continuation shares share the namespace of
  their sequence, and that each sequence holds exactly as many shares as its
  declared length needs.

`parse_compact_shares` and `parse_sparse_shares` take an explicit list of
supported share versions; the functions above use `SUPPORTED_SHARE_VERSIONS`
(version 0 only).

Malformed or unsupported input raises `ShareError`, a subclass of
`ValueError`.

## Lower-level pieces

- `datashares.share`: the `Share` type (`namespace_id`, `info_byte`,
  `version`, `is_sequence_start`, `is_compact_share`, `sequence_len`,
  `is_padding`, `raw_data`, `to_bytes`, `validate`), `InfoByte` with
  `new_info_byte` and `parse_info_byte`, `new_share`, `to_bytes`,
  `from_bytes`, and the layout constants.
- `datashares.builder`: `Builder`, which assembles a single share, and
  `new_empty_builder` for importing raw share bytes.
- `datashares.share_sequence`: `ShareSequence`, `compact_shares_needed` and
  `sparse_shares_needed`.
- `datashares.reserved_bytes`: `new_reserved_bytes` and
  `parse_reserved_bytes`.
- `datashares.utils`: `Blob`, `delim_len`, `parse_delimiter`,
  `zero_pad_if_necessary` and `tx_key`.
- `datashares.powers_of_two`: `round_up_power_of_two`,
  `round_down_power_of_two` (raises `ValueError` for non-positive input),
  `round_up_power_of_two_strict` and `is_power_of_two`.

## What it does not do

The package splits transactions and blobs into share lists; it does not lay
out a whole data square. It has no function that places padding between the
transaction shares and the first blob, appends tail padding shares up to a
square size, or checks a square size. It has no command-line interface.