# rlpkit

Recursive Length Prefix (RLP) serialization for Python, together with the
fixed-width types that usually travel with it. The package has no
dependencies beyond the standard library.

- `rlpkit.stream.RlpStream` builds encodings piece by piece, including nested,
  bounded and unbounded lists.
- `rlpkit.rlp.Rlp` is a read-only view over encoded bytes: item access by
  index, iteration, shape checks and strict decoding that rejects
  non-canonical input.
- `rlpkit.api` has `encode`, `encode_list`, `decode`, `decode_list` and
  `rlp_bytes` for one-shot use, and the constants `NULL_RLP` (`b"\x80"`) and
  `EMPTY_LIST_RLP` (`b"\xc0"`).
- `rlpkit.uint` has `U128`, `U256` and `U512`, unsigned integers of fixed
  width.
- `rlpkit.hashes` has `H128`, `H160`, `H256` and `H512`, fixed-size hash
  values.
- `rlpkit.hexser` reads and writes `0x`-prefixed hex strings.
- `rlpkit.derive` has class decorators that make dataclasses encodable and
  decodable.

## Installation

```
pip install rlpkit
```

## Encoding

```python
from rlpkit.api import encode, encode_list
from rlpkit.stream import RlpStream

assert encode("cat") == bytes([0x83]) + b"cat"
assert encode_list(["cat", "dog"]) == bytes([0xC8, 0x83]) + b"cat" + bytes([0x83]) + b"dog"

stream = RlpStream.new_list(2)
stream.append("cat").append("dog")
assert stream.is_finished()
data = stream.out()
```

`RlpStream.append` accepts `None` (encoded as the empty list), `bool`,
non-negative `int`, `bytes`, `bytearray`, `memoryview`, `str`, lists and
tuples (encoded as RLP lists), and any object with an `rlp_append(stream)`
method. Other methods are `append_empty_data`, `append_raw`,
`append_raw_checked`, `append_iter`, `append_list`, `append_internal`,
`begin_list`, `begin_unbounded_list`, `finalize_unbounded_list`,
`estimate_size`, `clear`, `as_raw` and `encode_value`. A stream can start
after existing bytes: `RlpStream(b"junk")` keeps them and writes after them,
and `clear()` removes only what the stream itself wrote.

`out()` raises `RuntimeError` while a list is still open, and appending more
items than a list declared also raises `RuntimeError`.

## Decoding

```python
from rlpkit.api import decode_list
from rlpkit.rlp import Rlp

rlp = Rlp(data)
assert rlp.is_list()
assert rlp.val_at(0, str) == "cat"
assert [item.as_val(str) for item in rlp] == ["cat", "dog"]
assert decode_list(data, str) == ["cat", "dog"]
```

The `kind` passed to `as_val`, `val_at`, `decode` and the like may be
`bytes`, `bytearray`, `str`, `bool`, `int` (decoded as a 64-bit unsigned
integer), `list[X]`, `X | None`, an `rlpkit.rlp.UIntKind` (the module provides
`UINT8`, `UINT16`, `UINT32`, `UINT64` and `UINT128`), or any class with a
`decode_rlp(rlp)` class method.

Malformed input raises `rlpkit.errors.DecoderError`. Its `kind` is a member of
`DecoderErrorKind`, for example `RLP_IS_TOO_SHORT` or
`RLP_INVALID_INDIRECTION`; custom errors carry a `detail` message.

`Rlp` also offers `at_with_offset`, `item_count`, `prototype`,
`payload_info`, `data`, `size`, `is_null`, `is_empty`, `is_data`, `is_int`
and `decode_value`, and `str(rlp)` renders the item as readable text such as
`["0x05", "0x0102"]`.

## Fixed-width integers and hashes

```python
from rlpkit.api import decode, encode
from rlpkit.hashes import H160
from rlpkit.uint import U128, U256

value = U256(0x01000000)
assert encode(value) == bytes.fromhex("8401000000")
assert decode(bytes.fromhex("8401000000"), U256) == value

assert U256.from_f64_lossy(13.37) == U256(13)
assert U128(3).full_mul(U128(4)) == U256(12)
assert U256(16).integer_sqrt() == U256(4)

address = H160(bytes.fromhex("ef2d6d194084c2de36e0dabfce45d046b37d1106"))
assert decode(encode(address), H160) == address
```

Integers offer `max_value`, `zero`, `one`, `is_zero`, `bits`,
big- and little-endian byte conversion, `from_str_radix` (base 10 or 16),
`convert_to` (raising `ConversionOverflow` when the value does not fit),
`to_f64_lossy` on `U256`, and `encode_scale`/`decode_scale`, which use the
full-width little-endian bytes. Hashes offer `zero`, `bytes(h)`, and the same
`encode_scale`/`decode_scale` using their raw bytes; `H160` and `H256`
convert into each other by padding or dropping leading bytes.

## Hex strings

```python
from rlpkit.hexser import from_hex, to_hex, uint_from_hex, uint_to_hex
from rlpkit.uint import U256

assert to_hex(bytes([0, 1, 2]), True) == "0x102"
assert to_hex(bytes([0, 1, 2]), False) == "0x000102"
assert from_hex("0x102") == bytes([1, 2])
assert uint_to_hex(U256(256)) == "0x100"
assert uint_from_hex("0x100", U256) == U256(256)
```

`from_hex` accepts strings with or without the `0x` prefix and raises
`FromHexError` on a non-hex character. `deserialize_check_len` checks the
length against an `ExpectedLen` and raises `InvalidLengthError` when it does
not match. `hash_to_hex` and `hash_from_hex` do the same for hashes.

## Records

```python
from dataclasses import dataclass

from rlpkit.api import decode, encode
from rlpkit.derive import rlp_decodable, rlp_default, rlp_encodable

@rlp_decodable
@rlp_encodable
@dataclass
class Item:
    a: str
    b: bytes | None = rlp_default()

assert encode(Item("cat")) == bytes([0xC5, 0x83]) + b"cat" + bytes([0xC0])
assert decode(encode(Item("cat", b"\x01\x02")), Item) == Item("cat", b"\x01\x02")
```

`rlp_encodable` writes the fields as an RLP list in declaration order;
`rlp_decodable` reads them back. A field declared with `rlp_default()` takes
its default (or the value of `default_factory`) when it fails to decode; only
one such field is allowed per class. `rlp_encodable_wrapper` and
`rlp_decodable_wrapper` encode a one-field dataclass as that field alone.
Unsupported classes raise `DeriveError`.

## What the package does not do

It is a library only: it has no command-line tool. It does not measure memory
use, and its SCALE support is limited to the fixed-width integers and hashes.

## Running the tests

```
pip install -e ".[test]"
pytest
```