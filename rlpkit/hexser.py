"""Hex string serialization of byte strings, fixed-width integers and hashes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

from .hashes import FixedHash
from .uint import UInt

_U = TypeVar("_U", bound=UInt)
_H = TypeVar("_H", bound=FixedHash)

_CHARS = "0123456789abcdef"
_WHITESPACE = frozenset(b" \r\n\t")


class FromHexError(ValueError):
    """A hex string holds a character that is not a hex digit."""

    def __init__(self, character: str, index: int) -> None:
        self.character = character
        self.index = index
        super().__init__(f"invalid hex character: {character}, at {index}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FromHexError):
            return NotImplemented
        return (self.character, self.index) == (other.character, other.index)

    def __hash__(self) -> int:
        return hash((self.character, self.index))


@dataclass(frozen=True)
class ExpectedLen:
    """Expected size in bytes of decoded hex: exact, or in (minimum; maximum]."""

    maximum: int
    minimum: int | None = None

    @classmethod
    def exact(cls, length: int) -> ExpectedLen:
        """Exactly ``length`` bytes."""
        return cls(maximum=length)

    @classmethod
    def between(cls, minimum: int, maximum: int) -> ExpectedLen:
        """More than ``minimum`` bytes and at most ``maximum`` bytes."""
        return cls(maximum=maximum, minimum=minimum)

    def accepts(self, digits: int) -> bool:
        """Whether a hex string of ``digits`` characters has a fitting length."""
        if self.minimum is None:
            return digits == 2 * self.maximum
        return 2 * self.minimum < digits <= 2 * self.maximum

    def __str__(self) -> str:
        if self.minimum is None:
            return f"length of {self.maximum * 2}"
        return f"length between ({self.minimum * 2}; {self.maximum * 2}]"


class InvalidLengthError(ValueError):
    """A hex string does not have the expected length."""

    def __init__(self, length: int, expected: ExpectedLen) -> None:
        self.length = length
        self.expected = expected
        super().__init__(
            f"invalid length {length}, expected a (both 0x-prefixed or not) "
            f"hex string with {expected}"
        )


def _require_str(text: Any) -> str:
    if not isinstance(text, str):
        raise TypeError(f"expected a hex string, got {type(text).__name__}")
    return text


def _strip_prefix(text: str) -> tuple[str, bool]:
    if text.startswith("0x"):
        return text[2:], True
    return text, False


def _hex_body(data: bytes, skip_leading_zero: bool) -> str:
    first = data[0]
    head = _CHARS[first & 0xF]
    if (first >> 4) != 0 or not skip_leading_zero:
        head = _CHARS[first >> 4] + head
    return "0x" + head + data[1:].hex()


def to_hex(data: bytes, skip_leading_zero: bool) -> str:
    """Render ``data`` as a ``0x``-prefixed hex string.

    With ``skip_leading_zero`` leading zeros are dropped and empty input gives
    ``0x0``; without it empty input gives ``0x``.
    """
    data = bytes(data)
    if skip_leading_zero:
        data = data.lstrip(b"\x00")
        if not data:
            return "0x0"
    elif not data:
        return "0x"
    return _hex_body(data, skip_leading_zero)


def _decode_into(digits: str, capacity: int, stripped: bool) -> tuple[bytearray, int]:
    raw = digits.encode("utf-8")
    out = bytearray(capacity)
    modulus = len(raw) % 2
    buf = 0
    pos = 0
    for index, byte in enumerate(raw):
        buf = (buf << 4) & 0xFF
        if 0x41 <= byte <= 0x46:
            buf |= byte - 0x41 + 10
        elif 0x61 <= byte <= 0x66:
            buf |= byte - 0x61 + 10
        elif 0x30 <= byte <= 0x39:
            buf |= byte - 0x30
        elif byte in _WHITESPACE:
            buf >>= 4
            continue
        else:
            raise FromHexError(chr(byte), index + (2 if stripped else 0))
        modulus += 1
        if modulus == 2:
            modulus = 0
            out[pos] = buf
            pos += 1
    return out, pos


def from_hex(text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix."""
    digits, stripped = _strip_prefix(_require_str(text))
    out, _ = _decode_into(digits, (len(digits.encode("utf-8")) + 1) // 2, stripped)
    return bytes(out)


def serialize_bytes(data: bytes) -> str:
    """Serialize bytes as a ``0x``-prefixed hex string keeping every digit."""
    return to_hex(data, False)


def serialize_uint(data: bytes) -> str:
    """Serialize big-endian bytes as a hex number without leading zeros."""
    return to_hex(data, True)


def deserialize_bytes(text: str) -> bytes:
    """Deserialize a hex string into bytes."""
    return from_hex(text)


def deserialize_check_len(text: str, expected: ExpectedLen) -> bytes:
    """Deserialize a hex string whose length must match ``expected``.

    Returns the bytes written, which may be fewer than the expected size when
    the string holds whitespace.
    """
    digits, stripped = _strip_prefix(_require_str(text))
    length = len(digits.encode("utf-8"))
    if not expected.accepts(length):
        raise InvalidLengthError(length, expected)
    out, written = _decode_into(digits, expected.maximum, stripped)
    return bytes(out[:written])


def uint_to_hex(value: UInt) -> str:
    """Serialize an integer as a minimal ``0x``-prefixed hex string."""
    return serialize_uint(value.to_big_endian())


def uint_from_hex(text: str, kind: type[_U]) -> _U:
    """Deserialize a non-empty hex number into an integer of ``kind``."""
    data = deserialize_check_len(text, ExpectedLen.between(0, kind.max_encoded_len()))
    return kind.from_big_endian(data)


def hash_to_hex(value: FixedHash) -> str:
    """Serialize a hash as a full-length ``0x``-prefixed hex string."""
    return serialize_bytes(bytes(value))


def hash_from_hex(text: str, kind: type[_H]) -> _H:
    """Deserialize a hex string of exactly the hash size into ``kind``."""
    size = kind.max_encoded_len()
    data = deserialize_check_len(text, ExpectedLen.exact(size))
    return kind(data + bytes(size - len(data)))