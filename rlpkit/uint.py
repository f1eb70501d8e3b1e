"""Fixed-width unsigned integers: U128, U256 and U512."""

from __future__ import annotations

import math
import struct
from typing import Any, ClassVar, TypeVar

from .api import Decodable
from .errors import DecoderError, DecoderErrorKind
from .rlp import Rlp
from .stream import Encodable, RlpStream

_U = TypeVar("_U", bound="UInt")


class ConversionOverflow(OverflowError):
    """A value does not fit in the target integer width."""


class UInt(Encodable, Decodable):
    """An unsigned integer of a fixed number of 64-bit limbs."""

    LIMBS: ClassVar[int] = 0

    def __init__(self, value: Any = 0) -> None:
        if self.LIMBS <= 0:
            raise TypeError("UInt is abstract; use U128, U256 or U512")
        if isinstance(value, UInt):
            number = int(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
            if len(data) > self._byte_size():
                raise ValueError(
                    f"{len(data)} bytes do not fit in {type(self).__name__}"
                )
            number = int.from_bytes(data, "big")
        elif isinstance(value, str):
            number = int(type(self).from_str_radix(value, 16))
        elif isinstance(value, int) and not isinstance(value, bool):
            number = value
        else:
            raise TypeError(f"cannot build {type(self).__name__} from {value!r}")
        if number < 0:
            raise ValueError("unsigned integers cannot be negative")
        if number > self._max_int():
            raise ConversionOverflow(f"{number} does not fit in {type(self).__name__}")
        self._value = number

    @classmethod
    def _byte_size(cls) -> int:
        return cls.LIMBS * 8

    @classmethod
    def _max_int(cls) -> int:
        return (1 << (cls.LIMBS * 64)) - 1

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    @classmethod
    def max_value(cls: type[_U]) -> _U:
        """The largest representable value."""
        return cls(cls._max_int())

    @classmethod
    def zero(cls: type[_U]) -> _U:
        """The value 0."""
        return cls(0)

    @classmethod
    def one(cls: type[_U]) -> _U:
        """The value 1."""
        return cls(1)

    def is_zero(self) -> bool:
        """True when the value is 0."""
        return self._value == 0

    @classmethod
    def from_big_endian(cls: type[_U], data: bytes) -> _U:
        """Build a value from at most the type's width of big-endian bytes."""
        data = bytes(data)
        if len(data) > cls._byte_size():
            raise ValueError(f"{len(data)} bytes do not fit in {cls.__name__}")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_little_endian(cls: type[_U], data: bytes) -> _U:
        """Build a value from at most the type's width of little-endian bytes."""
        data = bytes(data)
        if len(data) > cls._byte_size():
            raise ValueError(f"{len(data)} bytes do not fit in {cls.__name__}")
        return cls(int.from_bytes(data, "little"))

    @classmethod
    def from_str_radix(cls: type[_U], text: str, radix: int) -> _U:
        """Parse ``text`` in base 10 or 16; hex may carry a ``0x`` prefix."""
        if radix not in (10, 16):
            raise ValueError(f"unsupported radix {radix}; only 10 and 16 are allowed")
        digits = text
        if radix == 16 and digits.startswith("0x"):
            digits = digits[2:]
        allowed = "0123456789" if radix == 10 else "0123456789abcdefABCDEF"
        if not digits:
            raise ValueError("no digits to parse")
        bad = next((c for c in digits if c not in allowed), None)
        if bad is not None:
            raise ValueError(f"invalid character {bad!r}")
        return cls(int(digits, radix))

    def to_big_endian(self) -> bytes:
        """The value as big-endian bytes of the full width."""
        return self._value.to_bytes(self._byte_size(), "big")

    def to_little_endian(self) -> bytes:
        """The value as little-endian bytes of the full width."""
        return self._value.to_bytes(self._byte_size(), "little")

    def bits(self) -> int:
        """Number of bits needed to represent the value."""
        return self._value.bit_length()

    def integer_sqrt(self: _U) -> _U:
        """The floor of the square root."""
        return type(self)(math.isqrt(self._value))

    def convert_to(self, target: type[_U]) -> _U:
        """Convert to another width, raising ConversionOverflow if it does not fit."""
        return target(self._value)

    def rlp_append(self, stream: RlpStream) -> None:
        """Write the value as big-endian bytes without leading zeros."""
        length = (self.bits() + 7) // 8
        stream.encode_value(self._value.to_bytes(length, "big"))

    @classmethod
    def decode_rlp(cls: type[_U], rlp: Rlp) -> _U:
        """Decode a canonical big-endian value from ``rlp``."""
        size = cls._byte_size()

        def convert(data: bytes) -> _U:
            if data and data[0] == 0:
                raise DecoderError(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            if len(data) > size:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
            return cls.from_big_endian(data)

        return rlp.decode_value(convert)

    def encode_scale(self) -> bytes:
        """SCALE encoding: the full-width little-endian bytes."""
        return self.to_little_endian()

    @classmethod
    def decode_scale(cls: type[_U], data: bytes) -> _U:
        """Decode a SCALE-encoded value from the start of ``data``."""
        size = cls._byte_size()
        if len(data) < size:
            raise ValueError(f"not enough data to decode {cls.__name__}")
        return cls.from_little_endian(bytes(data[:size]))

    @classmethod
    def max_encoded_len(cls) -> int:
        """The size of the SCALE encoding in bytes."""
        return cls._byte_size()


class U128(UInt):
    """128-bit unsigned integer."""

    LIMBS = 2

    def full_mul(self, other: U128) -> U256:
        """Multiply into a 256-bit result; cannot overflow."""
        if not isinstance(other, U128):
            raise TypeError("full_mul expects a U128")
        return U256(int(self) * int(other))


class U256(UInt):
    """256-bit unsigned integer."""

    LIMBS = 4

    def full_mul(self, other: U256) -> U512:
        """Multiply into a 512-bit result; cannot overflow."""
        if not isinstance(other, U256):
            raise TypeError("full_mul expects a U256")
        return U512(int(self) * int(other))

    @classmethod
    def from_f64_lossy(cls, value: float) -> U256:
        """Saturating conversion from a float, truncating fractions; NaN gives 0."""
        if not value >= 1.0:
            return cls(0)
        bits = struct.unpack("<Q", struct.pack("<d", value))[0]
        exponent = ((bits >> 52) & 0x7FF) - 1023
        mantissa = (bits & 0x000F_FFFF_FFFF_FFFF) | 0x0010_0000_0000_0000
        if exponent <= 52:
            return cls(mantissa >> (52 - exponent))
        if exponent >= 256:
            return cls.max_value()
        return cls(mantissa << (exponent - 52))

    def to_f64_lossy(self) -> float:
        """Lossy conversion to a float."""
        value = int(self)
        if value >> 128 == 0:
            res, factor = value, 1.0
        elif value >> 192 == 0:
            res, factor = value >> 64, 2.0**64
        else:
            res, factor = value >> 128, 2.0**128
        return float(res & ((1 << 128) - 1)) * factor


class U512(UInt):
    """512-bit unsigned integer."""

    LIMBS = 8