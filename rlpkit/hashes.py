"""Fixed-size uninterpreted hash types."""

from __future__ import annotations

from typing import Any, ClassVar, TypeVar

from .api import Decodable
from .errors import DecoderError, DecoderErrorKind
from .rlp import Rlp
from .stream import Encodable, RlpStream

_H = TypeVar("_H", bound="FixedHash")

_H160_SIZE = 20
_H256_SIZE = 32


class FixedHash(Encodable, Decodable):
    """A fixed number of raw bytes with no numeric meaning."""

    SIZE: ClassVar[int] = 0

    def __init__(self, data: Any) -> None:
        size = self.SIZE
        if size <= 0:
            raise TypeError("FixedHash is abstract; use H128, H160, H256 or H512")
        if isinstance(data, FixedHash):
            raw = self._from_hash(data)
        elif isinstance(data, (bytes, bytearray, memoryview)):
            raw = bytes(data)
        else:
            raise TypeError(f"cannot build {type(self).__name__} from {data!r}")
        if len(raw) != size:
            raise ValueError(
                f"{type(self).__name__} needs {size} bytes, got {len(raw)}"
            )
        self._bytes = raw

    def _from_hash(self, other: FixedHash) -> bytes:
        raw = bytes(other)
        if other.SIZE == self.SIZE:
            return raw
        if other.SIZE == _H160_SIZE and self.SIZE == _H256_SIZE:
            return bytes(_H256_SIZE - _H160_SIZE) + raw
        if other.SIZE == _H256_SIZE and self.SIZE == _H160_SIZE:
            return raw[_H256_SIZE - _H160_SIZE:]
        raise TypeError(
            f"no conversion from {type(other).__name__} to {type(self).__name__}"
        )

    def __bytes__(self) -> bytes:
        return self._bytes

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._bytes == other._bytes  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._bytes))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self._bytes.hex()})"

    @classmethod
    def zero(cls: type[_H]) -> _H:
        """The all-zero hash."""
        return cls(bytes(cls.SIZE))

    def rlp_append(self, stream: RlpStream) -> None:
        """Write the raw bytes as one data item."""
        stream.encode_value(self._bytes)

    @classmethod
    def decode_rlp(cls: type[_H], rlp: Rlp) -> _H:
        """Decode a data item of exactly the hash size."""

        def convert(data: bytes) -> _H:
            if len(data) < cls.SIZE:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_SHORT)
            if len(data) > cls.SIZE:
                raise DecoderError(DecoderErrorKind.RLP_IS_TOO_BIG)
            return cls(data)

        return rlp.decode_value(convert)

    def encode_scale(self) -> bytes:
        """SCALE encoding: the raw bytes."""
        return self._bytes

    @classmethod
    def decode_scale(cls: type[_H], data: bytes) -> _H:
        """Decode a SCALE-encoded hash from the start of ``data``."""
        if len(data) < cls.SIZE:
            raise ValueError(f"not enough data to decode {cls.__name__}")
        return cls(bytes(data[: cls.SIZE]))

    @classmethod
    def max_encoded_len(cls) -> int:
        """The size of the SCALE encoding in bytes."""
        return cls.SIZE


class H128(FixedHash):
    """16-byte hash."""

    SIZE = 16


class H160(FixedHash):
    """20-byte hash."""

    SIZE = 20


class H256(FixedHash):
    """32-byte hash."""

    SIZE = 32


class H512(FixedHash):
    """64-byte hash."""

    SIZE = 64