"""Read-only view onto RLP-encoded data."""

from __future__ import annotations

import enum
import types
import typing
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from .errors import DecoderError, DecoderErrorKind

T = TypeVar("T")

_USIZE_BYTES = 8
_USIZE_MAX = (1 << 64) - 1


def _fail(kind: DecoderErrorKind) -> DecoderError:
    return DecoderError(kind)


def decode_usize(data: bytes | memoryview) -> int:
    """Decode a big-endian length number that must not start with a zero byte."""
    if len(data) > _USIZE_BYTES:
        raise _fail(DecoderErrorKind.RLP_IS_TOO_BIG)
    if len(data) == 0:
        raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
    if data[0] == 0:
        raise _fail(DecoderErrorKind.RLP_INVALID_INDIRECTION)
    return int.from_bytes(data, "big")


class PrototypeKind(enum.Enum):
    """The shape of an RLP item."""

    NULL = "null"
    DATA = "data"
    LIST = "list"


@dataclass(frozen=True)
class Prototype:
    """Shape of an RLP item with its data size or item count."""

    kind: PrototypeKind
    length: int = 0


@dataclass(frozen=True)
class PayloadInfo:
    """Header and value lengths of an RLP item."""

    header_len: int
    value_len: int

    def total(self) -> int:
        """Total size of the item in bytes."""
        return self.header_len + self.value_len

    @classmethod
    def from_header(cls, header: bytes | memoryview) -> PayloadInfo:
        """Read the payload information from the start of ``header``."""
        if len(header) == 0:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        first = header[0]
        if first <= 0x7F:
            return cls(0, 1)
        if first <= 0xB7:
            return cls(1, first - 0x80)
        if first <= 0xBF:
            return cls._long(header, first - 0xB7)
        if first <= 0xF7:
            return cls(1, first - 0xC0)
        return cls._long(header, first - 0xF7)

    @classmethod
    def _long(cls, header: bytes | memoryview, len_of_len: int) -> PayloadInfo:
        header_len = 1 + len_of_len
        if len(header) < 2:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        if header[1] == 0:
            raise _fail(DecoderErrorKind.RLP_DATA_LEN_WITH_ZERO_PREFIX)
        if len(header) < header_len:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        value_len = decode_usize(header[1:header_len])
        if value_len <= 55:
            raise _fail(DecoderErrorKind.RLP_INVALID_INDIRECTION)
        return cls(header_len, value_len)


def _checked_payload_info(data: bytes | memoryview) -> PayloadInfo:
    info = PayloadInfo.from_header(data)
    if info.total() > len(data):
        raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
    return info


@dataclass(frozen=True)
class UIntKind:
    """Decoding target for an unsigned integer of ``size`` bytes."""

    size: int

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError("integer size must be at least one byte")

    def decode_rlp(self, rlp: Rlp) -> int:
        """Decode a canonical unsigned integer that fits in ``size`` bytes."""
        return rlp.decode_value(self._from_bytes)

    def _from_bytes(self, data: bytes) -> int:
        length = len(data)
        if length == 0:
            return 0
        if length == 1:
            if data[0] == 0:
                raise _fail(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            return data[0]
        if length > self.size:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_BIG)
        if data[0] == 0:
            raise _fail(DecoderErrorKind.RLP_INVALID_INDIRECTION)
        return int.from_bytes(data, "big")


UINT8 = UIntKind(1)
UINT16 = UIntKind(2)
UINT32 = UIntKind(4)
UINT64 = UIntKind(8)
UINT128 = UIntKind(16)


def _decode_str(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise _fail(DecoderErrorKind.RLP_EXPECTED_TO_BE_DATA) from None


def _decode_bool(rlp: Rlp) -> bool:
    value = UINT8.decode_rlp(rlp)
    if value == 0:
        return False
    if value == 1:
        return True
    raise DecoderError(DecoderErrorKind.CUSTOM, "invalid boolean value")


def _decode_optional(rlp: Rlp, inner: Any) -> Any:
    count = rlp.item_count()
    if count == 1:
        return rlp.val_at(0, inner)
    if count == 0:
        return None
    raise _fail(DecoderErrorKind.RLP_INCORRECT_LIST_LEN)


def _decode(rlp: Rlp, kind: Any) -> Any:
    if kind is bytes:
        return rlp.decode_value(bytes)
    if kind is bytearray:
        return rlp.decode_value(bytearray)
    if kind is str:
        return rlp.decode_value(_decode_str)
    if kind is bool:
        return _decode_bool(rlp)
    if kind is int:
        return UINT64.decode_rlp(rlp)
    origin = typing.get_origin(kind)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(kind)
        others = [arg for arg in args if arg is not type(None)]
        if len(args) == 2 and len(others) == 1:
            return _decode_optional(rlp, others[0])
    if origin is list:
        (element,) = typing.get_args(kind)
        return rlp.as_list(element)
    decoder = getattr(kind, "decode_rlp", None)
    if callable(decoder):
        return decoder(rlp)
    raise TypeError(f"cannot RLP-decode into {kind!r}")


class Rlp:
    """Immutable, data-oriented view onto an RLP item."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._offset_cache: tuple[int, int] | None = None
        self._count_cache: int | None = None

    def __repr__(self) -> str:
        return f"Rlp({self._data.hex()})"

    def __str__(self) -> str:
        try:
            proto = self.prototype()
        except DecoderError as err:
            return str(err)
        if proto.kind is PrototypeKind.NULL:
            return "null"
        if proto.kind is PrototypeKind.DATA:
            return f'"0x{self.data().hex()}"'
        items = ", ".join(str(self.at(index)) for index in range(proto.length))
        return f"[{items}]"

    def __iter__(self) -> Iterator[Rlp]:
        index = 0
        while True:
            try:
                item = self.at(index)
            except DecoderError:
                return
            yield item
            index += 1

    def as_raw(self) -> bytes:
        """The raw bytes of this item."""
        return self._data

    def prototype(self) -> Prototype:
        """The shape of this item."""
        if self.is_data():
            return Prototype(PrototypeKind.DATA, self.size())
        if self.is_list():
            return Prototype(PrototypeKind.LIST, self.item_count())
        return Prototype(PrototypeKind.NULL)

    def payload_info(self) -> PayloadInfo:
        """Header and value lengths of this item."""
        return _checked_payload_info(self._data)

    def data(self) -> bytes:
        """The value bytes of this item, without the header."""
        info = _checked_payload_info(self._data)
        return self._data[info.header_len:info.total()]

    def item_count(self) -> int:
        """Number of items in this list."""
        if not self.is_list():
            raise _fail(DecoderErrorKind.RLP_EXPECTED_TO_BE_LIST)
        if self._count_cache is None:
            self._count_cache = sum(1 for _ in self)
        return self._count_cache

    def size(self) -> int:
        """Value length of a data item, or 0."""
        if not self.is_data():
            return 0
        try:
            return _checked_payload_info(self._data).value_len
        except DecoderError:
            return 0

    def at(self, index: int) -> Rlp:
        """The list item at ``index``."""
        item, _ = self.at_with_offset(index)
        return item

    def at_with_offset(self, index: int) -> tuple[Rlp, int]:
        """The list item at ``index`` and its byte offset into this item."""
        if not self.is_list():
            raise _fail(DecoderErrorKind.RLP_EXPECTED_TO_BE_LIST)
        view = memoryview(self._data)
        cache = self._offset_cache
        if cache is not None and cache[0] <= index:
            rest = self._consume(view, cache[1])
            to_skip = index - cache[0]
            consumed = cache[1]
        else:
            rest, consumed = self._consume_list_payload(view)
            to_skip = index
        rest, skipped = self._consume_items(rest, to_skip)
        offset = consumed + skipped
        self._offset_cache = (index, offset)
        found = _checked_payload_info(rest)
        return Rlp(rest[:found.total()]), offset

    def is_null(self) -> bool:
        """True when there are no bytes at all."""
        return len(self._data) == 0

    def is_empty(self) -> bool:
        """True for the empty data item or the empty list."""
        return not self.is_null() and self._data[0] in (0xC0, 0x80)

    def is_list(self) -> bool:
        """True when this item is a list."""
        return not self.is_null() and self._data[0] >= 0xC0

    def is_data(self) -> bool:
        """True when this item is data."""
        return not self.is_null() and self._data[0] < 0xC0

    def is_int(self) -> bool:
        """True when this item is a canonically encoded integer."""
        if self.is_null():
            return False
        first = self._data[0]
        if first <= 0x80:
            return True
        if first <= 0xB7:
            return len(self._data) > 1 and self._data[1] != 0
        if first <= 0xBF:
            payload_idx = 1 + first - 0xB7
            return payload_idx < len(self._data) and self._data[payload_idx] != 0
        return False

    def as_val(self, kind: Any) -> Any:
        """Decode this item as ``kind``."""
        return _decode(self, kind)

    def as_list(self, kind: Any) -> list[Any]:
        """Decode every item of this list as ``kind``."""
        return [item.as_val(kind) for item in self]

    def val_at(self, index: int, kind: Any) -> Any:
        """Decode the list item at ``index`` as ``kind``."""
        return self.at(index).as_val(kind)

    def list_at(self, index: int, kind: Any) -> list[Any]:
        """Decode the list item at ``index`` as a list of ``kind``."""
        return self.at(index).as_list(kind)

    def decode_value(self, func: Callable[[bytes], T]) -> T:
        """Pass the value bytes of this data item to ``func``."""
        data = self._data
        if not data:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        first = data[0]
        if first <= 0x7F:
            return func(bytes([first]))
        if first <= 0xB7:
            end = 1 + first - 0x80
            if len(data) < end:
                raise _fail(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            value = data[1:end]
            if first == 0x81 and value[0] < 0x80:
                raise _fail(DecoderErrorKind.RLP_INVALID_INDIRECTION)
            return func(value)
        if first <= 0xBF:
            begin = 1 + first - 0xB7
            if len(data) < begin:
                raise _fail(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            length = decode_usize(data[1:begin])
            end = begin + length
            if end > _USIZE_MAX:
                raise _fail(DecoderErrorKind.RLP_INVALID_LENGTH)
            if len(data) < end:
                raise _fail(DecoderErrorKind.RLP_INCONSISTENT_LENGTH_AND_DATA)
            return func(data[begin:end])
        raise _fail(DecoderErrorKind.RLP_EXPECTED_TO_BE_DATA)

    def _consume_list_payload(self, view: memoryview) -> tuple[memoryview, int]:
        info = _checked_payload_info(view)
        if len(view) < info.total():
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        return view[info.header_len:info.total()], info.header_len

    @classmethod
    def _consume_items(cls, view: memoryview, count: int) -> tuple[memoryview, int]:
        consumed = 0
        for _ in range(count):
            size = _checked_payload_info(view).total()
            view = cls._consume(view, size)
            consumed += size
        return view, consumed

    @staticmethod
    def _consume(view: memoryview, length: int) -> memoryview:
        if len(view) < length:
            raise _fail(DecoderErrorKind.RLP_IS_TOO_SHORT)
        return view[length:]