"""Appendable RLP encoder."""

from __future__ import annotations

import abc
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


class Encodable(abc.ABC):
    """A value that knows how to append itself to an :class:`RlpStream`."""

    @abc.abstractmethod
    def rlp_append(self, stream: RlpStream) -> None:
        """Append this value to ``stream``."""


@dataclass
class _ListInfo:
    position: int
    max: int | None
    current: int = 0


def _minimal_be(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


class RlpStream:
    """Builds RLP output item by item, with support for nested lists."""

    def __init__(self, buffer: bytes | bytearray | None = None) -> None:
        self._buffer = bytearray(buffer) if buffer is not None else bytearray()
        self._start_pos = len(self._buffer)
        self._unfinished: list[_ListInfo] = []
        self._finished_list = False

    @classmethod
    def new_list(cls, length: int, buffer: bytes | bytearray | None = None) -> RlpStream:
        """Create a stream that starts with a list of ``length`` items."""
        stream = cls(buffer)
        stream.begin_list(length)
        return stream

    def _total_written(self) -> int:
        return len(self._buffer) - self._start_pos

    def append_empty_data(self) -> RlpStream:
        """Append the empty data item. Chainable."""
        self._buffer.append(0x80)
        self._note_appended(1)
        return self

    def append_raw(self, data: bytes, item_count: int) -> RlpStream:
        """Append pre-serialised RLP counting as ``item_count`` items. Chainable."""
        self._buffer.extend(data)
        self._note_appended(item_count)
        return self

    def append(self, value: Any) -> RlpStream:
        """Append a value as one item. Chainable."""
        self._finished_list = False
        self._encode_any(value)
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_iter(self, values: Iterable[int]) -> RlpStream:
        """Append the bytes produced by ``values`` as one data item. Chainable."""
        self._finished_list = False
        self.encode_value(bytes(values))
        if not self._finished_list:
            self._note_appended(1)
        return self

    def append_list(self, values: Iterable[Any]) -> RlpStream:
        """Append a list made of ``values``. Chainable."""
        items = list(values)
        self.begin_list(len(items))
        for item in items:
            self.append(item)
        return self

    def append_internal(self, value: Any) -> RlpStream:
        """Append a value without counting it as an item. Chainable."""
        self._encode_any(value)
        return self

    def begin_list(self, length: int) -> RlpStream:
        """Declare a list of ``length`` items. Chainable."""
        if length < 0:
            raise ValueError("list length cannot be negative")
        self._finished_list = False
        if length == 0:
            self._buffer.append(0xC0)
            self._note_appended(1)
            self._finished_list = True
        else:
            # One header byte is reserved; longer headers are inserted later.
            self._buffer.append(0)
            self._unfinished.append(_ListInfo(self._total_written(), length))
        return self

    def begin_unbounded_list(self) -> RlpStream:
        """Declare a list of unknown size. Chainable."""
        self._finished_list = False
        self._buffer.append(0)
        self._unfinished.append(_ListInfo(self._total_written(), None))
        return self

    def finalize_unbounded_list(self) -> None:
        """Close the innermost unbounded list."""
        if not self._unfinished:
            raise RuntimeError("No open list.")
        info = self._unfinished.pop()
        if info.max is not None:
            raise RuntimeError("List type mismatch.")
        self._insert_list_payload(self._total_written() - info.position, info.position)
        self._note_appended(1)
        self._finished_list = True

    def append_raw_checked(self, data: bytes, item_count: int, max_size: int) -> bool:
        """Append raw RLP unless the result would exceed ``max_size`` bytes."""
        if self.estimate_size(len(data)) > max_size:
            return False
        self.append_raw(data, item_count)
        return True

    def estimate_size(self, add: int = 0) -> int:
        """Total RLP size once ``add`` more payload bytes are appended."""
        total = self._total_written() + add
        size = total
        for info in self._unfinished:
            length = total - info.position
            if length > 55:
                size += (length.bit_length() + 7) // 8
        return size

    def __len__(self) -> int:
        return self.estimate_size(0)

    def clear(self) -> None:
        """Drop everything written by this stream so far."""
        del self._buffer[self._start_pos:]
        self._unfinished.clear()

    def is_finished(self) -> bool:
        """True when no list is waiting for more items."""
        return not self._unfinished

    def as_raw(self) -> bytes:
        """The buffer as it stands, including any initial contents."""
        return bytes(self._buffer)

    def out(self) -> bytes:
        """The finished output; raises if a list is still open."""
        if not self.is_finished():
            raise RuntimeError("stream has unfinished lists")
        return bytes(self._buffer)

    def encode_value(self, value: bytes) -> None:
        """Write ``value`` as a data item without counting it."""
        value = bytes(value)
        length = len(value)
        if length == 0:
            self._buffer.append(0x80)
        elif length == 1 and value[0] < 0x80:
            self._buffer.append(value[0])
        elif length <= 55:
            self._buffer.append(0x80 + length)
            self._buffer.extend(value)
        else:
            size = _minimal_be(length)
            self._buffer.append(0xB7 + len(size))
            self._buffer.extend(size)
            self._buffer.extend(value)

    def _encode_any(self, value: Any) -> None:
        if value is None:
            self.begin_list(0)
        elif isinstance(value, bool):
            self.encode_value(b"\x01" if value else b"")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError("cannot encode a negative integer")
            self.encode_value(_minimal_be(value))
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.encode_value(bytes(value))
        elif isinstance(value, str):
            self.encode_value(value.encode("utf-8"))
        elif isinstance(value, (list, tuple)):
            self.append_list(value)
        elif callable(getattr(value, "rlp_append", None)):
            value.rlp_append(self)
        else:
            raise TypeError(f"cannot RLP-encode value of type {type(value).__name__}")

    def _insert_list_payload(self, length: int, position: int) -> None:
        header_index = self._start_pos + position - 1
        if length <= 55:
            self._buffer[header_index] = 0xC0 + length
        else:
            size = _minimal_be(length)
            at = self._start_pos + position
            self._buffer[at:at] = size
            self._buffer[header_index] = 0xF7 + len(size)

    def _note_appended(self, count: int) -> None:
        if not self._unfinished:
            return
        first_finished: bool | None = None
        while self._unfinished:
            info = self._unfinished[-1]
            info.current += count
            if info.max is not None and info.current > info.max:
                raise RuntimeError("You cannot append more items than you expect!")
            done = info.max is not None and info.current == info.max
            if first_finished is None:
                first_finished = done
            if not done:
                break
            self._unfinished.pop()
            self._insert_list_payload(self._total_written() - info.position, info.position)
            count = 1
        self._finished_list = bool(first_finished)