"""Convenience functions for RLP encoding and decoding."""

from __future__ import annotations

import abc
from collections.abc import Iterable
from typing import Any

from .rlp import Rlp
from .stream import RlpStream

NULL_RLP = b"\x80"
"""The RLP encoding of empty data."""

EMPTY_LIST_RLP = b"\xc0"
"""The RLP encoding of the empty list."""


class Decodable(abc.ABC):
    """A type that can build itself from an :class:`Rlp` view."""

    @classmethod
    @abc.abstractmethod
    def decode_rlp(cls, rlp: Rlp) -> Any:
        """Decode an instance from ``rlp``."""


def encode(obj: Any) -> bytes:
    """Encode one value to RLP."""
    return RlpStream().append(obj).out()


def encode_list(objects: Iterable[Any]) -> bytes:
    """Encode a sequence of values as an RLP list."""
    return RlpStream().append_list(objects).out()


def decode(data: bytes, kind: Any) -> Any:
    """Decode ``data`` as a value of ``kind``."""
    return Rlp(data).as_val(kind)


def decode_list(data: bytes, kind: Any) -> list[Any]:
    """Decode ``data`` as a list of values of ``kind``."""
    return Rlp(data).as_list(kind)


def rlp_bytes(obj: Any) -> bytes:
    """The RLP bytes ``obj`` writes to a fresh stream, without item counting."""
    return RlpStream().append_internal(obj).out()