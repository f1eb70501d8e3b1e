"""Class decorators that give dataclasses RLP encoding and decoding."""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import DecoderError
from .rlp import Rlp
from .stream import Encodable, RlpStream

_C = TypeVar("_C", bound=type)

_DEFAULT_MARK = "rlp"
_DEFAULT_FACTORY = "rlp_default_factory"

_NAMED_HINTS: dict[str, Any] = {
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "int": int,
    "bool": bool,
}


class DeriveError(TypeError):
    """A class cannot be given the requested RLP behaviour."""


def rlp_default(default_factory: Callable[[], Any] | None = None) -> Any:
    """Declare a dataclass field that falls back to a default when it fails to decode.

    Without ``default_factory`` the fallback value is ``None``. At most one
    such field is allowed per class.
    """
    metadata = {_DEFAULT_MARK: "default", _DEFAULT_FACTORY: default_factory}
    if default_factory is None:
        return dataclasses.field(default=None, metadata=metadata)
    return dataclasses.field(default_factory=default_factory, metadata=metadata)


def _field_hint(field: dataclasses.Field, derive_name: str) -> Any:
    hint = field.type
    if isinstance(hint, str):
        resolved = _NAMED_HINTS.get(hint.strip())
        if resolved is None:
            raise DeriveError(
                f"{derive_name} cannot resolve the annotation {hint!r} of field {field.name!r}; "
                "annotate it with a type object"
            )
        return resolved
    return hint


def _struct_fields(cls: type, derive_name: str) -> list[tuple[dataclasses.Field, Any]]:
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise DeriveError(f"{derive_name} is only defined for dataclasses.")
    return [(field, _field_hint(field, derive_name)) for field in dataclasses.fields(cls)]


def _single_field(cls: type, derive_name: str) -> tuple[dataclasses.Field, Any]:
    fields = _struct_fields(cls, derive_name)
    if len(fields) != 1:
        raise DeriveError(f"{derive_name} is only defined for dataclasses with one field.")
    return fields[0]


def _optional_inner(hint: Any) -> Any | None:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(hint)
        others = [arg for arg in args if arg is not type(None)]
        if len(args) == 2 and len(others) == 1:
            return others[0]
    return None


def _list_element(hint: Any) -> Any | None:
    if typing.get_origin(hint) is list:
        args = typing.get_args(hint)
        return args[0] if args else Any
    return None


def _append_typed(stream: RlpStream, value: Any, hint: Any) -> None:
    """Append ``value`` as one counted item, guided by its type hint."""
    inner = _optional_inner(hint)
    if inner is not None:
        if value is None:
            stream.begin_list(0)
        else:
            stream.begin_list(1)
            _append_typed(stream, value, inner)
        return
    element = _list_element(hint)
    if element is not None:
        items = list(value)
        stream.begin_list(len(items))
        for item in items:
            _append_typed(stream, item, element)
        return
    stream.append(value)


def _append_uncounted(stream: RlpStream, value: Any, hint: Any) -> None:
    """Write ``value`` for a wrapper; lists count themselves, scalars do not."""
    if _optional_inner(hint) is not None or _list_element(hint) is not None:
        _append_typed(stream, value, hint)
    else:
        stream.append_internal(value)


def _is_default(field: dataclasses.Field) -> bool:
    return field.metadata.get(_DEFAULT_MARK) == "default"


def _fallback(field: dataclasses.Field) -> Any:
    factory = field.metadata.get(_DEFAULT_FACTORY)
    return factory() if factory is not None else None


def rlp_encodable(cls: _C) -> _C:
    """Encode a dataclass as an RLP list of its fields, in declaration order."""
    fields = _struct_fields(cls, "rlp_encodable")

    def rlp_append(self: Any, stream: RlpStream) -> None:
        stream.begin_list(len(fields))
        for field, hint in fields:
            _append_typed(stream, getattr(self, field.name), hint)

    cls.rlp_append = rlp_append  # type: ignore[attr-defined]
    Encodable.register(cls)
    return cls


def rlp_encodable_wrapper(cls: _C) -> _C:
    """Encode a one-field dataclass as its single field."""
    field, hint = _single_field(cls, "rlp_encodable_wrapper")

    def rlp_append(self: Any, stream: RlpStream) -> None:
        _append_uncounted(stream, getattr(self, field.name), hint)

    cls.rlp_append = rlp_append  # type: ignore[attr-defined]
    Encodable.register(cls)
    return cls


def rlp_decodable(cls: _C) -> _C:
    """Decode a dataclass from an RLP list of its fields."""
    fields = _struct_fields(cls, "rlp_decodable")
    plan: list[tuple[dataclasses.Field, Any, int, bool]] = []
    default_seen = False
    for position, (field, hint) in enumerate(fields):
        index = position - 1 if default_seen else position
        is_default = _is_default(field)
        if is_default:
            if default_seen:
                raise DeriveError("only 1 rlp_default field is allowed in a class")
            default_seen = True
        plan.append((field, hint, index, is_default))

    def decode_rlp(klass: type, rlp: Rlp) -> Any:
        values: dict[str, Any] = {}
        for field, hint, index, is_default in plan:
            element = _list_element(hint)
            try:
                if element is not None:
                    value = rlp.list_at(index, element)
                else:
                    value = rlp.val_at(index, hint)
            except DecoderError:
                if not is_default:
                    raise
                value = _fallback(field)
            values[field.name] = value
        return klass(**values)

    cls.decode_rlp = classmethod(decode_rlp)  # type: ignore[attr-defined]
    return cls


def rlp_decodable_wrapper(cls: _C) -> _C:
    """Decode a one-field dataclass from the encoding of its single field."""
    field, hint = _single_field(cls, "rlp_decodable_wrapper")
    element = _list_element(hint)

    def decode_rlp(klass: type, rlp: Rlp) -> Any:
        if element is not None:
            value = rlp.as_list(element)
        else:
            value = rlp.as_val(hint)
        return klass(**{field.name: value})

    cls.decode_rlp = classmethod(decode_rlp)  # type: ignore[attr-defined]
    return cls