from dataclasses import dataclass
from typing import Optional

import pytest

from rlpkit.api import decode, encode
from rlpkit.derive import (
    DeriveError,
    rlp_decodable,
    rlp_decodable_wrapper,
    rlp_default,
    rlp_encodable,
    rlp_encodable_wrapper,
)
from rlpkit.errors import DecoderError, DecoderErrorKind
from rlpkit.stream import Encodable, RlpStream


@rlp_encodable
@rlp_decodable
@dataclass
class Item:
    a: str


@rlp_encodable_wrapper
@rlp_decodable_wrapper
@dataclass
class ItemWrapper:
    a: str


@rlp_encodable
@rlp_decodable
@dataclass
class ItemDefault:
    a: str
    b: Optional[bytes] = rlp_default()


@rlp_encodable
@rlp_decodable
@dataclass
class Pair:
    x: int
    y: int


@rlp_encodable
@rlp_decodable
@dataclass
class Holder:
    items: list[Pair]


@rlp_encodable_wrapper
@rlp_decodable_wrapper
@dataclass
class Numbers:
    values: list[int]


def test_encode_item():
    item = Item("cat")
    expected = bytes([0xC4, 0x83]) + b"cat"
    assert encode(item) == expected
    assert decode(expected, Item) == item


def test_encode_item_wrapper():
    item = ItemWrapper("cat")
    expected = bytes([0x83]) + b"cat"
    assert encode(item) == expected
    assert decode(expected, ItemWrapper) == item


def test_encode_item_default():
    item = Item("clones")
    expected = bytes([0xC7, 0x86]) + b"clones"
    assert encode(item) == expected

    assert decode(expected, ItemDefault) == ItemDefault("clones", None)

    item_some = ItemDefault("clones", b"\x01\x02\x03")
    out = encode(item_some)
    assert decode(out, ItemDefault) == item_some


def test_default_none_encodes_empty_list():
    assert encode(ItemDefault("a", None)) == bytes([0xC2, 0x61, 0xC0])


def test_nested_derived_list_roundtrip():
    holder = Holder([Pair(1, 2), Pair(3, 4)])
    out = encode(holder)
    assert out == bytes([0xC7, 0xC6, 0xC2, 0x01, 0x02, 0xC2, 0x03, 0x04])
    assert decode(out, Holder) == holder


def test_wrapper_with_list_field():
    numbers = Numbers([1, 2])
    out = encode(numbers)
    assert out == bytes([0xC2, 0x01, 0x02])
    assert decode(out, Numbers) == numbers


def test_wrapper_inside_list_counts_once():
    stream = RlpStream.new_list(2)
    stream.append(ItemWrapper("cat")).append(ItemWrapper("dog"))
    assert stream.is_finished()
    assert stream.out() == bytes([0xC8, 0x83]) + b"cat" + bytes([0x83]) + b"dog"


def test_missing_required_field_raises():
    with pytest.raises(DecoderError) as info:
        decode(b"\xc0", Item)
    assert info.value.kind is DecoderErrorKind.RLP_IS_TOO_SHORT


def test_derived_class_is_encodable():
    @dataclass
    class Plain:
        a: str

    derived = rlp_encodable(Plain)
    assert derived is Plain
    assert isinstance(Plain("x"), Encodable)
    assert encode(Plain("x")) == bytes([0xC1, 0x78])


def test_two_defaults_rejected():
    @dataclass
    class TwoDefaults:
        a: Optional[bytes] = rlp_default()
        b: Optional[bytes] = rlp_default()

    with pytest.raises(DeriveError):
        rlp_decodable(TwoDefaults)


def test_wrapper_needs_one_field():
    @dataclass
    class TwoFields:
        a: str
        b: str

    with pytest.raises(DeriveError):
        rlp_encodable_wrapper(TwoFields)


def test_decodable_wrapper_needs_one_field():
    @dataclass
    class NoFields:
        pass

    with pytest.raises(DeriveError):
        rlp_decodable_wrapper(NoFields)


def test_non_dataclass_rejected():
    class Plain:
        pass

    with pytest.raises(DeriveError):
        rlp_encodable(Plain)


def test_default_factory_used_on_failure():
    @rlp_decodable
    @dataclass
    class WithFactory:
        a: str
        b: list[int] = rlp_default(lambda: [7])

    assert decode(bytes([0xC2, 0x61, 0xC0]), WithFactory) == WithFactory("a", [])
    assert decode(bytes([0xC1, 0x61]), WithFactory) == WithFactory("a", [7])