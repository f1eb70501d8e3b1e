import pytest

from rlpkit.hashes import H160, H256
from rlpkit.hexser import (
    ExpectedLen,
    FromHexError,
    InvalidLengthError,
    deserialize_bytes,
    deserialize_check_len,
    from_hex,
    hash_from_hex,
    hash_to_hex,
    serialize_bytes,
    serialize_uint,
    to_hex,
    uint_from_hex,
    uint_to_hex,
)
from rlpkit.uint import U128, U256

LONG_31 = "7f864e18e3dd8b58386310d2fe0919eef27c6e558564b7f67f22d99d20f587"
LONG_ODD = "7f864e18e3dd8b58386310d2fe0919eef27c6e558564b7f67f22d99d20f587b"
LONG_32 = "7f864e18e3dd8b58386310d2fe0919eef27c6e558564b7f67f22d99d20f587b4"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0x", b""),
        ("0x1", bytes([1])),
        ("0x12", bytes([0x12])),
        ("0x123", bytes([0x1, 0x23])),
        ("0x1234", bytes([0x12, 0x34])),
        ("0x12345", bytes([0x1, 0x23, 0x45])),
        ("", b""),
        ("1", bytes([1])),
        ("12", bytes([0x12])),
        ("123", bytes([0x1, 0x23])),
        ("1234", bytes([0x12, 0x34])),
        ("12345", bytes([0x1, 0x23, 0x45])),
    ],
)
def test_short_strings(text, expected):
    assert deserialize_bytes(text) == expected


@pytest.mark.parametrize("prefix", ["0x", ""])
def test_other_strings(prefix):
    assert len(deserialize_bytes(prefix + LONG_31)) == 31
    assert len(deserialize_bytes(prefix + LONG_ODD)) == 32
    assert len(deserialize_bytes(prefix + LONG_32)) == 32


def test_serialize_and_deserialize_empty_bytes():
    data = serialize_bytes(b"")
    assert data == "0x"
    assert deserialize_bytes(data) == b""


def test_to_hex_and_from_hex_with_prefix():
    assert to_hex(bytes([0, 1, 2]), True) == "0x102"
    assert to_hex(bytes([0, 1, 2]), False) == "0x000102"
    assert to_hex(bytes([0]), True) == "0x0"
    assert to_hex(b"", True) == "0x0"
    assert to_hex(b"", False) == "0x"
    assert to_hex(bytes([0]), False) == "0x00"
    assert from_hex("0x0102") == bytes([1, 2])
    assert from_hex("0x102") == bytes([1, 2])
    assert from_hex("0xf") == bytes([0xF])


def test_from_hex_without_prefix():
    assert from_hex("0102") == bytes([1, 2])
    assert from_hex("102") == bytes([1, 2])
    assert from_hex("f") == bytes([0xF])


def test_serialize_uint_matches_to_hex_with_skip():
    data = bytes([0, 1, 2])
    assert serialize_uint(data) == to_hex(data, True)
    assert serialize_uint(b"\x00\x00") == "0x0"


def test_from_hex_uppercase_matches_lowercase():
    assert from_hex(LONG_32.upper()) == from_hex(LONG_32)
    assert from_hex(LONG_32) == bytes.fromhex(LONG_32)


def test_invalid_character_index_with_prefix():
    with pytest.raises(FromHexError) as info:
        from_hex("0x12zz")
    assert info.value.character == "z"
    assert info.value.index == 4


def test_invalid_character_index_without_prefix():
    with pytest.raises(FromHexError) as info:
        from_hex("12zz")
    assert info.value.character == "z"
    assert info.value.index == 2


def test_invalid_character_message():
    with pytest.raises(FromHexError, match="invalid hex character: g, at 0"):
        from_hex("g")


def test_non_string_rejected():
    with pytest.raises(TypeError):
        from_hex(b"12")


def test_expected_len_str():
    assert str(ExpectedLen.exact(32)) == "length of 64"
    assert str(ExpectedLen.between(0, 32)) == "length between (0; 64]"


def test_check_len_exact():
    assert deserialize_check_len("0x" + LONG_32, ExpectedLen.exact(32)) == bytes.fromhex(LONG_32)
    with pytest.raises(InvalidLengthError) as info:
        deserialize_check_len("0x" + LONG_31, ExpectedLen.exact(32))
    assert info.value.length == len(LONG_31)
    assert info.value.expected == ExpectedLen.exact(32)


def test_check_len_between():
    assert deserialize_check_len("0x1", ExpectedLen.between(0, 32)) == bytes([1])
    with pytest.raises(InvalidLengthError):
        deserialize_check_len("0x", ExpectedLen.between(0, 32))
    with pytest.raises(InvalidLengthError):
        deserialize_check_len(LONG_32 + "00", ExpectedLen.between(0, 32))


def test_uint_zero_round_trip():
    assert uint_to_hex(U256(0)) == "0x0"
    assert uint_from_hex("0x0", U256) == U256(0)


@pytest.mark.parametrize(
    "text",
    ["0x1", "0x10", "0x100", "0x1000000000000000000000000000000000000000000000000000000000000100"],
)
def test_uint_round_trip(text):
    value = uint_from_hex(text, U256)
    assert value == U256(int(text, 16))
    assert uint_to_hex(value) == text


def test_uint_max_round_trip():
    value = U128.max_value()
    assert uint_from_hex(uint_to_hex(value), U128) == value


def test_uint_rejects_empty_and_too_long():
    with pytest.raises(InvalidLengthError):
        uint_from_hex("0x", U256)
    with pytest.raises(InvalidLengthError):
        uint_from_hex("0x1" + "0" * 32, U128)


def test_hash_round_trip():
    address = "ef2d6d194084c2de36e0dabfce45d046b37d1106"
    value = H160(bytes.fromhex(address))
    assert hash_to_hex(value) == "0x" + address
    assert hash_from_hex("0x" + address, H160) == value


def test_hash_zero_keeps_all_digits():
    text = hash_to_hex(H256.zero())
    assert text == "0x" + "00" * 32
    assert hash_from_hex(text, H256) == H256.zero()


def test_hash_wrong_length():
    with pytest.raises(InvalidLengthError):
        hash_from_hex("0x" + LONG_31, H256)
    with pytest.raises(InvalidLengthError):
        hash_from_hex("0x" + LONG_32, H160)


def test_hash_invalid_character():
    with pytest.raises(FromHexError) as info:
        hash_from_hex("0x" + "q" + LONG_32[1:], H256)
    assert info.value.index == 2