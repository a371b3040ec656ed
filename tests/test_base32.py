"""Tests for core.base32."""

import random

import pytest

from core import base32
from core.base32 import SecretFormat
from core.errors import InvalidFormatError, NullInputError, OutOfRangeError


# ── RFC 4648 §10 test vectors ─────────────────────────────────────────────────

_RFC4648_VECTORS = [
    (b"", ""),
    (b"f", "MY======"),
    (b"fo", "MZXQ===="),
    (b"foo", "MZXW6==="),
    (b"foob", "MZXW6YQ="),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI======"),
]

_ALL_FORMATS = [SecretFormat(value) for value in range(8)]


@pytest.mark.parametrize("raw,expected", _RFC4648_VECTORS)
def test_encode_rfc4648_vectors(raw: bytes, expected: str) -> None:
    assert base32.encode(raw, fmt=SecretFormat.PADDING | SecretFormat.UPPERCASE) == expected


@pytest.mark.parametrize("raw,expected", _RFC4648_VECTORS)
def test_decode_rfc4648_vectors(raw: bytes, expected: str) -> None:
    assert base32.decode(expected) == raw
    assert base32.decode(expected.lower().rstrip("=")) == raw


# ── Encoding format ───────────────────────────────────────────────────────────

def test_encode_default_is_lowercase_unpadded() -> None:
    assert base32.encode(b"foobar") == "mzxw6ytboi"


def test_encode_spacing() -> None:
    assert base32.encode(b"foobar", fmt=SecretFormat.SPACING) == "mzxw 6ytb oi"


def test_encode_spacing_no_trailing_space() -> None:
    assert base32.encode(b"fooba", fmt=SecretFormat.SPACING) == "mzxw 6ytb"


def test_encode_spacing_with_padding() -> None:
    fmt = SecretFormat.SPACING | SecretFormat.PADDING
    assert base32.encode(b"foobar", fmt=fmt) == "mzxw 6ytb oi== ===="
    assert base32.encode(b"f", fmt=fmt | SecretFormat.UPPERCASE) == "MY== ===="


@pytest.mark.parametrize("fmt", _ALL_FORMATS)
def test_encode_empty_ignores_format(fmt: SecretFormat) -> None:
    assert base32.encode(b"", fmt=fmt) == ""


def test_encode_length_prefix() -> None:
    buffer = bytearray(b"foobar" + b"\x00" * 10)
    assert base32.encode(buffer, 3, SecretFormat.UPPERCASE) == "MZXW6"


def test_encode_length_out_of_range() -> None:
    with pytest.raises(OutOfRangeError):
        base32.encode(b"foo", 4)


def test_encode_none_rejected() -> None:
    with pytest.raises(NullInputError):
        base32.encode(None)  # type: ignore[arg-type]


# ── Decoding ──────────────────────────────────────────────────────────────────

def test_decode_ignores_whitespace_and_case() -> None:
    assert base32.decode(" mzXw 6ytb\toi==\n==== ") == b"foobar"


def test_decode_rejects_data_after_padding() -> None:
    with pytest.raises(InvalidFormatError):
        base32.decode("MY======MY")


def test_decode_rejects_unknown_character() -> None:
    with pytest.raises(InvalidFormatError):
        base32.decode("MZ1W")


def test_decode_none_rejected() -> None:
    with pytest.raises(NullInputError):
        base32.decode(None)  # type: ignore[arg-type]


def test_decode_trailing_partial_group_kept_without_padding() -> None:
    # 15 bits: one full byte plus seven leftover bits.
    assert base32.decode("MZX") == b"fn"


def test_decode_trailing_partial_group_dropped_with_padding() -> None:
    assert base32.decode("MZX=====") == b"f"


def test_decode_into_reports_length() -> None:
    buffer = bytearray(16)
    assert base32.decode_into("MZXW6YTBOI", buffer) == 6
    assert bytes(buffer[:6]) == b"foobar"
    assert bytes(buffer[6:]) == b"\x00" * 10


def test_decode_into_overflow() -> None:
    with pytest.raises(OutOfRangeError):
        base32.decode_into("MZXW6YTBOI", bytearray(5))


def test_decoded_capacity() -> None:
    assert base32.decoded_capacity("MZXW 6YTB OI== ====") == 7


# ── Round trip ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("fmt", _ALL_FORMATS)
def test_round_trip(fmt: SecretFormat) -> None:
    rng = random.Random(4648)
    for length in range(126):
        raw = bytes(rng.randrange(256) for _ in range(length))
        assert base32.decode(base32.encode(raw, fmt=fmt)) == raw, f"length={length}"
