"""
Base32 codec (RFC 4648 alphabet) for human-transcribable secrets.

Decoding is tolerant: whitespace is ignored, case does not matter and a
trailing ``=`` run may be present or absent.  Encoding can group the
output in blocks of four characters, pad it to a multiple of eight
symbols and choose the letter case.
"""

from enum import IntFlag
from typing import Optional, Union

from core.errors import InvalidFormatError, NullInputError, OutOfRangeError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_DECODE_MAP: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}

BytesLike = Union[bytes, bytearray, memoryview]


class SecretFormat(IntFlag):
    """Formatting options for :func:`encode`."""

    NONE = 0
    SPACING = 1
    PADDING = 2
    UPPERCASE = 4


# ── Decoding ──────────────────────────────────────────────────────────────────

def decoded_capacity(text: str) -> int:
    """Return the number of bytes needed to decode *text*."""
    symbols = sum(1 for ch in text if not ch.isspace() and ch != "=")
    return (symbols * 5 + 7) // 8


def decode_into(text: str, buffer: bytearray) -> int:
    """
    Decode Base32 *text* into *buffer*.

    Args:
        text:   Base32 text.  Whitespace is skipped, letters may be of
                either case.
        buffer: Destination; must be large enough for the decoded bytes.

    Returns:
        Number of bytes written to ``buffer``.

    Raises:
        NullInputError:     If ``text`` is None.
        InvalidFormatError: On an unknown character, or on data after
                            padding has started.
        OutOfRangeError:    If the decoded data does not fit ``buffer``.
    """
    if text is None:
        raise NullInputError("Text cannot be None.")

    index = 0
    bits = 0
    bit_count = 0
    padding = False

    for ch in text:
        if ch.isspace():
            continue
        if ch == "=":
            padding = True
            continue
        if padding:
            raise InvalidFormatError(f"Character {ch!r} found after padding.")

        value = _DECODE_MAP.get(ch.upper())
        if value is None:
            raise InvalidFormatError(f"Unknown character {ch!r}.")

        bits = (bits << 5) | value
        bit_count += 5
        if bit_count >= 8:
            bit_count -= 8
            if index >= len(buffer):
                raise OutOfRangeError("Decoded data does not fit the buffer.")
            buffer[index] = (bits >> bit_count) & 0xFF
            index += 1
            bits &= (1 << bit_count) - 1

    # Unpadded text may end on a partial group; keep it when it carries
    # at least five bits.
    if not padding and bit_count >= 5:
        if index >= len(buffer):
            raise OutOfRangeError("Decoded data does not fit the buffer.")
        buffer[index] = (bits << (8 - bit_count)) & 0xFF
        index += 1

    return index


def decode(text: str) -> bytes:
    """Decode Base32 *text* and return the raw bytes."""
    if text is None:
        raise NullInputError("Text cannot be None.")
    buffer = bytearray(decoded_capacity(text))
    length = decode_into(text, buffer)
    return bytes(buffer[:length])


# ── Encoding ──────────────────────────────────────────────────────────────────

def encode(
    data: BytesLike,
    length: Optional[int] = None,
    fmt: SecretFormat = SecretFormat.NONE,
) -> str:
    """
    Encode the first *length* bytes of *data* as Base32.

    Example::

        >>> encode(b"foobar", fmt=SecretFormat.SPACING | SecretFormat.PADDING)
        'mzxw 6ytb oi== ===='

    Args:
        data:   Source bytes.
        length: Number of bytes to encode (defaults to ``len(data)``).
        fmt:    Combination of :class:`SecretFormat` flags.

    Returns:
        Base32 text; empty for empty input regardless of ``fmt``.
    """
    if data is None:
        raise NullInputError("Data cannot be None.")
    if length is None:
        length = len(data)
    if length < 0 or length > len(data):
        raise OutOfRangeError(f"Length must be between 0 and {len(data)}.")
    if length == 0:
        return ""

    alphabet = ALPHABET if fmt & SecretFormat.UPPERCASE else ALPHABET.lower()

    symbols = []
    bits = 0
    bit_count = 0
    for i in range(length):
        bits = ((bits << 8) | data[i]) & 0xFFF
        bit_count += 8
        while bit_count >= 5:
            bit_count -= 5
            symbols.append(alphabet[(bits >> bit_count) & 0x1F])
    if bit_count > 0:
        symbols.append(alphabet[(bits << (5 - bit_count)) & 0x1F])

    if fmt & SecretFormat.PADDING:
        symbols.extend("=" * (-len(symbols) % 8))

    if fmt & SecretFormat.SPACING:
        return " ".join(
            "".join(symbols[i : i + 4]) for i in range(0, len(symbols), 4)
        )
    return "".join(symbols)
