"""Radix text encoding of byte strings.

Two families of encodings are supported:

1. Positional numerals, radix 2 through 36. Every byte is written as its
   value in the radix using the digits "0-9a-z", left-padded with "0" to a
   fixed chunk width C, the smallest C with radix**C >= 256:

     radix  2 → 8 chars per byte   (00000000 .. 11111111)
     radix  3 → 6 chars per byte
     radix 10 → 3 chars per byte   (000 .. 255)
     radix 16 → 2 chars per byte   (00 .. ff)
     radix 36 → 2 chars per byte   (00 .. 73)

   The fixed width is what makes the output splittable on decode without
   separators. Output length = n * C.

2. Radix 64, standard Base64 (RFC 4648 alphabet, "=" padded).

Decoding is lenient by default: stored data is not validated, and anything
that does not parse decodes to best-effort bytes instead of raising. Pass
strict=True to get a ValueError on malformed input instead.
"""

import base64
import re
from functools import lru_cache

DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE64 = 64
RADIXES = frozenset(range(2, 37)) | {BASE64}

# parseInt-style digit values, case-insensitive
_DIGIT_VALUES = {c: i for i, c in enumerate(DIGITS)}
_DIGIT_VALUES.update({c.upper(): i for i, c in enumerate(DIGITS) if c.isalpha()})

_NOT_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def check_radix(radix) -> int:
    """Reject anything but an int in 2..36 or 64.

    TypeError for the wrong type, ValueError for the wrong value.
    """
    # bool is an int subclass; True is not a radix
    if not isinstance(radix, int) or isinstance(radix, bool):
        raise TypeError("radix is not an integer")
    if radix not in RADIXES:
        raise ValueError("radix is not between 2 and 36 or 64")
    return radix


def as_bytes(data) -> bytes:
    """Convert a bytes-like argument to bytes at the API edge."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
    return bytes(data)


@lru_cache(maxsize=None, typed=True)
def chunk_width(radix: int) -> int:
    """Characters per byte for a positional radix (2..36)."""
    check_radix(radix)
    if radix == BASE64:
        raise ValueError("base64 has no fixed chunk width")
    width = 1
    while radix ** width < 256:
        width += 1
    return width


@lru_cache(maxsize=None)
def _byte_digits(radix: int) -> tuple[str, ...]:
    """All 256 byte values rendered in `radix`, zero-padded to chunk width."""
    width = chunk_width(radix)
    table = []
    for b in range(256):
        digits = []
        for _ in range(width):
            b, d = divmod(b, radix)
            digits.append(DIGITS[d])
        table.append("".join(reversed(digits)))
    return tuple(table)


def encode(data: bytes, radix: int = BASE64) -> str:
    """Encode bytes as text in the given radix."""
    data = as_bytes(data)
    check_radix(radix)
    if radix == BASE64:
        return base64.b64encode(data).decode("ascii")
    table = _byte_digits(radix)
    return "".join(table[b] for b in data)


def decode(s: str, radix: int = BASE64, strict: bool = False) -> bytes:
    """Decode text produced by encode() back to bytes.

    In lenient mode (the default) a chunk that is not a number in the radix
    decodes to 0, a trailing partial chunk is still parsed, and base64 input
    is cleaned up before decoding. With strict=True any of these raises
    ValueError.
    """
    if not isinstance(s, str):
        raise TypeError("encoded string is not a string")
    check_radix(radix)
    if radix == BASE64:
        return _decode_base64(s, strict)

    width = chunk_width(radix)
    if strict and len(s) % width:
        raise ValueError(
            f"encoded length {len(s)} is not a multiple of chunk width {width}"
        )
    result = bytearray()
    for i in range(0, len(s), width):
        result.append(_parse_chunk(s[i:i + width], radix, strict))
    return bytes(result)


def _parse_chunk(chunk: str, radix: int, strict: bool) -> int:
    """Read one chunk as a number in `radix`.

    Lenient parsing reads like JavaScript's parseInt: leading whitespace and
    one sign are skipped, then the leading run of valid digits is kept. No
    digits gives 0. The result is wrapped to a byte, so "-1" is 0xff.
    """
    if strict:
        value = 0
        for ch in chunk:
            d = _DIGIT_VALUES.get(ch)
            if d is None or d >= radix:
                raise ValueError(f"invalid radix {radix} digit: {ch!r}")
            value = value * radix + d
        if value > 0xFF:
            raise ValueError(f"chunk {chunk!r} is out of byte range in radix {radix}")
        return value

    rest = chunk.lstrip()
    sign = 1
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    value = 0
    for ch in rest:
        d = _DIGIT_VALUES.get(ch)
        if d is None or d >= radix:
            break
        value = value * radix + d
    return (sign * value) & 0xFF


def _decode_base64(s: str, strict: bool) -> bytes:
    if strict:
        # binascii.Error is a ValueError subclass
        return base64.b64decode(s, validate=True)
    cleaned = _NOT_BASE64.sub("", s)
    if len(cleaned) % 4 == 1:
        # a lone 6-bit group cannot encode a byte
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned)
