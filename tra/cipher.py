"""Text obfuscation pipeline.

    encrypt: str --utf-8--> bytes --rotate(+1)--> bytes --radix.encode--> str
    decrypt: str --radix.decode--> bytes --rotate(-1)--> bytes --utf-8--> str

decrypt() never checks that its input came from encrypt(): corrupted text
decodes to best-effort garbage unless strict=True is passed.
"""

import re

from tra import radix as codec
from tra.rotation import rotate

DEFAULT_RADIX = codec.BASE64

_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")


def encrypt(text: str, radix: int = DEFAULT_RADIX) -> str:
    """Obfuscate text. Lone surrogates are encoded as U+FFFD."""
    if not isinstance(text, str):
        raise TypeError("text is not a string")
    codec.check_radix(radix)
    data = _LONE_SURROGATE.sub("\ufffd", text).encode("utf-8")
    return codec.encode(rotate(data, 1), radix)


def decrypt(text: str, radix: int = DEFAULT_RADIX, strict: bool = False) -> str:
    """Reverse encrypt().

    Lenient decoding replaces invalid UTF-8 with U+FFFD. With strict=True,
    malformed input raises ValueError (UnicodeDecodeError is one).
    """
    data = rotate(codec.decode(text, radix, strict=strict), -1)
    return data.decode("utf-8", errors="strict" if strict else "replace")
