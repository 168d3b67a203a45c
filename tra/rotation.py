"""Rotation transform: a reversible, position-keyed byte shift.

Every byte at position p of an n-byte string is shifted by an offset in
0..255 derived only from (n, p):

    K[i]      = mix32(i ^ (n * C1), 0x27d4fb2d, 0x175667b1, 15)   i in 0..255
    offset[p] = mix32(p + n * C2 + K[p & 0xff], 0x85ebba6b, 0xc3b2ae35, 13) & 0xff
    out[p]    = (in[p] + direction * offset[p]) & 0xff

Because the offsets never look at the byte values, rotating by -1 undoes
rotating by +1 exactly. This obscures text from casual inspection; it is
not encryption in any cryptographic sense (there is no key).

All mixing is done on unsigned 32-bit values. The constants and shifts are
fixed: changing any of them makes previously stored data unreadable.
"""

from tra.radix import as_bytes

MASK32 = 0xFFFFFFFF

TABLE_SEED = 0x045D8F3B     # C1
POSITION_SEED = 0x9E3769B9  # C2

TABLE_MIX = (0x27D4FB2D, 0x175667B1, 15)
POSITION_MIX = (0x85EBBA6B, 0xC3B2AE35, 13)


def mix32(x: int, m1: int, m2: int, shift: int) -> int:
    """Two-round multiply/xorshift finalizer over 32 bits.

    x ^= x >> 16;  x *= m1;  x ^= x >> shift;  x *= m2;  x ^= x >> 16
    """
    x &= MASK32
    x ^= x >> 16
    x = (x * m1) & MASK32
    x ^= x >> shift
    x = (x * m2) & MASK32
    x ^= x >> 16
    return x


def mixing_table(n: int) -> list[int]:
    """The 256-entry table K for a string of length n."""
    seed = (n * TABLE_SEED) & MASK32
    return [mix32(i ^ seed, *TABLE_MIX) for i in range(256)]


def offsets(n: int) -> list[int]:
    """Per-position byte offsets for a string of length n."""
    k = mixing_table(n)
    base = n * POSITION_SEED
    return [mix32(p + base + k[p & 0xFF], *POSITION_MIX) & 0xFF for p in range(n)]


def rotate(data: bytes, direction: int) -> bytes:
    """Shift every byte of data by its offset, forwards (+1) or back (-1).

    A zero direction returns the input unchanged.
    """
    data = as_bytes(data)
    if not direction:
        return data
    return bytes(
        (b + off * direction) & 0xFF for b, off in zip(data, offsets(len(data)))
    )
