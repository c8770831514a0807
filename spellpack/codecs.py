"""
Primitive codecs shared by the loaders and the encoder.

`str_hash` produces tooltip lookup keys, `n2s` produces key-dictionary tokens.
The token alphabet and its 111/38/3 tiering are part of the output format read
by the viewer; changing either breaks every previously written record stream.
"""

from __future__ import annotations

import re
from typing import List

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# 152 byte values: control bytes 0-2 (NUL and the multi-value separator among
# them), 8-13 and printable ASCII are excluded.
TOKEN_ALPHABET = bytes(
    [3, 4, 5, 6, 7]
    + list(range(14, 32))
    + list(range(127, 256))
).decode("latin-1")

TIER1_SIZE = 111
TIER2_SIZE = 38
TIER3_SIZE = 3

TIER1 = TOKEN_ALPHABET[:TIER1_SIZE]
TIER2 = TOKEN_ALPHABET[TIER1_SIZE:TIER1_SIZE + TIER2_SIZE]
TIER3 = TOKEN_ALPHABET[TIER1_SIZE + TIER2_SIZE:]

# Largest quotient that still fits the third tier is TIER3_SIZE - 1.
N2S_LIMIT = TIER1_SIZE * TIER2_SIZE * TIER3_SIZE

WORD_RE = re.compile(r"[a-zA-Z0-9\-]+|[^a-zA-Z0-9\-]+")


def str_hash(text: str) -> str:
    """32-bit rolling hash (`a * 31 + byte`) rendered in base 36."""
    acc = 0
    for byte in text.encode("utf-8"):
        acc = ((acc << 5) - acc + byte) & 0xFFFFFFFF
    digits: List[str] = []
    while True:
        digits.append(BASE36_DIGITS[acc % 36])
        acc //= 36
        if acc == 0:
            break
    return "".join(reversed(digits))


def n2s(n: int) -> str:
    """Encode a key-dictionary index as a 1-3 symbol token, most significant first."""
    if n < 0 or n >= N2S_LIMIT:
        raise ValueError(f"token index out of range: {n} (limit {N2S_LIMIT})")
    symbols = [TIER1[n % TIER1_SIZE]]
    if n >= TIER1_SIZE:
        n //= TIER1_SIZE
        symbols.append(TIER2[n % TIER2_SIZE])
        if n >= TIER2_SIZE:
            n //= TIER2_SIZE
            symbols.append(TIER3[n])
    return "".join(reversed(symbols))


def tokenize(text: str) -> List[str]:
    """Split into alternating runs of word characters (letters, digits, '-') and the rest."""
    return WORD_RE.findall(text)


def token_width(symbol: str) -> int:
    """Length of the token that starts with `symbol` (tiers are disjoint)."""
    if symbol in TIER1:
        return 1
    if symbol in TIER2:
        return 2
    if symbol in TIER3:
        return 3
    raise ValueError(f"not a token symbol: {symbol!r}")


def s2n(token: str) -> int:
    """Inverse of n2s."""
    width = token_width(token[0]) if token else 0
    if width != len(token):
        raise ValueError(f"malformed token: {token!r}")
    n = TIER1.index(token[-1])
    if width >= 2:
        n += TIER1_SIZE * TIER2.index(token[-2])
    if width == 3:
        n += TIER1_SIZE * TIER2_SIZE * TIER3.index(token[0])
    return n
