"""Stable string hashing for reproducible layout jitter.

Python's built-in ``hash()`` is salted per process, so it cannot key
jitter that must look the same across runs (and across the JavaScript
client that renders the same garden). This module pins the function down:

    h = sum(c_i * 31 ** (n - 1 - i)) mod 2**32

over the UTF-16 code units ``c_0 .. c_{n-1}`` of the key, which is what
``String.charCodeAt`` yields in a browser.
"""

from __future__ import annotations

HASH_MODULUS = 2**32
HASH_MAX = HASH_MODULUS - 1
_MULTIPLIER = 31


def utf16_code_units(text: str) -> list[int]:
    """Return the UTF-16 code units of *text* (surrogate pairs split)."""
    raw = text.encode("utf-16-be")
    return [(raw[i] << 8) | raw[i + 1] for i in range(0, len(raw), 2)]


def polynomial_hash(text: str) -> int:
    """Polynomial base-31 hash of *text*, reduced modulo 2**32.

    Examples:
        >>> polynomial_hash("")
        0
        >>> polynomial_hash("a")
        97
        >>> polynomial_hash("ab")
        3105
    """
    h = 0
    for unit in utf16_code_units(text):
        h = (h * _MULTIPLIER + unit) % HASH_MODULUS
    return h


def jitter_key(contact_id: str, salt: str) -> str:
    """Compose the hash key for one jitter channel of a contact."""
    return f"{contact_id}:{salt}"


def unit_interval(contact_id: str, salt: str) -> float:
    """Deterministic value in ``[0, 1]`` for ``(contact_id, salt)``."""
    return polynomial_hash(jitter_key(contact_id, salt)) / HASH_MAX


def signed_jitter(contact_id: str, salt: str, bound: float) -> float:
    """Deterministic offset in ``[-bound, bound]`` for ``(contact_id, salt)``."""
    return (2.0 * unit_interval(contact_id, salt) - 1.0) * bound
