"""Character-safe text shortening helpers.

Lengths are counted in characters (code points), never encoded bytes, so
truncation cannot split a multi-byte character.
"""

from __future__ import annotations

ELLIPSIS = "..."


def truncate_text(text: str, max_len: int) -> str:
    """Shorten ``text`` to at most ``max_len`` characters.

    Text within the limit is returned unchanged. Longer text keeps
    ``max_len - 3`` characters plus ``"..."`` when the limit leaves room for
    the marker, otherwise a plain prefix.
    """
    if max_len < 0:
        max_len = 0
    if len(text) <= max_len:
        return text
    if max_len > len(ELLIPSIS):
        return text[: max_len - len(ELLIPSIS)] + ELLIPSIS
    return text[:max_len]


def short_id(identifier: str, length: int = 8) -> str:
    return identifier[:length]
