"""Canonical comma-separated encoding for stored option id lists."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


def encode_ids(ids: Iterable[int] | None) -> Optional[str]:
    """Encode ids as "1,2,3" preserving order; None stays None."""
    if ids is None:
        return None
    return ",".join(str(int(i)) for i in ids)


def decode_ids(value: str | None) -> Optional[Tuple[int, ...]]:
    """Decode a stored id list; None stays None and "" is an empty tuple."""
    if value is None:
        return None
    return tuple(int(tok) for tok in value.split(",") if tok.strip())


__all__ = ["encode_ids", "decode_ids"]
