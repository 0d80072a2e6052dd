"""Canonical JSON and content checksums for frozen records."""

import hashlib
import json
from typing import Any


def _strip_absent(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            str(key): _strip_absent(item)
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [_strip_absent(item) for item in value]
    return value


def canonical_json(data: Any) -> str:
    """
    Serialize so the same logical object always yields the same text.

    Keys are sorted, separators are compact, and None-valued object members
    are omitted so an absent field and an explicit null hash the same.
    """
    return json.dumps(
        _strip_absent(data),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def calc_checksum(data: Any) -> str:
    """Hex sha256 of the canonical JSON form of ``data``."""
    return hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()
