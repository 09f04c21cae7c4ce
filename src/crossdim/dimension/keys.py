"""Key normalization for series and data point lookups.

Extractors may return any value. Keys are normalized to a tagged string so
that values of different types never share a bucket, even when their ``str()``
forms are equal (``1``, ``1.0``, ``True`` and ``"1"`` are four different keys).
NumPy scalars are unwrapped first, so ``np.int64(1)`` and ``1`` share a key.

Selection matching does not use these keys; see ``filters``.
"""

from __future__ import annotations

from typing import Any

import numpy as np


def normalize_key(value: Any) -> str:
    """Return the canonical lookup key for an extractor result.

    Format is ``"<type>:<repr>"``, e.g. ``"str:'A'"`` or ``"int:1"``.
    """
    if isinstance(value, np.generic):
        value = value.item()
    return f"{type(value).__qualname__}:{value!r}"


def display_name(value: Any) -> str:
    """Human-readable name for a series or data point key."""
    if isinstance(value, np.generic):
        value = value.item()
    return str(value)
