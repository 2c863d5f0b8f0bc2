from __future__ import annotations

import math
from typing import Union

import numpy as np


DTypeLike = Union[str, type, np.dtype]

_WIDTH_ALIASES = {
    "single": np.float32,
    "float32": np.float32,
    "double": np.float64,
    "float64": np.float64,
}


def resolve_dtype(width: DTypeLike = np.float64) -> np.dtype:
    """
    Map a floating-point width to a numpy dtype.

    Accepts numpy float types/dtypes or one of "single", "double",
    "float32", "float64". Only 32- and 64-bit widths are supported.
    """
    if isinstance(width, str):
        key = width.strip().lower()
        if key not in _WIDTH_ALIASES:
            raise ValueError(f"Unsupported float width: {width!r} (expected single or double)")
        return np.dtype(_WIDTH_ALIASES[key])
    dt = np.dtype(width)
    if dt not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"Unsupported float width: {dt} (expected float32 or float64)")
    return dt


def max_digits10(width: DTypeLike = np.float64) -> int:
    """Significant decimal digits needed to round-trip every value of `width` (9 / 17)."""
    dt = resolve_dtype(width)
    mantissa_bits = np.finfo(dt).nmant + 1
    return int(math.ceil(mantissa_bits * math.log10(2.0))) + 1


def width_name(width: DTypeLike) -> str:
    return "single" if resolve_dtype(width) == np.dtype(np.float32) else "double"
