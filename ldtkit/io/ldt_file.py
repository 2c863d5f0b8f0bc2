from __future__ import annotations

from pathlib import Path

import numpy as np

from ldtkit.core.precision import DTypeLike
from ldtkit.parser.ldt_parser import LDTParseError, ParsedLDT, decode_ldt


def read_ldt(path: str | Path, *, dtype: DTypeLike = np.float64, encoding: str = "latin-1") -> ParsedLDT:
    """Decode an .ldt file. The file is closed on every exit path."""
    p = Path(path).expanduser()
    try:
        f = open(p, "r", encoding=encoding, newline="")
    except OSError as e:
        raise LDTParseError(f"Failed reading file: {p}") from e
    with f:
        return decode_ldt(f, dtype=dtype)
