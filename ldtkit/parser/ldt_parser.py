"""
EULUMDAT (.ldt) decoder.

EULUMDAT is the European standard photometric file format. The layout is
fixed and line oriented, one value per line:

- Line 1: Company identification
- Line 2: Type indicator
- Line 3: Symmetry indicator (0-4)
- Line 4: Number of C-planes (Mc)
- Line 5: Distance between C-planes (Dc)
- Line 6: Number of luminous intensities per C-plane (Ng)
- Line 7: Distance between luminous intensities (Dg)
- Lines 8-12: Report number, luminaire name, luminaire number, file name, date/user
- Lines 13-21: Luminaire and luminous area dimensions (mm)
- Line 22: Downward flux fraction (DFF) %
- Line 23: Light output ratio luminaire (LORL) %
- Line 24: Conversion factor for luminous intensities
- Line 25: Tilt of luminaire during measurement
- Line 26: Number of standard sets of lamps (n)
- Lines 26a-26f: Lamp data, one block of n lines per attribute
  (all lamp counts, then all lamp types, then all fluxes, ...)
- Line 27: Direct ratios DR (10 values)
- Line 28: C-plane angles (Mc values)
- Line 29: G angles (Ng values)
- Line 30: Luminous intensities ((Mc2 - Mc1 + 1) * Ng values)

A missing line is fatal and reported with the name of the field that could
not be read. A line that is present but does not hold a number leaves the
field at zero and sets a single generic warning on the result.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import numpy as np

from ldtkit.core.precision import DTypeLike, resolve_dtype
from ldtkit.core.symmetry import InvalidSymmetryError, resolve_c_plane_range
from ldtkit.models.record import NUM_DIRECT_RATIOS, LDTLampSet, LuminaireRecord


logger = logging.getLogger(__name__)

VALUE_WARNING = "Some values could not be read"


@dataclass
class LDTParseError(Exception):
    message: str
    field: Optional[str] = None
    step: Optional[str] = None
    line_no: Optional[int] = None

    def __str__(self) -> str:
        if self.line_no is None:
            return self.message
        return f"Line {self.line_no}: {self.message}"


@dataclass
class ParsedLDT:
    """Decoded EULUMDAT content plus the value-level warning, if any."""
    record: LuminaireRecord
    warning: Optional[str]
    lines_read: int


_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1
_FLOAT_RE = re.compile(
    r"^\s*([+-]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def _parse_int(s: str) -> Optional[int]:
    """Leading base-10 integer of `s`, within 32-bit signed range; trailing characters are ignored."""
    m = _INT_RE.match(s)
    if m is None:
        return None
    v = int(m.group(1))
    if v < _INT_MIN or v > _INT_MAX:
        return None
    return v


def _parse_float(s: str, dtype: np.dtype) -> Optional[float]:
    """Leading decimal number of `s` at the given width. Comma decimals are accepted."""
    m = _FLOAT_RE.match(s.replace(",", "."))
    if m is None:
        return None
    tok = m.group(1)
    with np.errstate(over="ignore"):
        value = dtype.type(float(tok))
    if not np.isfinite(value) and tok.lstrip("+-")[:1] not in ("i", "I", "n", "N"):
        # finite literal out of range for this width
        return None
    return value


class _LineReader:
    def __init__(self, lines: Iterable[str], dtype: np.dtype) -> None:
        self._it: Iterator[str] = iter(lines)
        self.dtype = dtype
        self.line_no = 0
        self.warning: Optional[str] = None

    def text(self, field: str, step: str) -> str:
        line = next(self._it, None)
        if line is None:
            raise LDTParseError(f"Error reading <{field}> property", field=field, step=step, line_no=self.line_no + 1)
        self.line_no += 1
        return line.rstrip("\r\n")

    def _value_failed(self, field: str, raw: str) -> None:
        logger.debug("Line %d: could not read %s from %r", self.line_no, field, raw)
        if self.warning is None:
            self.warning = VALUE_WARNING

    def integer(self, field: str, step: str) -> int:
        raw = self.text(field, step)
        v = _parse_int(raw)
        if v is None:
            self._value_failed(field, raw)
            return 0
        return v

    def real(self, field: str, step: str):
        raw = self.text(field, step)
        v = _parse_float(raw, self.dtype)
        if v is None:
            self._value_failed(field, raw)
            return self.dtype.type(0)
        return v

    def reals(self, count: int, field: str, step: str) -> np.ndarray:
        # grow with the lines actually read; the count comes from the file
        values = [self.real(field, step) for _ in range(max(0, count))]
        return np.array(values, dtype=self.dtype)


def decode_ldt(lines: Iterable[str], *, dtype: DTypeLike = np.float64) -> ParsedLDT:
    """
    Decode EULUMDAT content from a line source.

    Args:
        lines: successive text lines (an open text file, a list of strings, ...).
            Trailing line terminators are ignored.
        dtype: floating-point width used for every fractional field.

    Returns:
        ParsedLDT with the populated record and the warning text (None if
        every numeric value could be read).

    Raises:
        LDTParseError: if a required line is missing or the symmetry
            indicator is not 0-4.
    """
    if isinstance(lines, str):
        raise TypeError("decode_ldt expects a sequence of lines; use parse_ldt_text for raw text")

    dt = resolve_dtype(dtype)
    r = _LineReader(lines, dt)
    rec = LuminaireRecord(float_dtype=dt)

    rec.manufacturer = r.text("Manufacturer", "1")
    rec.type_indicator = r.integer("Type", "2")
    rec.symmetry = r.integer("Symmetry", "3")
    rec.num_c_planes = r.integer("Mc", "4")
    try:
        mc1, mc2 = resolve_c_plane_range(rec.symmetry, rec.num_c_planes)
    except InvalidSymmetryError as e:
        raise LDTParseError("Error reading light symmetry", field="Symmetry", step="3", line_no=3) from e
    rec.c_plane_spacing = r.real("Dc", "5")
    rec.num_g_angles = r.integer("Ng", "6")
    rec.g_angle_spacing = r.real("Dg", "7")

    rec.report_number = r.text("Measurement report number", "8")
    rec.luminaire_name = r.text("Luminaire name", "9")
    rec.luminaire_number = r.text("Luminaire number", "10")
    rec.file_name = r.text("File name", "11")
    rec.date_user = r.text("Date/user", "12")

    g = rec.geometry
    g.length_mm = r.integer("Length/diameter of luminaire", "13")
    g.width_mm = r.integer("Width of luminaire", "14")
    g.height_mm = r.integer("Height of luminaire", "15")
    g.luminous_length_mm = r.integer("Length/diameter of luminous area", "16")
    g.luminous_width_mm = r.integer("Width of luminous area", "17")
    g.luminous_height_c0_mm = r.integer("Height of luminous area C0-plane", "18")
    g.luminous_height_c90_mm = r.integer("Height of luminous area C90-plane", "19")
    g.luminous_height_c180_mm = r.integer("Height of luminous area C180-plane", "20")
    g.luminous_height_c270_mm = r.integer("Height of luminous area C270-plane", "21")

    rec.dff_percent = r.real("Downward flux fraction", "22")
    rec.lorl_percent = r.real("Light output ratio luminaire", "23")
    rec.conversion_factor = r.real("Conversion factor for luminous intensities", "24")
    rec.tilt_degrees = r.integer("Tilt of luminaire during measurement", "25")
    rec.num_lamp_sets = r.integer("Number of standard sets of lamps", "26")

    # one pass per attribute over all lamp sets
    lamps = []
    for _ in range(max(0, rec.num_lamp_sets)):
        lamps.append(LDTLampSet(num_lamps=r.integer("Number of lamps", "26a")))
    for ls in lamps:
        ls.lamp_type = r.text("Type of lamps", "26b")
    for ls in lamps:
        ls.total_flux = r.integer("Total luminous flux", "26c")
    for ls in lamps:
        ls.color_temperature = r.integer("Color appearance", "26d")
    for ls in lamps:
        ls.color_rendering_group = r.integer("Color rendering group", "26e")
    for ls in lamps:
        ls.wattage = r.real("Wattage including ballast", "26f")
    rec.lamp_sets = lamps

    rec.direct_ratios = r.reals(NUM_DIRECT_RATIOS, "Direct ratios for room indices k = 0.6 ... 5", "27")
    rec.c_angles_deg = r.reals(rec.num_c_planes, "Angles C", "28")
    rec.g_angles_deg = r.reals(rec.num_g_angles, "Angles G", "29")

    num_values = max(0, mc2 - mc1 + 1) * max(0, rec.num_g_angles)
    rec.intensity_distribution = r.reals(num_values, "Luminous intensity distribution", "30")

    logger.debug(
        "Decoded LDT: symmetry=%d mc=%d ng=%d planes %d..%d, %d intensities, %d lines",
        rec.symmetry, rec.num_c_planes, rec.num_g_angles, mc1, mc2, num_values, r.line_no,
    )
    return ParsedLDT(record=rec, warning=r.warning, lines_read=r.line_no)


def parse_ldt_text(text: str, *, dtype: DTypeLike = np.float64) -> ParsedLDT:
    """
    Parse EULUMDAT (.ldt) text content.

    Args:
        text: Raw text content of .ldt file
        dtype: floating-point width (np.float32 / np.float64, "single" / "double")

    Returns:
        ParsedLDT with the record and the value-level warning, if any

    Raises:
        LDTParseError: If file structure is incomplete or the symmetry is invalid
    """
    # only \n, \r and \r\n end a line; \x85 and friends stay inside text fields
    return decode_ldt(io.StringIO(text, newline=""), dtype=dtype)
