from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import numpy as np

from ldtkit.core.precision import max_digits10
from ldtkit.models.record import LuminaireRecord


logger = logging.getLogger(__name__)


class LDTWriteError(OSError):
    pass


def _fmt_int(v) -> str:
    return str(int(v))


def _fmt_real(v, dtype: np.dtype, precision: int) -> str:
    return format(float(dtype.type(v)), f".{precision}g")


def encode_ldt(record: LuminaireRecord, precision: Optional[int] = None) -> List[str]:
    """
    Render a record as EULUMDAT lines, in file order, without terminators.

    Header counts are written as stored; array lengths are not reconciled
    with them. Inconsistencies are logged, not refused.
    """
    dt = np.dtype(record.float_dtype)
    p = max_digits10(dt) if precision is None else int(precision)
    if p < 1:
        raise ValueError(f"precision must be >= 1, got {precision}")

    for problem in record.shape_problems():
        logger.warning("Writing inconsistent LDT record: %s", problem)

    def real(v) -> str:
        return _fmt_real(v, dt, p)

    def reals(values: Iterable) -> List[str]:
        return [real(v) for v in values]

    g = record.geometry
    out: List[str] = [
        record.manufacturer,
        _fmt_int(record.type_indicator),
        _fmt_int(record.symmetry),
        _fmt_int(record.num_c_planes),
        real(record.c_plane_spacing),
        _fmt_int(record.num_g_angles),
        real(record.g_angle_spacing),
        record.report_number,
        record.luminaire_name,
        record.luminaire_number,
        record.file_name,
        record.date_user,
        _fmt_int(g.length_mm),
        _fmt_int(g.width_mm),
        _fmt_int(g.height_mm),
        _fmt_int(g.luminous_length_mm),
        _fmt_int(g.luminous_width_mm),
        _fmt_int(g.luminous_height_c0_mm),
        _fmt_int(g.luminous_height_c90_mm),
        _fmt_int(g.luminous_height_c180_mm),
        _fmt_int(g.luminous_height_c270_mm),
        real(record.dff_percent),
        real(record.lorl_percent),
        real(record.conversion_factor),
        _fmt_int(record.tilt_degrees),
        _fmt_int(record.num_lamp_sets),
    ]

    lamps = record.lamp_sets
    out.extend(_fmt_int(ls.num_lamps) for ls in lamps)
    out.extend(ls.lamp_type for ls in lamps)
    out.extend(_fmt_int(ls.total_flux) for ls in lamps)
    out.extend(_fmt_int(ls.color_temperature) for ls in lamps)
    out.extend(_fmt_int(ls.color_rendering_group) for ls in lamps)
    out.extend(real(ls.wattage) for ls in lamps)

    out.extend(reals(record.direct_ratios))
    out.extend(reals(record.c_angles_deg))
    out.extend(reals(record.g_angles_deg))
    out.extend(reals(record.intensity_distribution))
    return out


def dumps_ldt(record: LuminaireRecord, precision: Optional[int] = None) -> str:
    """Full file text; every line, the last included, ends with a newline."""
    return "".join(f"{line}\n" for line in encode_ldt(record, precision))


def write_ldt(
    path: str | Path,
    record: LuminaireRecord,
    *,
    precision: Optional[int] = None,
    encoding: str = "latin-1",
) -> Path:
    """
    Write a record to `path`, truncating any existing content.

    The text is rendered completely before the file is opened. On failure
    the destination may hold partial content and should be rewritten.
    """
    out_path = Path(path).expanduser()
    text = dumps_ldt(record, precision)
    try:
        with open(out_path, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
    except (OSError, UnicodeEncodeError) as e:
        raise LDTWriteError(f"Failed writing file: {out_path} ({e})") from e
    logger.debug("Wrote %d bytes of LDT to %s", len(text), out_path)
    return out_path
