"""
Symmetry class handling for EULUMDAT files.

Only a subset of the C-planes carries intensity data in the file; the rest
follow from the luminaire's symmetry. The stored subset is the 1-based,
inclusive plane index range (mc1, mc2):

- 0: no symmetry                        mc1 = 1,              mc2 = mc
- 1: symmetry about the vertical axis   mc1 = 1,              mc2 = 1
- 2: symmetry to plane C0-C180          mc1 = 1,              mc2 = mc/2 + 1
- 3: symmetry to plane C90-C270         mc1 = 3*mc/4 + 1,     mc2 = mc1 + mc/2
- 4: symmetry to C0-C180 and C90-C270   mc1 = 1,              mc2 = mc/4 + 1
"""

from __future__ import annotations

from typing import Dict, Tuple


SYMMETRY_LABELS: Dict[int, str] = {
    0: "no symmetry",
    1: "symmetry about the vertical axis",
    2: "symmetry to plane C0-C180",
    3: "symmetry to plane C90-C270",
    4: "symmetry to planes C0-C180 and C90-C270",
}


class InvalidSymmetryError(ValueError):
    pass


def _tdiv(a: int, b: int) -> int:
    # truncating division; Python's // floors
    q = abs(a) // b
    return q if a >= 0 else -q


def resolve_c_plane_range(symmetry: int, mc: int) -> Tuple[int, int]:
    """
    Return (mc1, mc2) for a symmetry indicator and C-plane count.

    `mc` is not checked for plausibility; a zero count yields an empty or
    negative range which callers clamp when sizing the intensity table.
    """
    s = int(symmetry)
    m = int(mc)
    if s == 0:
        return 1, m
    if s == 1:
        return 1, 1
    if s == 2:
        return 1, _tdiv(m, 2) + 1
    if s == 3:
        mc1 = _tdiv(3 * m, 4) + 1
        return mc1, mc1 + _tdiv(m, 2)
    if s == 4:
        return 1, _tdiv(m, 4) + 1
    raise InvalidSymmetryError(f"Invalid symmetry: {symmetry} (expected 0-4)")


def stored_plane_count(symmetry: int, mc: int) -> int:
    mc1, mc2 = resolve_c_plane_range(symmetry, mc)
    return max(0, mc2 - mc1 + 1)
