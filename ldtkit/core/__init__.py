from ldtkit.core.precision import max_digits10, resolve_dtype
from ldtkit.core.symmetry import InvalidSymmetryError, resolve_c_plane_range

__all__ = ["max_digits10", "resolve_dtype", "InvalidSymmetryError", "resolve_c_plane_range"]
