from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ldtkit.core.precision import resolve_dtype
from ldtkit.core.symmetry import InvalidSymmetryError, resolve_c_plane_range


NUM_DIRECT_RATIOS = 10


@dataclass
class LDTLampSet:
    """Data for a single standard set of lamps."""
    num_lamps: int = 0  # negative: absolute photometry
    lamp_type: str = ""
    total_flux: int = 0  # lumens
    color_temperature: int = 0
    color_rendering_group: int = 0
    wattage: float = 0.0  # including ballast

    @property
    def is_absolute_photometry(self) -> bool:
        return self.num_lamps < 0


@dataclass
class LDTGeometry:
    """Luminaire and luminous area dimensions, all in mm."""
    length_mm: int = 0
    width_mm: int = 0  # 0 for circular
    height_mm: int = 0
    luminous_length_mm: int = 0
    luminous_width_mm: int = 0  # 0 for circular
    luminous_height_c0_mm: int = 0
    luminous_height_c90_mm: int = 0
    luminous_height_c180_mm: int = 0
    luminous_height_c270_mm: int = 0

    @property
    def is_circular(self) -> bool:
        return self.width_mm == 0


@dataclass(eq=False)
class LuminaireRecord:
    """
    In-memory content of one EULUMDAT file.

    Fractional values use `float_dtype` (float32 or float64) throughout.
    The stored C-plane range (mc1, mc2) is always derived from `symmetry`
    and `num_c_planes`; it is never held as independent state.
    """
    manufacturer: str = ""
    type_indicator: int = 0
    symmetry: int = 0
    num_c_planes: int = 0  # mc
    c_plane_spacing: float = 0.0  # dc, degrees
    num_g_angles: int = 0  # ng
    g_angle_spacing: float = 0.0  # dg, degrees

    report_number: str = ""
    luminaire_name: str = ""
    luminaire_number: str = ""
    file_name: str = ""
    date_user: str = ""

    geometry: LDTGeometry = field(default_factory=LDTGeometry)

    dff_percent: float = 0.0
    lorl_percent: float = 0.0
    conversion_factor: float = 0.0
    tilt_degrees: int = 0
    num_lamp_sets: int = 0  # n
    lamp_sets: List[LDTLampSet] = field(default_factory=list)

    direct_ratios: np.ndarray = field(default_factory=lambda: np.zeros(NUM_DIRECT_RATIOS))
    c_angles_deg: np.ndarray = field(default_factory=lambda: np.zeros(0))
    g_angles_deg: np.ndarray = field(default_factory=lambda: np.zeros(0))
    intensity_distribution: np.ndarray = field(default_factory=lambda: np.zeros(0))  # cd/1000 lm, row-major [plane][gamma]

    float_dtype: np.dtype = np.dtype(np.float64)

    def __post_init__(self) -> None:
        dt = resolve_dtype(self.float_dtype)
        self.float_dtype = dt
        self.c_plane_spacing = dt.type(self.c_plane_spacing)
        self.g_angle_spacing = dt.type(self.g_angle_spacing)
        self.dff_percent = dt.type(self.dff_percent)
        self.lorl_percent = dt.type(self.lorl_percent)
        self.conversion_factor = dt.type(self.conversion_factor)
        for ls in self.lamp_sets:
            ls.wattage = dt.type(ls.wattage)
        self.direct_ratios = np.asarray(self.direct_ratios, dtype=dt).reshape(-1)
        self.c_angles_deg = np.asarray(self.c_angles_deg, dtype=dt).reshape(-1)
        self.g_angles_deg = np.asarray(self.g_angles_deg, dtype=dt).reshape(-1)
        self.intensity_distribution = np.asarray(self.intensity_distribution, dtype=dt).reshape(-1)
        if self.direct_ratios.size != NUM_DIRECT_RATIOS:
            raise ValueError(
                f"direct_ratios must hold exactly {NUM_DIRECT_RATIOS} values, got {self.direct_ratios.size}"
            )

    @property
    def c_plane_range(self) -> Tuple[int, int]:
        return resolve_c_plane_range(self.symmetry, self.num_c_planes)

    @property
    def mc1(self) -> int:
        return self.c_plane_range[0]

    @property
    def mc2(self) -> int:
        return self.c_plane_range[1]

    @property
    def num_stored_planes(self) -> int:
        mc1, mc2 = self.c_plane_range
        return max(0, mc2 - mc1 + 1)

    @property
    def expected_intensity_count(self) -> int:
        return self.num_stored_planes * max(0, int(self.num_g_angles))

    def stored_c_angles(self) -> np.ndarray:
        """C angles of the planes physically present in the intensity table."""
        mc1, mc2 = self.c_plane_range
        lo = max(mc1 - 1, 0)
        return self.c_angles_deg[lo:max(mc2, lo)]

    def intensity_table(self) -> np.ndarray:
        """Intensities reshaped to [stored plane][gamma]. No resampling."""
        rows = self.num_stored_planes
        cols = max(0, int(self.num_g_angles))
        values = np.asarray(self.intensity_distribution, dtype=self.float_dtype)
        if values.size != rows * cols:
            raise ValueError(
                f"Intensity table has {values.size} values, "
                f"expected {rows} x {cols}"
            )
        return values.reshape(rows, cols)

    def shape_problems(self) -> List[str]:
        problems: List[str] = []
        try:
            expected = self.expected_intensity_count
        except InvalidSymmetryError as e:
            problems.append(str(e))
            expected = None
        if len(self.direct_ratios) != NUM_DIRECT_RATIOS:
            problems.append(f"direct ratios: {len(self.direct_ratios)} values, expected {NUM_DIRECT_RATIOS}")
        if len(self.lamp_sets) != self.num_lamp_sets:
            problems.append(f"lamp sets: {len(self.lamp_sets)} entries, header says {self.num_lamp_sets}")
        if len(self.c_angles_deg) != self.num_c_planes:
            problems.append(f"C angles: {len(self.c_angles_deg)} values, header says {self.num_c_planes}")
        if len(self.g_angles_deg) != self.num_g_angles:
            problems.append(f"G angles: {len(self.g_angles_deg)} values, header says {self.num_g_angles}")
        if expected is not None and len(self.intensity_distribution) != expected:
            problems.append(
                f"intensity distribution: {len(self.intensity_distribution)} values, expected {expected}"
            )
        return problems
