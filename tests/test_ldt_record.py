import numpy as np
import pytest

from ldtkit.core.symmetry import InvalidSymmetryError
from ldtkit.models.record import LDTGeometry, LDTLampSet, LuminaireRecord


def _record(**kw) -> LuminaireRecord:
    base = dict(
        symmetry=2,
        num_c_planes=4,
        num_g_angles=2,
        num_lamp_sets=1,
        lamp_sets=[LDTLampSet(num_lamps=1, lamp_type="LED", total_flux=1000)],
        c_angles_deg=[0, 90, 180, 270],
        g_angles_deg=[0, 90],
        intensity_distribution=[10, 1, 20, 2, 30, 3],
    )
    base.update(kw)
    return LuminaireRecord(**base)


def test_default_record_is_zero_initialised() -> None:
    rec = LuminaireRecord()
    assert rec.manufacturer == ""
    assert rec.num_c_planes == 0
    assert rec.lamp_sets == []
    assert rec.direct_ratios.shape == (10,)
    assert not rec.direct_ratios.any()
    assert rec.c_angles_deg.size == 0
    assert rec.float_dtype == np.dtype(np.float64)
    assert rec.shape_problems() == []


def test_direct_ratios_must_hold_ten_values() -> None:
    with pytest.raises(ValueError):
        LuminaireRecord(direct_ratios=[0.5] * 9)


def test_single_width_coerces_arrays_and_scalars() -> None:
    rec = _record(float_dtype="single", c_plane_spacing=0.1)
    assert rec.float_dtype == np.dtype(np.float32)
    assert rec.intensity_distribution.dtype == np.float32
    assert rec.direct_ratios.dtype == np.float32
    assert rec.c_plane_spacing == np.float32(0.1)


def test_plane_range_is_derived_not_stored() -> None:
    rec = _record()
    assert rec.c_plane_range == (1, 3)
    assert (rec.mc1, rec.mc2) == (1, 3)
    rec.symmetry = 0
    assert (rec.mc1, rec.mc2) == (1, 4)
    with pytest.raises(AttributeError):
        rec.mc1 = 7  # type: ignore[misc]


def test_invalid_symmetry_surfaces_on_access() -> None:
    rec = _record(symmetry=9)
    with pytest.raises(InvalidSymmetryError):
        _ = rec.c_plane_range
    assert any("symmetry" in p for p in rec.shape_problems())


def test_intensity_table_and_stored_angles() -> None:
    rec = _record()
    table = rec.intensity_table()
    assert table.shape == (3, 2)
    assert table[1].tolist() == [20.0, 2.0]
    assert rec.stored_c_angles().tolist() == [0.0, 90.0, 180.0]


def test_stored_angles_for_c90_c270_symmetry() -> None:
    rec = _record(symmetry=3, intensity_distribution=[0] * 6)
    # mc=4: planes 4..6, only plane 4 has an angle in a 4-plane list
    assert rec.c_plane_range == (4, 6)
    assert rec.stored_c_angles().tolist() == [270.0]


def test_intensity_table_rejects_wrong_length() -> None:
    rec = _record(intensity_distribution=[1, 2, 3])
    with pytest.raises(ValueError):
        rec.intensity_table()


def test_shape_problems_lists_each_mismatch() -> None:
    rec = _record(num_lamp_sets=2, c_angles_deg=[0, 90], intensity_distribution=[1])
    problems = rec.shape_problems()
    assert len(problems) == 3
    assert any(p.startswith("lamp sets") for p in problems)
    assert any(p.startswith("C angles") for p in problems)
    assert any(p.startswith("intensity distribution") for p in problems)


def test_lamp_and_geometry_flags() -> None:
    assert LDTLampSet(num_lamps=-1).is_absolute_photometry
    assert not LDTLampSet(num_lamps=2).is_absolute_photometry
    assert LDTGeometry(length_mm=300).is_circular
    assert not LDTGeometry(length_mm=1200, width_mm=60).is_circular


def test_default_arrays_are_numpy() -> None:
    rec = LuminaireRecord(float_dtype="single")
    for name in ("direct_ratios", "c_angles_deg", "g_angles_deg", "intensity_distribution"):
        value = getattr(rec, name)
        assert isinstance(value, np.ndarray)
        assert value.dtype == np.float32
