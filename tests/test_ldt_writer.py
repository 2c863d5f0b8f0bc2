from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from ldtkit.export.ldt_writer import LDTWriteError, dumps_ldt, encode_ldt, write_ldt
from ldtkit.models.record import LDTLampSet, LuminaireRecord
from ldtkit.parser.ldt_parser import parse_ldt_text


FIXTURE = Path(__file__).parent / "fixtures" / "photometry" / "synthetic_basic.ldt"


def _fixture_record():
    return parse_ldt_text(FIXTURE.read_text(encoding="latin-1")).record


def test_encode_follows_file_order() -> None:
    lines = encode_ldt(_fixture_record())
    assert len(lines) == 64
    assert lines[0] == "Lüx Leuchten GmbH / EULUMDAT 1.0"
    assert lines[1:7] == ["1", "2", "4", "90", "3", "45"]
    assert lines[7:12] == ["R-2024-017", "Corridor line 1200", "CL-1200-840", "cl1200.ldt", "2024-03-11 / lab"]
    assert lines[12:21] == ["1200", "60", "45", "1180", "40", "0", "0", "0", "0"]
    assert lines[21] == "92.5"
    assert lines[25] == "2"
    # one block per lamp attribute
    assert lines[26:28] == ["1", "-1"]
    assert lines[28:30] == ["LED 840", "LED 830"]
    assert lines[30:32] == ["4200", "3900"]
    assert lines[32:34] == ["4000", "3000"]
    assert lines[34:36] == ["1", "1"]
    assert lines[36:38] == ["34.5", "33"]
    assert lines[48:52] == ["0", "90", "180", "270"]
    assert lines[52:55] == ["0", "45", "90"]
    assert lines[55:] == ["310.5", "250", "12", "305", "240.25", "10", "300", "230", "8.5"]


def test_dumps_terminates_every_line() -> None:
    text = dumps_ldt(_fixture_record())
    assert text.endswith("8.5\n")
    assert text.count("\n") == 64
    assert "\r" not in text


def test_default_precision_depends_on_width() -> None:
    assert encode_ldt(LuminaireRecord(c_plane_spacing=0.1))[4] == "0.10000000000000001"
    assert encode_ldt(LuminaireRecord(c_plane_spacing=0.1, float_dtype="single"))[4] == "0.100000001"


def test_explicit_precision() -> None:
    rec = LuminaireRecord(c_plane_spacing=0.1, g_angle_spacing=123456.0, dff_percent=1e20)
    lines = encode_ldt(rec, precision=3)
    assert lines[4] == "0.1"
    assert lines[6] == "1.23e+05"
    assert encode_ldt(rec)[21] == "1e+20"


@pytest.mark.parametrize("precision", [0, -2])
def test_precision_must_be_positive(precision: int) -> None:
    with pytest.raises(ValueError):
        encode_ldt(LuminaireRecord(), precision=precision)


def test_inconsistent_record_is_written_with_warnings(caplog: pytest.LogCaptureFixture) -> None:
    rec = LuminaireRecord(
        symmetry=0,
        num_c_planes=2,
        num_g_angles=2,
        c_angles_deg=[0, 180],
        g_angles_deg=[0, 90],
        intensity_distribution=[1, 2, 3],
    )
    with caplog.at_level(logging.WARNING, logger="ldtkit.export.ldt_writer"):
        lines = encode_ldt(rec)
    assert lines[-3:] == ["1", "2", "3"]
    assert len(lines) == 26 + 10 + 2 + 2 + 3
    assert any("intensity distribution" in r.getMessage() for r in caplog.records)


def test_consistent_record_logs_nothing(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="ldtkit.export.ldt_writer"):
        encode_ldt(_fixture_record())
    assert caplog.records == []


def test_header_counts_are_written_as_stored() -> None:
    rec = LuminaireRecord(num_lamp_sets=3, lamp_sets=[LDTLampSet(num_lamps=2, lamp_type="T5")])
    lines = encode_ldt(rec)
    assert lines[25] == "3"
    assert lines[26:32] == ["2", "T5", "0", "0", "0", "0"]


def test_write_ldt_truncates(tmp_path: Path) -> None:
    out = tmp_path / "out.ldt"
    out.write_text("x" * 10000, encoding="latin-1")
    path = write_ldt(out, _fixture_record())
    assert path == out
    data = out.read_bytes()
    assert data.startswith(b"L\xfcx Leuchten")
    assert data.count(b"\n") == 64
    assert b"x" * 100 not in data


def test_write_ldt_to_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(LDTWriteError) as exc:
        write_ldt(tmp_path, LuminaireRecord())
    assert isinstance(exc.value, OSError)
    assert str(tmp_path) in str(exc.value)


def test_write_ldt_unencodable_text_fails(tmp_path: Path) -> None:
    rec = LuminaireRecord(manufacturer="Lüx")
    with pytest.raises(LDTWriteError):
        write_ldt(tmp_path / "a.ldt", rec, encoding="ascii")


def test_encode_float32_arrays() -> None:
    rec = LuminaireRecord(
        float_dtype=np.float32,
        num_c_planes=1,
        num_g_angles=1,
        c_angles_deg=[0.0],
        g_angles_deg=[0.1],
        intensity_distribution=[1.0 / 3.0],
    )
    lines = encode_ldt(rec)
    assert lines[-2] == "0.100000001"
    assert lines[-1] == "0.333333343"
