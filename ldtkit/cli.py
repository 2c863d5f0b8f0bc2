from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from ldtkit.core.precision import width_name
from ldtkit.core.symmetry import SYMMETRY_LABELS
from ldtkit.export.ldt_writer import LDTWriteError, write_ldt
from ldtkit.io.ldt_file import read_ldt
from ldtkit.parser.ldt_parser import LDTParseError, ParsedLDT


_DEMO_LDT_LINES = [
    "ldtkit demo",
    "1",
    "1",
    "1",
    "0",
    "3",
    "45",
    "DEMO-REPORT",
    "Demo downlight",
    "DL-001",
    "demo.ldt",
    "ldtkit",
    "100",
    "0",
    "50",
    "80",
    "0",
    "0",
    "0",
    "0",
    "0",
    "100",
    "85",
    "1",
    "0",
    "1",
    "1",
    "LED",
    "1000",
    "3000",
    "1",
    "12.5",
    "0.5",
    "0.55",
    "0.6",
    "0.65",
    "0.7",
    "0.75",
    "0.8",
    "0.85",
    "0.9",
    "0.95",
    "0",
    "0",
    "45",
    "90",
    "300",
    "200",
    "0",
]


def _load(path_arg: str, args: argparse.Namespace) -> tuple[Optional[ParsedLDT], int]:
    path = Path(path_arg).expanduser().resolve()
    if not path.exists():
        print(f"[ERROR] File not found: {path}")
        print("        Provide a valid path to a .ldt file.")
        return None, 2
    if not path.is_file():
        print(f"[ERROR] Not a file: {path}")
        return None, 2
    try:
        res = read_ldt(path, dtype=args.width, encoding=args.encoding)
    except LDTParseError as e:
        print(f"[ERROR] {e}")
        return None, 3
    if res.warning:
        print(f"[WARN] {res.warning}")
    return res, 0


def _cmd_demo(args: argparse.Namespace) -> int:
    outpath = Path(args.out).expanduser().resolve()
    outpath.parent.mkdir(parents=True, exist_ok=True)
    outpath.write_text("\n".join(_DEMO_LDT_LINES) + "\n", encoding="latin-1")
    print(f"Saved demo LDT to: {outpath}")
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    res, code = _load(args.file, args)
    if res is None:
        return code
    rec = res.record
    g = rec.geometry
    mc1, mc2 = rec.c_plane_range

    print("EULUMDAT")
    print(f"  File: {args.file}")
    print(f"  Manufacturer: {rec.manufacturer}")
    print(f"  Luminaire: {rec.luminaire_name} ({rec.luminaire_number})")
    print(f"  Report: {rec.report_number}  Date/user: {rec.date_user}")
    print(f"  Type indicator: {rec.type_indicator}")
    print(f"  Symmetry: {rec.symmetry} ({SYMMETRY_LABELS[rec.symmetry]})")
    print(f"  C-planes: {rec.num_c_planes} every {float(rec.c_plane_spacing):g}°, stored {mc1}..{mc2}")
    print(f"  G angles: {rec.num_g_angles} every {float(rec.g_angle_spacing):g}°")
    print(f"  Luminaire: {g.length_mm} x {g.width_mm} x {g.height_mm} mm")
    print(f"  Luminous area: {g.luminous_length_mm} x {g.luminous_width_mm} mm")
    print(f"  DFF: {float(rec.dff_percent):g} %  LORL: {float(rec.lorl_percent):g} %")
    print(f"  Conversion factor: {float(rec.conversion_factor):g}  Tilt: {rec.tilt_degrees}°")
    for i, ls in enumerate(rec.lamp_sets, start=1):
        absolute = " (absolute photometry)" if ls.is_absolute_photometry else ""
        print(
            f"  Lamp set {i}: {ls.num_lamps} x {ls.lamp_type}, {ls.total_flux} lm, "
            f"{ls.color_temperature}, CRG {ls.color_rendering_group}, {float(ls.wattage):g} W{absolute}"
        )
    print(f"  Intensity table: {rec.num_stored_planes} x {rec.num_g_angles} ({width_name(rec.float_dtype)} precision)")
    if rec.intensity_distribution.size:
        print(f"  Peak intensity: {float(rec.intensity_distribution.max()):g} cd/1000 lm")
    return 0


def _cmd_rewrite(args: argparse.Namespace) -> int:
    res, code = _load(args.file, args)
    if res is None:
        return code
    outpath = Path(args.out).expanduser().resolve()
    try:
        write_ldt(outpath, res.record, precision=args.precision, encoding=args.encoding)
    except LDTWriteError as e:
        print(f"[ERROR] {e}")
        return 4
    print(f"Saved LDT to: {outpath}")
    return 0


def _cmd_view(args: argparse.Namespace) -> int:
    res, code = _load(args.file, args)
    if res is None:
        return code
    # Import here so the other commands work without matplotlib
    from ldtkit.plotting.plots import save_default_plots

    outdir = Path(args.out).expanduser().resolve()
    try:
        paths = save_default_plots(res.record, outdir, stem=args.stem)
    except ValueError as e:
        print(f"[ERROR] Cannot plot: {e}")
        return 3
    print(f"  Saved: {paths.intensity_png}")
    print(f"  Saved: {paths.polar_png}")
    return 0


def main(argv: list[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--width", choices=["single", "double"], default="double", help="Floating-point width")
    common.add_argument("--encoding", default="latin-1", help="Text encoding of .ldt files (default: latin-1)")

    p = argparse.ArgumentParser(prog="ldtkit")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Write a small demo .ldt file to disk.")
    demo.add_argument("--out", default="demo.ldt", help="Output .ldt path")
    demo.set_defaults(func=_cmd_demo)

    info = sub.add_parser("info", parents=[common], help="Print the header and table shape of an LDT file.")
    info.add_argument("file", help="Path to .ldt file")
    info.set_defaults(func=_cmd_info)

    rw = sub.add_parser("rewrite", parents=[common], help="Decode an LDT file and write it back out.")
    rw.add_argument("file", help="Path to .ldt file")
    rw.add_argument("out", help="Output .ldt path")
    rw.add_argument("--precision", type=int, default=None, help="Significant digits for fractional values")
    rw.set_defaults(func=_cmd_rewrite)

    v = sub.add_parser("view", parents=[common], help="Save intensity and polar plots (PNG) of an LDT file.")
    v.add_argument("file", help="Path to .ldt file")
    v.add_argument("--out", default="out", help="Output directory (default: out)")
    v.add_argument("--stem", default="ldt_view", help="Filename stem for outputs")
    v.set_defaults(func=_cmd_view)

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
