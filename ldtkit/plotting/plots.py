from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import matplotlib
matplotlib.use("Agg")  # headless-safe for servers/CI
import matplotlib.pyplot as plt  # noqa: E402

from ldtkit.models.record import LuminaireRecord


@dataclass(frozen=True)
class PlotPaths:
    intensity_png: Path
    polar_png: Path


def _ensure_outdir(outdir: Path) -> None:
    outdir.mkdir(parents=True, exist_ok=True)


def _choose_plane_indices(num_planes: int, max_planes: int = 4) -> List[int]:
    """
    Pick up to max_planes stored planes spaced across the table.
    Deterministic: first, last, and evenly spaced in-between.
    """
    if num_planes <= max_planes:
        return list(range(num_planes))
    idxs = [0]
    for k in range(1, max_planes - 1):
        idxs.append(round(k * (num_planes - 1) / (max_planes - 1)))
    idxs.append(num_planes - 1)
    return sorted(set(int(i) for i in idxs))


def _plane_labels(record: LuminaireRecord, count: int) -> List[str]:
    angles = record.stored_c_angles()
    mc1 = record.mc1
    labels = []
    for i in range(count):
        if i < angles.size:
            labels.append(f"C={float(angles[i]):g}°")
        else:
            labels.append(f"plane {mc1 + i}")
    return labels


def _table(record: LuminaireRecord):
    if record.g_angles_deg.size == 0:
        raise ValueError("Need G angles to plot intensity curves")
    if record.g_angles_deg.size != record.num_g_angles:
        raise ValueError("G angle count does not match the header")
    return record.intensity_table()


def plot_intensity_curves(
    record: LuminaireRecord, outpath: Path, plane_indices: Optional[Iterable[int]] = None
) -> Path:
    """
    Save a line plot: intensity (cd/1000 lm) vs G angle, for selected stored planes.
    """
    table = _table(record)
    g = [float(x) for x in record.g_angles_deg]
    rows = table.shape[0]
    labels = _plane_labels(record, rows)

    if plane_indices is None:
        plane_indices = _choose_plane_indices(rows, max_planes=4)

    fig = plt.figure()
    ax = fig.add_subplot(111)
    for ci in plane_indices:
        if ci < 0 or ci >= rows:
            continue
        ax.plot(g, table[ci], label=labels[ci])

    ax.set_xlabel("G angle (deg)")
    ax.set_ylabel("Intensity (cd/1000 lm)")
    ax.set_title(record.luminaire_name or "Intensity curves")
    ax.legend(loc="best")
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
    return outpath


def plot_polar(
    record: LuminaireRecord, outpath: Path, plane_indices: Optional[Sequence[int]] = None
) -> Path:
    """
    Save a polar plot with theta = G angle, 0° pointing down.
    """
    table = _table(record)
    theta = [math.radians(float(x)) for x in record.g_angles_deg]
    rows = table.shape[0]
    labels = _plane_labels(record, rows)

    if plane_indices is None:
        plane_indices = _choose_plane_indices(rows, max_planes=4)

    fig = plt.figure()
    ax = fig.add_subplot(111, projection="polar")
    ax.set_theta_zero_location("S")
    for ci in plane_indices:
        if ci < 0 or ci >= rows:
            continue
        ax.plot(theta, table[ci], label=labels[ci])

    ax.set_title("Polar intensity plot (cd/1000 lm)")
    ax.legend(loc="best", bbox_to_anchor=(1.15, 1.05))
    fig.tight_layout()
    fig.savefig(outpath, dpi=200)
    plt.close(fig)
    return outpath


def save_default_plots(record: LuminaireRecord, outdir: Path, stem: str = "ldt_view") -> PlotPaths:
    _ensure_outdir(outdir)
    intensity_png = outdir / f"{stem}_intensity.png"
    polar_png = outdir / f"{stem}_polar.png"

    plot_intensity_curves(record, intensity_png)
    plot_polar(record, polar_png)

    return PlotPaths(intensity_png=intensity_png, polar_png=polar_png)
