import logging
import os
import tempfile
from typing import Dict, Any, List, Optional

import numpy as np

from posesmooth.smoothing.math_utils import fix_quat_hemisphere, quat_angle_between

try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
except Exception as exc:  # pragma: no cover - runtime optional
    plt = None
    _MATPLOTLIB_IMPORT_ERROR = exc
else:
    _MATPLOTLIB_IMPORT_ERROR = None

logger = logging.getLogger(__name__)


def _ensure_output_dir(output_dir: Optional[str]) -> str:
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
        return output_dir
    return tempfile.mkdtemp(prefix="smoothing_graphs_")


def _plot_axis_traces(
    frames: np.ndarray,
    series: Dict[str, np.ndarray],
    title: str,
    output_path: str,
    axis_labels: List[str],
) -> None:
    """One subplot per axis, one line per named series."""
    for name, data in series.items():
        if data.ndim != 2 or data.shape[1] != len(axis_labels):
            raise ValueError(f"Expected [T][{len(axis_labels)}] data for {name}, got {data.shape}")

    rows = len(axis_labels)
    fig, axes = plt.subplots(rows, 1, figsize=(9.0, max(3.0, rows * 1.8)), sharex=True)
    if rows == 1:
        axes = np.array([axes])

    for axis_idx, label in enumerate(axis_labels):
        ax = axes[axis_idx]
        for name, data in series.items():
            ax.plot(frames, data[:, axis_idx], linewidth=0.7, label=name)
        ax.set_ylabel(label, fontsize=8)
        ax.tick_params(labelsize=6)
    axes[0].legend(fontsize=6, loc="upper right")
    axes[-1].set_xlabel("Frame", fontsize=8)

    fig.suptitle(title, fontsize=10)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def _plot_angle_error(frames, noisy_deg, filtered_deg, output_path):
    fig, ax = plt.subplots(1, 1, figsize=(9.0, 3.0))
    ax.plot(frames, noisy_deg, linewidth=0.6, label="noisy")
    ax.plot(frames, filtered_deg, linewidth=0.8, label="filtered")
    ax.set_xlabel("Frame", fontsize=8)
    ax.set_ylabel("Error (deg)", fontsize=8)
    ax.tick_params(labelsize=6)
    ax.legend(fontsize=6, loc="upper right")
    fig.suptitle("Rotation error against clean pose", fontsize=10)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def convert_harness_logs(harness_logs: Dict[str, Any], output_dir: Optional[str] = None) -> List[str]:
    """
    Convert noise harness logs into graph PNGs.
    Returns a list of generated file paths.
    """
    if plt is None:
        raise ImportError(f"matplotlib is required for smoothing graphs: {_MATPLOTLIB_IMPORT_ERROR}")

    if not harness_logs or "frames" not in harness_logs:
        return []

    frames = np.asarray(harness_logs["frames"], dtype=float)
    if frames.size == 0:
        return []

    output_dir = _ensure_output_dir(output_dir)
    generated_files: List[str] = []

    # positions
    position_series = {}
    for name in ("clean", "noisy", "filtered"):
        data = harness_logs.get(f"{name}_positions")
        if data is not None:
            position_series[name] = np.asarray(data, dtype=float)
    if position_series:
        out_path = os.path.join(output_dir, "positions.png")
        _plot_axis_traces(frames, position_series, "Position (m)", out_path, ["X", "Y", "Z"])
        generated_files.append(out_path)

    # rotations
    rotation_series = {}
    for name in ("clean", "noisy", "filtered"):
        data = harness_logs.get(f"{name}_rotations")
        if data is not None and len(data) > 0:
            # q / -q flips would show up as spikes in the component traces
            rotation_series[name] = np.asarray(fix_quat_hemisphere(data), dtype=float)
    if rotation_series:
        out_path = os.path.join(output_dir, "rotations.png")
        _plot_axis_traces(frames, rotation_series, "Rotation (quaternion)", out_path, ["W", "X", "Y", "Z"])
        generated_files.append(out_path)

        clean = rotation_series.get("clean")
        if clean is not None and "noisy" in rotation_series and "filtered" in rotation_series:
            noisy_deg = [quat_angle_between(q, c) for q, c in zip(rotation_series["noisy"], clean)]
            filtered_deg = [quat_angle_between(q, c) for q, c in zip(rotation_series["filtered"], clean)]
            out_path = os.path.join(output_dir, "rotation_error.png")
            _plot_angle_error(frames, noisy_deg, filtered_deg, out_path)
            generated_files.append(out_path)

    for path in generated_files:
        logger.info("Wrote %s", path)
    return generated_files
