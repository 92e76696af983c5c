"""
Synthetic noisy pose stream for tuning and evaluating the filters.

A clean pose moves along a circle in alternating move / hold segments while
rolling about Z. Noise is added the way a depth tracker would produce it:
positional jitter in a random direction and occasional large rotational
outliers blended in from a uniformly random rotation.
"""

import logging
import math

import numpy as np

from posesmooth.smoothing.math_utils import (
    neg4,
    quat_angle_between,
    quat_from_axis_angle,
    slerp,
)
from posesmooth.smoothing.pose_filter import PoseFilter

logger = logging.getLogger(__name__)


def random_unit_vector(rng):
    """Uniformly distributed direction in 3D."""
    while True:
        v = rng.normal(size=3)
        n = np.linalg.norm(v)
        if n > 1e-9:
            return v / n


def random_rotation(rng):
    """Uniformly distributed unit quaternion [w, x, y, z] (Shoemake, 1992)."""
    u1, u2, u3 = rng.random(3)
    a = math.sqrt(1.0 - u1)
    b = math.sqrt(u1)
    return [
        b * math.cos(2.0 * math.pi * u3),
        a * math.sin(2.0 * math.pi * u2),
        a * math.cos(2.0 * math.pi * u2),
        b * math.sin(2.0 * math.pi * u3),
    ]


def generate_noisy_poses(
    frames=600,
    fps=60.0,
    position_noise=0.01,
    rotation_noise_ratio=0.02,
    seed=0,
    radius=0.25,
    depth=2.0,
    segment_s=1.0,
    timing_jitter=0.0,
    sign_flip_probability=0.0,
):
    """
    Generate a clean and a noisy pose stream.

    Args:
        frames: Number of samples.
        fps: Nominal sample rate.
        position_noise: Maximum positional noise in metres (jitter radius is half of it).
        rotation_noise_ratio: Slerp ratio towards a random rotation; 0 is noise free.
        seed: Seed of the numpy random generator.
        radius: Radius of the circular path in metres.
        depth: Z offset of the path in metres.
        segment_s: Length of each move / hold segment in seconds.
        timing_jitter: Relative random variation of the tick interval, in [0, 1).
        sign_flip_probability: Chance that a noisy quaternion is reported as -q.

    Returns:
        Dictionary of numpy arrays: dt [T], moving [T] (bool), clean_positions [T][3],
        noisy_positions [T][3], clean_rotations [T][4], noisy_rotations [T][4].
    """
    if frames <= 0:
        raise ValueError(f"frames must be positive, got {frames}")
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    if not 0.0 <= timing_jitter < 1.0:
        raise ValueError(f"timing_jitter must be within [0, 1), got {timing_jitter}")

    rng = np.random.default_rng(seed)
    nominal_dt = 1.0 / fps
    angular_speed = 2.0 * math.pi * 0.25  # rad/s while moving

    dt = np.empty(frames)
    moving = np.empty(frames, dtype=bool)
    clean_positions = np.empty((frames, 3))
    noisy_positions = np.empty((frames, 3))
    clean_rotations = np.empty((frames, 4))
    noisy_rotations = np.empty((frames, 4))

    elapsed = 0.0
    phase = 0.0
    for t in range(frames):
        step = nominal_dt * (1.0 + timing_jitter * rng.uniform(-1.0, 1.0))
        dt[t] = step
        if t > 0:
            elapsed += step

        moving[t] = int(elapsed / segment_s) % 2 == 0
        if moving[t] and t > 0:
            phase += angular_speed * step

        clean_pos = np.array([radius * math.cos(phase), radius * math.sin(phase), depth])
        clean_rot = quat_from_axis_angle([0.0, 0.0, 1.0], phase)

        noisy_pos = clean_pos + random_unit_vector(rng) * position_noise * 0.5
        noisy_rot = slerp(clean_rot, random_rotation(rng), rotation_noise_ratio)
        if sign_flip_probability > 0.0 and rng.random() < sign_flip_probability:
            noisy_rot = neg4(noisy_rot)

        clean_positions[t] = clean_pos
        noisy_positions[t] = noisy_pos
        clean_rotations[t] = clean_rot
        noisy_rotations[t] = noisy_rot

    return {
        "dt": dt,
        "moving": moving,
        "clean_positions": clean_positions,
        "noisy_positions": noisy_positions,
        "clean_rotations": clean_rotations,
        "noisy_rotations": noisy_rotations,
    }


def _mean_position_error(a, b):
    return float(np.mean(np.linalg.norm(a - b, axis=1)))


def _mean_angle_error(a, b):
    return float(np.mean([quat_angle_between(p, q) for p, q in zip(a, b)]))


def _hold_jitter(positions, moving):
    """Mean frame-to-frame displacement over frames where the clean pose is held."""
    steps = np.linalg.norm(np.diff(positions, axis=0), axis=1)
    hold = ~moving[1:] & ~moving[:-1]
    if not np.any(hold):
        return 0.0
    return float(np.mean(steps[hold]))


def run_harness(samples, position_profile=None, rotation_profile=None):
    """
    Feed a generated pose stream through a PoseFilter.

    Returns:
        logs: Dictionary with the input series plus frames [T],
              filtered_positions [T][3] and filtered_rotations [T][4].
        summary: Dictionary of error and jitter statistics.
    """
    pose_filter = PoseFilter(position_profile, rotation_profile)
    frames = len(samples["dt"])
    filtered_positions = np.empty((frames, 3))
    filtered_rotations = np.empty((frames, 4))

    for t in range(frames):
        position, rotation = pose_filter.filter(
            samples["noisy_positions"][t],
            samples["noisy_rotations"][t],
            samples["dt"][t],
        )
        filtered_positions[t] = position
        filtered_rotations[t] = rotation

    logs = dict(samples)
    logs["frames"] = np.arange(frames)
    logs["filtered_positions"] = filtered_positions
    logs["filtered_rotations"] = filtered_rotations

    clean_p = samples["clean_positions"]
    clean_q = samples["clean_rotations"]
    moving = samples["moving"]
    summary = {
        "frames": frames,
        "position_error_noisy": _mean_position_error(samples["noisy_positions"], clean_p),
        "position_error_filtered": _mean_position_error(filtered_positions, clean_p),
        "rotation_error_noisy_deg": _mean_angle_error(samples["noisy_rotations"], clean_q),
        "rotation_error_filtered_deg": _mean_angle_error(filtered_rotations, clean_q),
        "hold_jitter_noisy": _hold_jitter(samples["noisy_positions"], moving),
        "hold_jitter_filtered": _hold_jitter(filtered_positions, moving),
    }
    logger.info(
        "Harness run over %d frames: position error %.4f -> %.4f m, rotation error %.2f -> %.2f deg",
        frames,
        summary["position_error_noisy"],
        summary["position_error_filtered"],
        summary["rotation_error_noisy_deg"],
        summary["rotation_error_filtered_deg"],
    )
    return logs, summary
