"""
Command line entry point for the smoothing noise harness.

Generates a synthetic noisy pose stream, runs it through a PoseFilter and
reports how much error and jitter the filters remove. Profiles can be tuned
through JSON files holding FilterProfile fields.
"""
import os
import json
import argparse
import logging

from posesmooth import VERSION
from posesmooth.smoothing.noise_harness import generate_noisy_poses, run_harness
from posesmooth.smoothing.profiles import POSITION_PROFILE, ROTATION_PROFILE, load_profile

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="posesmooth",
        description="Run the speed-adaptive pose filters over a synthetic noisy pose stream.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--frames", type=int, default=600, help="Number of samples to generate")
    parser.add_argument("--fps", type=float, default=60.0, help="Nominal sample rate in Hz")
    parser.add_argument(
        "--position-noise",
        type=float,
        default=0.01,
        help="Maximum positional noise in metres",
    )
    parser.add_argument(
        "--rotation-noise",
        type=float,
        default=0.02,
        help="Blend ratio towards a random rotation (0 = no rotational noise)",
    )
    parser.add_argument("--timing-jitter", type=float, default=0.0,
                        help="Relative random variation of the tick interval")
    parser.add_argument("--sign-flips", type=float, default=0.0,
                        help="Probability of reporting a quaternion as -q")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument(
        "--position-profile",
        default="",
        type=str,
        help="JSON file overriding the position FilterProfile",
    )
    parser.add_argument(
        "--rotation-profile",
        default="",
        type=str,
        help="JSON file overriding the rotation FilterProfile (windows in degrees)",
    )
    parser.add_argument("--output-dir", default="", type=str,
                        help="Directory for harness_summary.json and graphs")
    parser.add_argument("--graphs", action="store_true", help="Write PNG graphs (needs --output-dir)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        position_profile = POSITION_PROFILE
        if args.position_profile:
            position_profile = load_profile(args.position_profile, base=POSITION_PROFILE)
        rotation_profile = ROTATION_PROFILE
        if args.rotation_profile:
            rotation_profile = load_profile(args.rotation_profile, base=ROTATION_PROFILE)

        samples = generate_noisy_poses(
            frames=args.frames,
            fps=args.fps,
            position_noise=args.position_noise,
            rotation_noise_ratio=args.rotation_noise,
            seed=args.seed,
            timing_jitter=args.timing_jitter,
            sign_flip_probability=args.sign_flips,
        )
    except (ValueError, OSError) as e:  # FilterConfigError is a ValueError
        logger.error("%s", e)
        return 2

    logs, summary = run_harness(samples, position_profile, rotation_profile)

    if args.output_dir:
        os.makedirs(args.output_dir, exist_ok=True)
        summary_path = os.path.join(args.output_dir, "harness_summary.json")
        with open(summary_path, 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2)
        logger.info("Wrote %s", summary_path)

        if args.graphs:
            from posesmooth.smoothing.smoothing_graphs import convert_harness_logs
            convert_harness_logs(logs, args.output_dir)
    elif args.graphs:
        logger.warning("--graphs needs --output-dir, skipping graphs")

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
