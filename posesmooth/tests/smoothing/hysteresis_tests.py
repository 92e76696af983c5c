import math
import unittest

import numpy as np

from posesmooth.smoothing.errors import FilterConfigError
from posesmooth.smoothing.hysteresis import RotationFilter, ScalarFilter, VectorFilter
from posesmooth.smoothing.math_utils import quat_angle_between, quat_from_axis_angle
from posesmooth.smoothing.pose_filter import PoseFilter
from posesmooth.smoothing.profiles import (
    POSITION_PROFILE,
    ROTATION_PROFILE,
    SCALAR_PROFILE,
    FilterProfile,
)
from posesmooth.smoothing.speed_adaptive import SpeedAdaptiveFilter

DT = 1.0 / 60.0


def random_offset(rng, max_radius):
    """Random 3D offset no longer than max_radius."""
    direction = rng.normal(size=3)
    direction /= np.linalg.norm(direction)
    return direction * rng.uniform(0.0, max_radius)


class TestVectorFilter(unittest.TestCase):
    """Test suite for the 3D position hysteresis filter."""

    def setUp(self):
        self.rng = np.random.default_rng(7)
        self.profile = POSITION_PROFILE.copy(inner_window=0.01, outer_window=0.02)

    def test_first_sample_passes_through(self):
        f = VectorFilter(self.profile)
        self.assertFalse(f.is_initialized)
        self.assertIsNone(f.last_value)
        out = f.filter([0.1, 0.2, 0.3], DT)
        np.testing.assert_array_equal(out, [0.1, 0.2, 0.3])
        self.assertTrue(f.is_initialized)

    def test_dead_zone_holds_output_exactly(self):
        """Jitter inside the inner window never moves the output."""
        f = VectorFilter(self.profile)
        anchor = np.array([0.1, -0.2, 1.5])
        held = f.filter(anchor, DT)

        for _ in range(100):
            out = f.filter(anchor + random_offset(self.rng, 0.005), DT)
            self.assertTrue(np.array_equal(out, held), f"Output moved inside dead zone: {out} != {held}")
            np.testing.assert_array_equal(f.last_value, held)

    def test_outside_outer_window_uses_filtered_value(self):
        """At distance >= outer the output equals the 1€ filtered value."""
        f = VectorFilter(self.profile)
        p = self.profile
        shadow = [
            SpeedAdaptiveFilter(p.initial_frequency_hz, p.min_cutoff, p.beta, p.derivative_cutoff)
            for _ in range(3)
        ]
        samples = [np.array([0.0, 0.0, 1.0]), np.array([0.5, 0.0, 1.0]), np.array([1.0, 0.3, 1.0])]
        for sample in samples:
            out = f.filter(sample, DT)
            expected = np.array([s.filter(float(sample[i]), DT) for i, s in enumerate(shadow)])
            np.testing.assert_array_equal(out, expected)

    def test_window_only_blends_linearly(self):
        """Between the windows the output is a linear blend of input and last output."""
        f = VectorFilter(self.profile.copy(window_only=True))
        f.filter([0.0, 0.0, 0.0], DT)
        out = f.filter([0.015, 0.0, 0.0], DT)
        np.testing.assert_allclose(out, [0.0075, 0.0, 0.0], atol=1e-12)

        far = np.array([1.0, 2.0, 3.0])
        np.testing.assert_array_equal(f.filter(far, DT), far)

    def test_reinitialize_reproduces_outputs(self):
        """Replaying a sequence after reinitialize() gives bit-identical outputs."""
        f = VectorFilter()
        sequence = [np.array([0.01 * k, 0.0, 2.0]) + random_offset(self.rng, 0.01) for k in range(60)]

        first_run = [f.filter(sample, DT) for sample in sequence]
        f.reinitialize()
        self.assertFalse(f.is_initialized)
        second_run = [f.filter(sample, DT) for sample in sequence]

        fresh = VectorFilter()
        fresh_run = [fresh.filter(sample, DT) for sample in sequence]

        for a, b, c in zip(first_run, second_run, fresh_run):
            self.assertTrue(np.array_equal(a, b))
            self.assertTrue(np.array_equal(a, c))

    def test_invalid_sample_is_ignored(self):
        """A NaN sample returns the last output and does not disturb later ticks."""
        f = VectorFilter()
        reference = VectorFilter()
        samples = [np.array([0.0, 0.0, 1.0]), np.array([0.05, 0.0, 1.0]), np.array([0.1, 0.02, 1.0])]

        f.filter(samples[0], DT)
        reference.filter(samples[0], DT)
        last = f.filter(samples[1], DT)
        reference.filter(samples[1], DT)

        np.testing.assert_array_equal(f.filter([math.nan, 0.0, 1.0], DT), last)
        np.testing.assert_array_equal(f.filter([0.0, math.inf, 1.0], DT), last)
        np.testing.assert_array_equal(f.filter(samples[2], DT), reference.filter(samples[2], DT))

    def test_wrong_shape(self):
        with self.assertRaises(ValueError):
            VectorFilter().filter([1.0, 2.0], DT)

    def test_window_configuration(self):
        """inner >= outer is rejected and leaves the filter unchanged."""
        f = VectorFilter()
        with self.assertRaises(FilterConfigError):
            f.set_inner_window(0.02)
        with self.assertRaises(FilterConfigError):
            f.set_outer_window(0.001)
        with self.assertRaises(FilterConfigError):
            f.set_inner_window(-0.001)
        self.assertEqual(f.profile.inner_window, POSITION_PROFILE.inner_window)

        f.set_windows(0.02, 0.05)
        self.assertEqual((f.profile.inner_window, f.profile.outer_window), (0.02, 0.05))

        with self.assertRaises(FilterConfigError):
            VectorFilter(FilterProfile(inner_window=0.02, outer_window=0.01))

    def test_tuning_does_not_touch_shared_profile(self):
        f = VectorFilter(POSITION_PROFILE)
        f.set_beta(2.0)
        f.set_min_cutoff(3.0)
        f.set_derivative_cutoff(0.5)
        self.assertEqual(POSITION_PROFILE.beta, 0.5)
        self.assertEqual(POSITION_PROFILE.min_cutoff, 7.0)
        self.assertEqual(f.profile.beta, 2.0)

    def test_tunables_reach_component_filters(self):
        """Tunables are pushed into every component filter on each tick."""
        f = VectorFilter()
        f.filter([0.0, 0.0, 0.0], DT)
        f.set_min_cutoff(3.0)
        f.set_beta(0.25)
        f.filter([0.1, 0.0, 0.0], DT)
        for component in f._filters:
            self.assertEqual(component.min_cutoff, 3.0)
            self.assertEqual(component.beta, 0.25)


class TestScalarFilter(unittest.TestCase):
    """Test suite for the single value hysteresis filter."""

    def test_window_only_behaviour(self):
        f = ScalarFilter(SCALAR_PROFILE.copy(window_only=True))
        self.assertEqual(f.filter(1.0, DT), 1.0)
        self.assertEqual(f.filter(1.001, DT), 1.0)
        self.assertEqual(f.filter(2.0, DT), 2.0)
        self.assertIsInstance(f.last_value, float)

    def test_smooths_noisy_hold(self):
        """Small noise around a constant reading is removed completely."""
        rng = np.random.default_rng(3)
        f = ScalarFilter()
        held = f.filter(0.5, DT)
        for _ in range(50):
            self.assertEqual(f.filter(0.5 + rng.uniform(-0.002, 0.002), DT), held)

    def test_follows_step(self):
        f = ScalarFilter()
        f.filter(0.0, DT)
        out = 0.0
        for _ in range(120):
            out = f.filter(1.0, DT)
        self.assertAlmostEqual(out, 1.0, delta=0.015)

    def test_invalid_before_first_sample(self):
        f = ScalarFilter()
        self.assertIsNone(f.filter(float("nan"), DT))
        self.assertFalse(f.is_initialized)


class TestRotationFilter(unittest.TestCase):
    """Test suite for the quaternion hysteresis filter."""

    def test_first_sample_is_normalized_input(self):
        q = quat_from_axis_angle([0.0, 1.0, 0.0], 0.3)
        out = RotationFilter().filter([2.0 * c for c in q], DT)
        np.testing.assert_allclose(out, q, atol=1e-12)
        self.assertAlmostEqual(np.linalg.norm(out), 1.0, places=12)

    def test_dead_zone_holds_rotation(self):
        """Rotations within the inner window (degrees) leave the output untouched."""
        f = RotationFilter(ROTATION_PROFILE)
        held = f.filter(quat_from_axis_angle([0.0, 0.0, 1.0], 0.5), DT)
        for k in range(30):
            wobble = math.radians(0.2) * math.sin(k)
            out = f.filter(quat_from_axis_angle([0.0, 0.0, 1.0], 0.5 + wobble), DT)
            self.assertTrue(np.array_equal(out, held))

    def test_sign_flips_do_not_change_output(self):
        """q and -q are the same rotation; random sign flips give a continuous output."""
        rng = np.random.default_rng(11)
        steady = RotationFilter()
        flipped = RotationFilter()

        prev = None
        for k in range(200):
            q = quat_from_axis_angle([0.3, 1.0, 0.2], 0.02 * k)
            q_reported = [-c for c in q] if k > 0 and rng.random() < 0.3 else q

            expected = steady.filter(q, DT)
            out = flipped.filter(q_reported, DT)
            self.assertTrue(np.array_equal(out, expected), f"Frame {k}: sign flip changed the output")
            self.assertAlmostEqual(np.linalg.norm(out), 1.0, places=9)
            if prev is not None:
                self.assertLess(quat_angle_between(prev, out), 5.0,
                                f"Discontinuous rotation output at frame {k}")
            prev = out

        self.assertLess(quat_angle_between(prev, q), 10.0)

    def test_invalid_quaternions_are_ignored(self):
        f = RotationFilter()
        self.assertIsNone(f.filter([0.0, 0.0, 0.0, 0.0], DT))
        first = f.filter([1.0, 0.0, 0.0, 0.0], DT)
        np.testing.assert_array_equal(f.filter([math.nan, 0.0, 0.0, 0.0], DT), first)
        np.testing.assert_array_equal(f.filter([0.0, 0.0, 0.0, 0.0], DT), first)


class TestPoseFilter(unittest.TestCase):
    """Test suite for the combined position + rotation filter."""

    def test_filters_both_parts(self):
        f = PoseFilter()
        self.assertEqual(f.last_value, (None, None))
        position, rotation = f.filter([0.0, 1.0, 2.0], [1.0, 0.0, 0.0, 0.0], DT)
        np.testing.assert_array_equal(position, [0.0, 1.0, 2.0])
        np.testing.assert_allclose(rotation, [1.0, 0.0, 0.0, 0.0])
        self.assertTrue(f.is_initialized)

        f.reinitialize()
        self.assertFalse(f.is_initialized)

    def test_profiles_are_independent(self):
        f = PoseFilter(POSITION_PROFILE.copy(beta=1.0), ROTATION_PROFILE.copy(inner_window=0.1))
        self.assertEqual(f.position_filter.profile.beta, 1.0)
        self.assertEqual(f.rotation_filter.profile.inner_window, 0.1)
        self.assertEqual(f.rotation_filter.profile.outer_window, ROTATION_PROFILE.outer_window)


if __name__ == "__main__":
    unittest.main()
