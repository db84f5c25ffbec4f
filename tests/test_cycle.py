import math
import unittest

import numpy as np

from attracting_cycle import (
    CycleStatus,
    MaxIterationsExceededError,
    MaxIterationsWarning,
    PeriodNotFoundError,
    RefinementExhaustedWarning,
    find_attracting_cycle,
    verify_periodicity,
)
from attracting_cycle.cycle import detect_cycle, fast_path, refine_period
from attracting_cycle.maps import affine, exponential, newton, quadratic

RABBIT_C = complex(-0.122561166876654, 0.744861766619744)


class CountingMap:
    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, z):
        self.calls += 1
        return self.fn(z)


class FailsOnCall:
    def __init__(self, n):
        self.n = n
        self.calls = 0

    def __call__(self, z):
        self.calls += 1
        if self.calls == self.n:
            raise ValueError("undefined here")
        return z + 1


class ScriptedMap:
    """Returns scripted values for the first calls, then behaves like z + 1."""

    def __init__(self, script):
        self.script = list(script)

    def __call__(self, z):
        if self.script:
            return self.script.pop(0)
        return z + 1


class FindAttractingCycleTests(unittest.TestCase):
    def test_halving_map_settles_on_fixed_point(self):
        r = find_attracting_cycle(0, lambda z: z / 2 + 1, tol=1e-6, max_it=100)
        self.assertEqual(r.period, 1)
        self.assertEqual(r.status, CycleStatus.CONVERGED)
        self.assertTrue(r.converged)
        self.assertLess(abs(r.representative - 2.0), 1e-5)
        self.assertLess(r.ratio, 1.0)
        self.assertEqual(r.as_tuple(), (r.period, r.representative, r.ratio))

    def test_fast_path_ratio_is_affine_multiplier(self):
        for c in (0.5, 0.5j, -0.5):
            r = find_attracting_cycle(0j, affine(c, 1.0), tol=0.6, max_it=10)
            self.assertEqual(r.period, 1)
            self.assertAlmostEqual(r.ratio, abs(c), places=12)
            self.assertEqual(r.representative, c + 1)

    def test_exhaustion_returns_sentinel_and_warns(self):
        with self.assertWarns(MaxIterationsWarning):
            r = find_attracting_cycle(0, lambda z: z + 1, tol=1e-6, max_it=1)
        self.assertEqual(r.period, 1)
        self.assertEqual(r.ratio, 1.0)
        self.assertEqual(r.status, CycleStatus.MAX_ITERATIONS)
        self.assertFalse(r.converged)
        self.assertEqual(r.representative, 4)

    def test_exhaustion_strict_raises(self):
        with self.assertRaises(MaxIterationsExceededError) as ctx:
            find_attracting_cycle(0, lambda z: z + 1, tol=1e-6, max_it=5, strict=True)
        self.assertEqual(ctx.exception.result.period, 5)
        self.assertEqual(ctx.exception.result.ratio, 1.0)

    def test_exact_involution_guards_zero_division(self):
        r = find_attracting_cycle(2, lambda z: 1 / z, tol=1e-12, max_it=50)
        self.assertEqual(r.period, 2)
        self.assertEqual(r.ratio, 0.0)
        self.assertEqual(r.representative, 2.0)

    def test_huge_finite_orbit_exhausts_instead_of_overflowing(self):
        # Components stay finite at F(F(a0)) but the modulus of the gap does not.
        a0 = complex(1.3e307 / 11, 1.3e307 / 11)
        with self.assertWarns(MaxIterationsWarning):
            r = find_attracting_cycle(a0, lambda z: 11 * z, tol=1e-6, max_it=3)
        self.assertEqual(r.status, CycleStatus.MAX_ITERATIONS)
        self.assertEqual(r.period, 3)

    def test_refinement_exhaustion_is_distinct(self):
        with self.assertWarns(RefinementExhaustedWarning):
            r = find_attracting_cycle(0, ScriptedMap([1, 2, 5, 5, 5]), tol=1e-6, max_it=3)
        self.assertEqual(r.status, CycleStatus.REFINEMENT_EXHAUSTED)
        self.assertEqual(r.period, 3)
        self.assertEqual(r.ratio, 1.0)
        self.assertEqual(r.representative, 5)

    def test_refinement_exhaustion_strict_raises(self):
        with self.assertRaises(PeriodNotFoundError):
            find_attracting_cycle(0, ScriptedMap([1, 2, 5, 5, 5]), tol=1e-6, max_it=3, strict=True)

    def test_periodicity_round_trip(self):
        cases = [
            (quadratic(-1.0), 0.1 + 0j, 2),
            (quadratic(RABBIT_C), 0j, 3),
            (quadratic(-0.5), 0j, 1),
            (newton(3), 1 + 1j, 1),
            (exponential(0.2), 0j, 1),
        ]
        for F, z0, period in cases:
            r = find_attracting_cycle(z0, F, tol=1e-10, max_it=1000)
            self.assertTrue(r.converged)
            self.assertEqual(r.period, period)
            check = verify_periodicity(F, r)
            self.assertTrue(check.ok, msg=f"distance {check.distance} > {check.tol}")

    def test_deterministic(self):
        F = quadratic(RABBIT_C)
        r1 = find_attracting_cycle(0j, F, tol=1e-10)
        r2 = find_attracting_cycle(0j, F, tol=1e-10)
        self.assertEqual(r1, r2)

    def test_period_independent_of_tolerance(self):
        for c in (0.3, -0.5, 0.4 + 0.3j):
            F = affine(c, 1.0)
            for tol in (1e-4, 1e-8, 1e-12):
                r = find_attracting_cycle(0j, F, tol=tol, max_it=1000)
                self.assertEqual(r.period, 1)
                self.assertLess(r.ratio, 1.0)
                self.assertLess(abs(r.representative - 1.0 / (1.0 - c)), 10 * tol)

    def test_default_tolerance_follows_working_precision(self):
        r = find_attracting_cycle(0j, lambda z: z / 2 + 1)
        self.assertAlmostEqual(r.tol, 5e-15, delta=1e-27)

        r32 = find_attracting_cycle(np.complex64(0), lambda z: z / 2 + 1)
        self.assertAlmostEqual(r32.tol, 5e-6, delta=1e-18)
        self.assertEqual(r32.period, 1)

        r8 = find_attracting_cycle(0j, lambda z: z / 2 + 1, digits=8)
        self.assertAlmostEqual(r8.tol, 5e-8, delta=1e-20)

    def test_upstream_failure_propagates(self):
        with self.assertRaises(ZeroDivisionError):
            find_attracting_cycle(0, lambda z: 1 / z)

        F = FailsOnCall(3)
        with self.assertRaises(ValueError):
            find_attracting_cycle(0, F, tol=1e-6)
        self.assertEqual(F.calls, 3)

    def test_invalid_parameters_rejected_before_iteration(self):
        bad = [
            {"tol": 0.0},
            {"tol": -1e-3},
            {"tol": math.nan},
            {"tol": math.inf},
            {"max_it": 0},
            {"max_it": -3},
            {"max_it": True},
            {"max_it": 2.5},
            {"digits": 0},
        ]
        for kwargs in bad:
            F = CountingMap(lambda z: z / 2)
            with self.assertRaises(ValueError, msg=str(kwargs)):
                find_attracting_cycle(1.0, F, **kwargs)
            self.assertEqual(F.calls, 0)


class PhaseTests(unittest.TestCase):
    def test_fast_path_passes_pair_on_when_not_collapsed(self):
        out = fast_path(0, lambda z: z + 1, 1e-6)
        self.assertIsNone(out.result)
        self.assertEqual((out.tortoise, out.hare), (1, 2))

    def test_fast_path_zero_step_reports_zero_ratio(self):
        out = fast_path(3.0, lambda z: z, 1e-6)
        self.assertIsNotNone(out.result)
        self.assertEqual(out.result.ratio, 0.0)

    def test_detector_finds_multiple_of_period(self):
        # Exact 3-cycle 0 -> 1 -> 2 -> 0.
        F = lambda z: (z + 1) % 3
        det = detect_cycle(F(0), F(F(0)), F, 0.5, 20)
        self.assertTrue(det.found)
        self.assertEqual(det.closeness, 0.0)
        self.assertEqual(det.steps, 2)

    def test_refiner_returns_minimal_period(self):
        F = lambda z: (z + 1) % 3
        ref = refine_period(1, F, 0.5, 20)
        self.assertTrue(ref.found)
        self.assertEqual(ref.period, 3)
        self.assertEqual(ref.point, 1)

    def test_refiner_exhausted_keeps_anchor(self):
        ref = refine_period(0, lambda z: z + 1, 0.5, 4)
        self.assertFalse(ref.found)
        self.assertEqual(ref.period, 4)
        self.assertEqual(ref.point, 0)
        self.assertEqual(ref.closeness, 4.0)


if __name__ == "__main__":
    unittest.main()
