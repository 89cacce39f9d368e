import math
import pathlib
import sys
import unittest
from dataclasses import replace

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from flute_core import (
    AcousticContext,
    DegenerateNearZero,
    InvalidFrequency,
    InvalidGeometry,
    NoRealSolution,
    PositionSolver,
    ToneHoleSpec,
    compute_positions,
    convert_context_units,
    convert_holes_units,
    convert_length,
    speed_of_sound,
)

HOLE_FREQUENCIES = [329.63, 369.99, 392.00, 440.00, 493.88, 554.37]
HOLE_DIAMETERS = [0.250, 0.4375, 0.3125, 0.3125, 0.375, 0.375]


def reference_positions(
    c: float,
    bore: float,
    wall: float,
    emb: float,
    f_end: float,
    freqs: list[float],
    diams: list[float],
) -> tuple[float, list[float], float]:
    """Straight transcription of the placement formulas, used as the golden reference."""

    n = len(freqs)
    chc = [0.25 * wall * (d / bore) ** 2 for d in diams]
    te = [wall + 0.75 * d for d in diams]

    x_end = c / (2 * f_end) - 0.6133 * bore / 2
    for value in chc:
        x_end -= value

    xs: list[float] = []
    length = c / (2 * freqs[0]) - sum(chc[1:])
    r = (diams[0] / bore) ** 2
    a, b = r, -(x_end + length) * r
    cc = x_end * length * r + te[0] * (length - x_end)
    xs.append((-b - math.sqrt(b * b - 4 * a * cc)) / (2 * a))

    for i in range(1, n):
        length = c / (2 * freqs[i]) - sum(chc[i + 1 :])
        q = (bore / diams[i]) ** 2
        prev = xs[-1]
        b = -prev - 3 * length + te[i] * q
        cc = prev * (length - te[i] * q) + length * length
        xs.append((-b - math.sqrt(b * b - 8 * cc)) / 4)

    x_emb = (bore / emb) ** 2 * 10.84 * wall * emb / (bore + 2 * wall)
    return x_end, xs, x_emb


class PositionSolverTest(unittest.TestCase):
    def setUp(self) -> None:
        self.context = AcousticContext(
            speed_of_sound=speed_of_sound(20.0, "inches"),
            bore_diameter=0.824,
            wall_thickness=0.113,
            embouchure_diameter=0.500,
            end_frequency=293.66,
        )
        self.holes = [
            ToneHoleSpec(frequency=f, diameter=d) for f, d in zip(HOLE_FREQUENCIES, HOLE_DIAMETERS)
        ]

    def _holes_with(self, index: int, **changes: float) -> list[ToneHoleSpec]:
        holes = list(self.holes)
        holes[index] = replace(holes[index], **changes)
        return holes

    def test_known_scenario_matches_reference(self) -> None:
        result = compute_positions(self.context, self.holes)
        self.assertTrue(result.is_ok())
        positions = result.unwrap()

        ctx = self.context
        x_end, xs, x_emb = reference_positions(
            ctx.speed_of_sound,
            ctx.bore_diameter,
            ctx.wall_thickness,
            ctx.embouchure_diameter,
            ctx.end_frequency,
            HOLE_FREQUENCIES,
            HOLE_DIAMETERS,
        )
        self.assertAlmostEqual(positions.acoustic_end_x, x_end, delta=1e-6)
        for hole, expected in zip(positions.holes, xs):
            self.assertAlmostEqual(hole.acoustic_position, expected, delta=1e-6)
            self.assertAlmostEqual(hole.physical_position, x_end - expected, delta=1e-6)
        self.assertAlmostEqual(positions.embouchure.acoustic_position, x_emb, delta=1e-6)
        self.assertAlmostEqual(positions.embouchure_physical_position, x_end - x_emb, delta=1e-6)

    def test_known_scenario_is_physically_plausible(self) -> None:
        positions = compute_positions(self.context, self.holes).unwrap()
        physical = positions.hole_physical_positions

        self.assertEqual(len(physical), 6)
        self.assertTrue(all(math.isfinite(value) and value > 0 for value in physical))
        for lower, upper in zip(physical, physical[1:]):
            self.assertLess(lower, upper)
        self.assertGreater(positions.embouchure_physical_position, max(physical))
        self.assertTrue(positions.is_physically_ordered())

        # A D flute is roughly 23" from embouchure origin to open end.
        self.assertTrue(22.0 < positions.acoustic_end_x < 23.5)
        self.assertTrue(3.0 < physical[0] < 5.0)
        self.assertTrue(10.0 < physical[5] < 13.0)
        self.assertTrue(20.0 < positions.embouchure_physical_position < 22.5)

    def test_end_position_is_zero(self) -> None:
        positions = compute_positions(self.context, self.holes).unwrap()
        self.assertEqual(positions.end_physical_position, 0.0)
        self.assertEqual(positions.to_dict()["end_physical_position"], 0.0)

    def test_identical_inputs_are_bit_identical(self) -> None:
        first = compute_positions(self.context, self.holes).unwrap()
        second = compute_positions(self.context, list(self.holes)).unwrap()
        self.assertEqual(first, second)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_zero_wall_thickness_still_solves(self) -> None:
        context = replace(self.context, wall_thickness=0.0)
        solver = PositionSolver(context, self.holes)
        self.assertTrue(all(value == 0.0 for value in solver.closed_hole_corrections))

        positions = solver.solve()
        self.assertEqual(positions.embouchure.acoustic_position, 0.0)
        self.assertEqual(positions.embouchure_physical_position, positions.acoustic_end_x)
        self.assertTrue(positions.is_physically_ordered())

    def test_benade_residuals_vanish(self) -> None:
        solver = PositionSolver(self.context, self.holes)
        positions = solver.solve()
        for residual in solver.residuals(positions):
            self.assertLess(abs(residual), 1e-6)

    def test_cm_solution_scales_with_inches(self) -> None:
        inches = compute_positions(self.context, self.holes).unwrap()
        context_cm = convert_context_units(self.context, "inches", "cm")
        self.assertAlmostEqual(context_cm.speed_of_sound, speed_of_sound(20.0, "cm"), delta=0.1)
        holes_cm = convert_holes_units(self.holes, "inches", "cm")
        cm = compute_positions(context_cm, holes_cm).unwrap()

        for in_value, cm_value in zip(inches.hole_physical_positions, cm.hole_physical_positions):
            self.assertAlmostEqual(cm_value, convert_length(in_value, "inches", "cm"), places=6)
            self.assertAlmostEqual(cm_value, in_value * 2.54, places=3)
        self.assertAlmostEqual(
            cm.embouchure_physical_position,
            convert_length(inches.embouchure_physical_position, "inches", "cm"),
            places=6,
        )

    def test_negative_discriminant_is_tagged_with_hole(self) -> None:
        # Asking hole 1 for the fundamental puts it below hole 0: no real root.
        holes = self._holes_with(1, frequency=293.66)
        result = compute_positions(self.context, holes)

        self.assertTrue(result.is_err())
        error = result.error
        assert error is not None
        self.assertIsInstance(error, NoRealSolution)
        self.assertEqual(error.hole_index, 1)
        self.assertEqual(error.stage, "hole[1]")
        self.assertIsNone(result.value)
        with self.assertRaises(NoRealSolution):
            result.unwrap()

    def test_first_hole_without_solution(self) -> None:
        holes = self._holes_with(0, frequency=293.66)
        result = compute_positions(self.context, holes)
        assert result.error is not None
        self.assertIsInstance(result.error, NoRealSolution)
        self.assertEqual(result.error.hole_index, 0)
        self.assertEqual(result.error.to_dict()["kind"], "NoRealSolution")

    def test_invalid_end_frequency(self) -> None:
        result = compute_positions(replace(self.context, end_frequency=0.0), self.holes)
        self.assertIsInstance(result.error, InvalidFrequency)

    def test_invalid_hole_frequency(self) -> None:
        result = compute_positions(self.context, self._holes_with(3, frequency=-440.0))
        assert result.error is not None
        self.assertIsInstance(result.error, InvalidFrequency)
        self.assertEqual(result.error.hole_index, 3)
        self.assertEqual(result.error.stage, "hole[3]")

    def test_zero_hole_diameter(self) -> None:
        result = compute_positions(self.context, self._holes_with(4, diameter=0.0))
        assert result.error is not None
        self.assertIsInstance(result.error, InvalidGeometry)
        self.assertEqual(result.error.hole_index, 4)
        self.assertEqual(result.error.stage, "hole[4]")

    def test_tiny_hole_diameter_is_degenerate(self) -> None:
        result = compute_positions(self.context, self._holes_with(0, diameter=1e-6))
        assert result.error is not None
        self.assertIsInstance(result.error, DegenerateNearZero)
        self.assertEqual(result.error.hole_index, 0)

    def test_hole_count_is_fixed(self) -> None:
        result = compute_positions(self.context, self.holes[:5])
        assert result.error is not None
        self.assertIsInstance(result.error, InvalidGeometry)
        self.assertEqual(result.error.stage, "holes")

    def test_invalid_context(self) -> None:
        for changes in ({"bore_diameter": 0.0}, {"wall_thickness": -0.01}, {"speed_of_sound": math.nan}):
            with self.subTest(changes=changes):
                result = compute_positions(replace(self.context, **changes), self.holes)
                self.assertIsInstance(result.error, InvalidGeometry)

    def test_hole_chain_runs_in_order(self) -> None:
        solver = PositionSolver(self.context, self.holes)
        x_end = solver.acoustic_end_position()
        chain = solver.hole_positions(x_end)
        self.assertEqual(chain[0], solver.first_hole_position(x_end))
        for index in range(1, len(chain)):
            self.assertEqual(chain[index], solver.next_hole_position(chain[index - 1], index))


if __name__ == "__main__":
    unittest.main()
