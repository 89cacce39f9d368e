"""Closed-form finger-hole placement for a cylindrical transverse flute.

Positions are solved along an acoustic axis whose origin is the theoretical
start of the air column (beyond the embouchure). The open end is solved first,
then the lowest hole, then each higher hole from the one below it. Every step
is a quadratic obtained by clearing Benade's open-hole corrections, so no
iteration is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from itertools import accumulate

from ..errors import AcousticError, InvalidFrequency, hole_stage
from ..geometry import AcousticContext, Positions, ToneHoleSpec, validate_holes
from ..result import Result
from ._utils import guarded_divide, lower_quadratic_root, require_finite
from .corrections import (
    closed_hole_correction,
    effective_hole_height,
    embouchure_correction,
    end_correction,
    first_hole_correction,
    lattice_hole_correction,
)
from .projection import project_positions

logger = logging.getLogger(__name__)


def _retag(exc: AcousticError, stage: str, index: int) -> AcousticError:
    return type(exc)(exc.message, stage=stage, hole_index=index)


class PositionSolver:
    """Solver for the embouchure and finger-hole chain of one instrument."""

    def __init__(self, context: AcousticContext, holes: Sequence[ToneHoleSpec]):
        context.validate()
        self.context = context
        self.holes = validate_holes(holes)

        self._closed_corrections = tuple(self._closed_correction(i) for i in range(len(self.holes)))
        self._effective_heights = tuple(self._effective_height(i) for i in range(len(self.holes)))

    def _closed_correction(self, index: int) -> float:
        ctx = self.context
        try:
            value = closed_hole_correction(ctx.wall_thickness, self.holes[index].diameter, ctx.bore_diameter)
        except AcousticError as exc:
            raise _retag(exc, f"closed_hole_correction[{index}]", index) from exc
        return require_finite(value, stage=f"closed_hole_correction[{index}]", hole_index=index)

    def _effective_height(self, index: int) -> float:
        try:
            return effective_hole_height(self.context.wall_thickness, self.holes[index].diameter)
        except AcousticError as exc:
            raise _retag(exc, f"effective_hole_height[{index}]", index) from exc

    @property
    def closed_hole_corrections(self) -> tuple[float, ...]:
        return self._closed_corrections

    def half_wavelength(self, frequency: float, *, stage: str, hole_index: int | None = None) -> float:
        """Return the open-open pipe length ``c / 2f`` for ``frequency``."""

        if frequency <= 0:
            raise InvalidFrequency(
                f"frequency must be positive, got {frequency!r}",
                stage=stage,
                hole_index=hole_index,
            )
        return guarded_divide(self.context.speed_of_sound, 2.0 * frequency, stage=stage, hole_index=hole_index)

    def target_length(self, index: int) -> float:
        """Return ``L_n``: half wavelength less the corrections of the closed holes above ``index``."""

        stage = hole_stage(index)
        length = self.half_wavelength(self.holes[index].frequency, stage=stage, hole_index=index)
        length -= sum(self._closed_corrections[index + 1 :])
        return require_finite(length, stage=stage, hole_index=index)

    def acoustic_end_position(self) -> float:
        """Return ``Xend``, the effective open end with every hole closed."""

        stage = "acoustic_end"
        length = self.half_wavelength(self.context.end_frequency, stage=stage)
        acoustic_end_x = length - end_correction(self.context.bore_diameter) - sum(self._closed_corrections)
        logger.debug("Acoustic end at %.6f (half wavelength %.6f)", acoustic_end_x, length)
        return require_finite(acoustic_end_x, stage=stage)

    def first_hole_position(self, acoustic_end_x: float) -> float:
        """Solve the lowest hole, which only sees the open end below it."""

        hole = self.holes[0]
        stage = hole_stage(0)
        length = self.target_length(0)
        te = self._effective_heights[0]
        ratio = guarded_divide(hole.diameter, self.context.bore_diameter, stage=stage, hole_index=0)
        r = ratio * ratio

        a = r
        b = -(acoustic_end_x + length) * r
        c = acoustic_end_x * length * r + te * (length - acoustic_end_x)
        position = lower_quadratic_root(a, b, c, stage=stage, hole_index=0)
        logger.debug("Hole 0 at acoustic %.6f (L=%.6f)", position, length)
        return position

    def next_hole_position(self, previous_position: float, index: int) -> float:
        """Solve hole ``index`` given the acoustic position of hole ``index - 1``."""

        hole = self.holes[index]
        stage = hole_stage(index)
        length = self.target_length(index)
        te = self._effective_heights[index]
        ratio = guarded_divide(self.context.bore_diameter, hole.diameter, stage=stage, hole_index=index)
        lattice = te * ratio * ratio

        a = 2.0
        b = -previous_position - 3.0 * length + lattice
        c = previous_position * (length - lattice) + length * length
        position = lower_quadratic_root(a, b, c, stage=stage, hole_index=index)
        logger.debug("Hole %d at acoustic %.6f (L=%.6f)", index, position, length)
        return position

    def hole_positions(self, acoustic_end_x: float) -> tuple[float, ...]:
        """Return all hole acoustic positions in index order.

        Each solve consumes the position of the hole directly below it, so the
        chain is a left fold seeded with hole 0.
        """

        first = self.first_hole_position(acoustic_end_x)
        return tuple(accumulate(range(1, len(self.holes)), self.next_hole_position, initial=first))

    def embouchure_position(self) -> float:
        ctx = self.context
        return embouchure_correction(ctx.bore_diameter, ctx.embouchure_diameter, ctx.wall_thickness)

    def solve(self) -> Positions:
        """Run the full chain and return the projected positions.

        Raises the first :class:`AcousticError` encountered; nothing partial is
        returned.
        """

        acoustic_end_x = self.acoustic_end_position()
        hole_positions = self.hole_positions(acoustic_end_x)
        embouchure_x = self.embouchure_position()
        positions = project_positions(acoustic_end_x, hole_positions, embouchure_x)
        if not positions.is_physically_ordered():
            logger.warning(
                "Solved positions are not physically ordered: holes=%s embouchure=%.4f",
                ", ".join(f"{value:.4f}" for value in positions.hole_physical_positions),
                positions.embouchure_physical_position,
            )
        return positions

    def residuals(self, positions: Positions) -> tuple[float, ...]:
        """Return ``x + C(x) - L`` for every hole using Benade's uncleared corrections.

        A correct solve leaves every residual at rounding-error level.
        """

        ctx = self.context
        acoustic = [hole.acoustic_position for hole in positions.holes]
        out: list[float] = []
        for index, position in enumerate(acoustic):
            if index == 0:
                correction = first_hole_correction(
                    self._effective_heights[0],
                    self.holes[0].diameter,
                    ctx.bore_diameter,
                    positions.acoustic_end_x,
                    position,
                )
            else:
                correction = lattice_hole_correction(
                    self._effective_heights[index],
                    self.holes[index].diameter,
                    ctx.bore_diameter,
                    acoustic[index - 1],
                    position,
                    hole_index=index,
                )
            out.append(position + correction - self.target_length(index))
        return tuple(out)


def compute_positions(
    context: AcousticContext,
    holes: Sequence[ToneHoleSpec],
) -> Result[Positions, AcousticError]:
    """Solve embouchure and hole positions, capturing failures in a :class:`Result`."""

    try:
        positions = PositionSolver(context, holes).solve()
    except AcousticError as exc:
        logger.warning("Position calculation failed: %s", exc)
        return Result.err(exc)
    return Result.ok(positions)


__all__ = ["PositionSolver", "compute_positions"]
