"""Empirical length corrections for a cylindrical flute bore.

The formulas follow Benade's treatment of tone-hole lattices as popularised by
the classic "Flutomat" calculator: effective hole height, closed-hole and open
end corrections, plus Kosel's empirical fit for the embouchure. Every function
is pure and raises an :class:`~flute_core.errors.AcousticError` subclass outside
its domain rather than returning a sentinel.
"""

from __future__ import annotations

from math import isfinite, sqrt

from ..errors import InvalidGeometry
from ._utils import guarded_divide, require_finite

END_CORRECTION_FACTOR = 0.6133
HOLE_HEIGHT_EXTENSION_FACTOR = 0.75
CLOSED_HOLE_FACTOR = 0.25
EMBOUCHURE_FIT_FACTOR = 10.84


def _check_length(value: float, name: str, stage: str, *, positive: bool = False) -> None:
    if not isfinite(value):
        raise InvalidGeometry(f"{name} must be finite, got {value!r}", stage=stage)
    if value < 0.0 or (positive and value == 0.0):
        qualifier = "positive" if positive else "non-negative"
        raise InvalidGeometry(f"{name} must be {qualifier}, got {value!r}", stage=stage)


def effective_hole_height(wall_thickness: float, diameter: float) -> float:
    """Return ``t_e = wall + 0.75 * d``, the acoustic height of an open hole chimney."""

    stage = "effective_hole_height"
    _check_length(wall_thickness, "wall thickness", stage)
    _check_length(diameter, "hole diameter", stage)
    return wall_thickness + HOLE_HEIGHT_EXTENSION_FACTOR * diameter


def closed_hole_correction(wall_thickness: float, diameter: float, bore_diameter: float) -> float:
    """Return ``0.25 * wall * (d / bore)^2``, the length a closed hole adds to the column."""

    stage = "closed_hole_correction"
    _check_length(wall_thickness, "wall thickness", stage)
    _check_length(diameter, "hole diameter", stage)
    _check_length(bore_diameter, "bore diameter", stage, positive=True)
    ratio = guarded_divide(diameter, bore_diameter, stage=stage)
    return CLOSED_HOLE_FACTOR * wall_thickness * ratio * ratio


def end_correction(bore_diameter: float) -> float:
    """Return ``0.6133 * bore radius``, the radiation correction of the open end."""

    _check_length(bore_diameter, "bore diameter", "end_correction", positive=True)
    return END_CORRECTION_FACTOR * bore_diameter / 2.0


def embouchure_correction(
    bore_diameter: float,
    embouchure_diameter: float,
    wall_thickness: float,
) -> float:
    """Return the distance from the acoustic origin to the embouchure centre (Kosel)."""

    stage = "embouchure_correction"
    _check_length(bore_diameter, "bore diameter", stage, positive=True)
    _check_length(embouchure_diameter, "embouchure diameter", stage)
    _check_length(wall_thickness, "wall thickness", stage)

    ratio = guarded_divide(bore_diameter, embouchure_diameter, stage=stage)
    numerator = EMBOUCHURE_FIT_FACTOR * wall_thickness * embouchure_diameter
    denominator = bore_diameter + 2.0 * wall_thickness
    return require_finite(
        ratio * ratio * guarded_divide(numerator, denominator, stage=stage),
        stage=stage,
    )


def first_hole_correction(
    effective_height: float,
    diameter: float,
    bore_diameter: float,
    acoustic_end_x: float,
    position: float,
) -> float:
    """Benade's open-hole correction ``C_s`` for the lowest hole at ``position``.

    ``L0 = x + C_s(x)`` is exactly the relation the hole-0 quadratic solves, so
    this is used to check residuals rather than to compute positions.
    """

    stage = "first_hole_correction"
    ratio = guarded_divide(diameter, bore_diameter, stage=stage, hole_index=0)
    spacing = acoustic_end_x - position
    inverse = guarded_divide(effective_height, spacing, stage=stage, hole_index=0)
    return guarded_divide(effective_height, ratio * ratio + inverse, stage=stage, hole_index=0)


def lattice_hole_correction(
    effective_height: float,
    diameter: float,
    bore_diameter: float,
    previous_position: float,
    position: float,
    *,
    hole_index: int | None = None,
) -> float:
    """Benade's lattice correction ``C_o`` for a hole above an already open one."""

    stage = "lattice_hole_correction"
    spacing = previous_position - position
    ratio = guarded_divide(bore_diameter, diameter, stage=stage, hole_index=hole_index)
    term = 4.0 * guarded_divide(effective_height, spacing, stage=stage, hole_index=hole_index) * ratio * ratio
    if 1.0 + term < 0.0:
        raise InvalidGeometry("lattice term under the root is negative", stage=stage, hole_index=hole_index)
    return spacing / 2.0 * (sqrt(1.0 + term) - 1.0)


__all__ = [
    "END_CORRECTION_FACTOR",
    "HOLE_HEIGHT_EXTENSION_FACTOR",
    "effective_hole_height",
    "closed_hole_correction",
    "end_correction",
    "embouchure_correction",
    "first_hole_correction",
    "lattice_hole_correction",
]
