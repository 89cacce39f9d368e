"""Numeric guards shared across the correction and solver modules."""

from __future__ import annotations

from math import isfinite, sqrt

from ..errors import DegenerateNearZero, InvalidGeometry, NoRealSolution

NEAR_ZERO = 1e-9


def guarded_divide(
    numerator: float,
    denominator: float,
    *,
    stage: str,
    hole_index: int | None = None,
) -> float:
    """Divide, refusing exact zeros and divisors smaller than ``NEAR_ZERO``."""

    if denominator == 0.0:
        raise InvalidGeometry("division by zero", stage=stage, hole_index=hole_index)
    if abs(denominator) < NEAR_ZERO:
        raise DegenerateNearZero(
            f"divisor {denominator!r} is below {NEAR_ZERO}",
            stage=stage,
            hole_index=hole_index,
        )
    return numerator / denominator


def require_finite(value: float, *, stage: str, hole_index: int | None = None) -> float:
    if not isfinite(value):
        raise InvalidGeometry(
            f"non-finite intermediate value {value!r}",
            stage=stage,
            hole_index=hole_index,
        )
    return value


def lower_quadratic_root(
    a: float,
    b: float,
    c: float,
    *,
    stage: str,
    hole_index: int | None = None,
) -> float:
    """Return ``(-b - sqrt(b^2 - 4ac)) / 2a``.

    The minus branch is the one that lands inside the bore for every practical
    instrument; it is kept as an empirical choice rather than derived.
    """

    if a == 0.0:
        raise NoRealSolution("leading coefficient is zero", stage=stage, hole_index=hole_index)
    discriminant = b * b - 4.0 * a * c
    if not isfinite(discriminant):
        raise InvalidGeometry(
            f"non-finite discriminant {discriminant!r}",
            stage=stage,
            hole_index=hole_index,
        )
    if discriminant < 0.0:
        raise NoRealSolution(
            f"negative discriminant {discriminant:.6g} (a={a:.6g}, b={b:.6g}, c={c:.6g})",
            stage=stage,
            hole_index=hole_index,
        )
    root = guarded_divide(-b - sqrt(discriminant), 2.0 * a, stage=stage, hole_index=hole_index)
    return require_finite(root, stage=stage, hole_index=hole_index)


__all__ = ["NEAR_ZERO", "guarded_divide", "require_finite", "lower_quadratic_root"]
