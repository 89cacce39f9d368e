"""Tagged error hierarchy raised by the acoustic calculation core."""

from __future__ import annotations

from typing import Any


class AcousticError(ValueError):
    """Base class for every failure raised while solving hole positions.

    ``stage`` names the failing step (``"hole[3]"``, ``"end_correction"`` ...)
    and ``hole_index`` is set whenever the failure belongs to a single tone hole.
    """

    kind = "AcousticError"

    def __init__(self, message: str, *, stage: str, hole_index: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.hole_index = hole_index

    def __str__(self) -> str:
        return f"{self.kind} at {self.stage}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "stage": self.stage,
            "hole_index": self.hole_index,
            "message": self.message,
        }


class InvalidGeometry(AcousticError):
    """Non-positive or degenerate bore, diameter or wall thickness."""

    kind = "InvalidGeometry"


class InvalidFrequency(AcousticError):
    """A target frequency that is not strictly positive."""

    kind = "InvalidFrequency"


class NoRealSolution(AcousticError):
    """A quadratic with a negative discriminant (or vanishing leading term)."""

    kind = "NoRealSolution"


class DegenerateNearZero(AcousticError):
    """A divisor whose magnitude fell below the near-zero threshold."""

    kind = "DegenerateNearZero"


def hole_stage(index: int) -> str:
    return f"hole[{index}]"


__all__ = [
    "AcousticError",
    "InvalidGeometry",
    "InvalidFrequency",
    "NoRealSolution",
    "DegenerateNearZero",
    "hole_stage",
]
