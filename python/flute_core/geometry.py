"""Flute geometry and result data models used across the calculation core."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import isfinite
from typing import Any

from .errors import InvalidFrequency, InvalidGeometry, hole_stage

HOLE_COUNT = 6


@dataclass(frozen=True, slots=True)
class AcousticContext:
    """Bore geometry and tuning inputs shared by every hole of one calculation."""

    speed_of_sound: float
    """Speed of sound in length units per second (same unit as every length)."""

    bore_diameter: float
    """Inner diameter of the cylindrical bore."""

    wall_thickness: float
    """Tube wall thickness, i.e. the chimney height of each tone hole."""

    embouchure_diameter: float
    """Diameter of the blowing hole."""

    end_frequency: float
    """Fundamental (all holes closed) in Hz."""

    def validate(self) -> None:
        """Raise when the context violates its invariants."""

        for name in ("speed_of_sound", "bore_diameter", "wall_thickness", "embouchure_diameter"):
            value = getattr(self, name)
            if not isfinite(value):
                raise InvalidGeometry(f"{name} must be finite, got {value!r}", stage=name)
        if self.speed_of_sound <= 0:
            raise InvalidGeometry("speed of sound must be positive", stage="speed_of_sound")
        if self.bore_diameter <= 0:
            raise InvalidGeometry("bore diameter must be positive", stage="bore_diameter")
        if self.wall_thickness < 0:
            raise InvalidGeometry("wall thickness cannot be negative", stage="wall_thickness")
        if self.embouchure_diameter <= 0:
            raise InvalidGeometry("embouchure diameter must be positive", stage="embouchure_diameter")
        if not isfinite(self.end_frequency) or self.end_frequency <= 0:
            raise InvalidFrequency(
                f"end frequency must be positive, got {self.end_frequency!r}",
                stage="end_frequency",
            )

    def to_dict(self) -> dict[str, float]:
        return {
            "speed_of_sound": self.speed_of_sound,
            "bore_diameter": self.bore_diameter,
            "wall_thickness": self.wall_thickness,
            "embouchure_diameter": self.embouchure_diameter,
            "end_frequency": self.end_frequency,
        }


@dataclass(frozen=True, slots=True)
class ToneHoleSpec:
    """Target pitch and size of one finger hole."""

    frequency: float
    """Pitch (Hz) sounded when this is the first open hole."""

    diameter: float
    """Hole diameter in the context's length unit."""

    def validate(self, index: int) -> None:
        stage = hole_stage(index)
        if not isfinite(self.frequency) or self.frequency <= 0:
            raise InvalidFrequency(
                f"frequency must be positive, got {self.frequency!r}",
                stage=stage,
                hole_index=index,
            )
        if not isfinite(self.diameter) or self.diameter <= 0:
            raise InvalidGeometry(
                f"diameter must be positive, got {self.diameter!r}",
                stage=stage,
                hole_index=index,
            )

    def to_dict(self) -> dict[str, float]:
        return {"frequency": self.frequency, "diameter": self.diameter}


@dataclass(frozen=True, slots=True)
class ToneHoleResult:
    """Solved location of a single finger hole."""

    index: int
    acoustic_position: float
    """Signed distance from the theoretical acoustic origin."""

    physical_position: float
    """Distance from the physical open end of the tube."""

    def to_dict(self) -> dict[str, float | int]:
        return {
            "index": self.index,
            "acoustic_position": self.acoustic_position,
            "physical_position": self.physical_position,
        }


@dataclass(frozen=True, slots=True)
class EmbouchureResult:
    """Solved location of the embouchure centre."""

    acoustic_position: float
    physical_position: float

    def to_dict(self) -> dict[str, float]:
        return {
            "acoustic_position": self.acoustic_position,
            "physical_position": self.physical_position,
        }


@dataclass(frozen=True, slots=True)
class Positions:
    """Immutable snapshot of one successful calculation."""

    acoustic_end_x: float
    embouchure: EmbouchureResult
    holes: tuple[ToneHoleResult, ...]
    end_physical_position: float = 0.0

    @property
    def hole_physical_positions(self) -> tuple[float, ...]:
        return tuple(hole.physical_position for hole in self.holes)

    @property
    def embouchure_physical_position(self) -> float:
        return self.embouchure.physical_position

    def is_physically_ordered(self) -> bool:
        """Return ``True`` when holes run outward from the open end towards the embouchure.

        Holes must sit at non-negative distances, strictly increasing with index,
        and the embouchure must lie beyond the last hole. Anything else means
        the inputs describe an instrument that cannot be built.
        """

        positions = self.hole_physical_positions
        if any(position < 0.0 for position in positions):
            return False
        if any(lower >= upper for lower, upper in zip(positions, positions[1:])):
            return False
        return all(position < self.embouchure_physical_position for position in positions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "acoustic_end_x": self.acoustic_end_x,
            "end_physical_position": self.end_physical_position,
            "embouchure_physical_position": self.embouchure_physical_position,
            "hole_physical_positions": list(self.hole_physical_positions),
            "embouchure": self.embouchure.to_dict(),
            "holes": [hole.to_dict() for hole in self.holes],
        }


def validate_holes(holes: Sequence[ToneHoleSpec]) -> tuple[ToneHoleSpec, ...]:
    """Check the ordered hole list and return it as a tuple."""

    ordered = tuple(holes)
    if len(ordered) != HOLE_COUNT:
        raise InvalidGeometry(
            f"expected {HOLE_COUNT} tone holes, got {len(ordered)}",
            stage="holes",
        )
    for index, hole in enumerate(ordered):
        hole.validate(index)
    return ordered


__all__ = [
    "HOLE_COUNT",
    "AcousticContext",
    "ToneHoleSpec",
    "ToneHoleResult",
    "EmbouchureResult",
    "Positions",
    "validate_holes",
]
