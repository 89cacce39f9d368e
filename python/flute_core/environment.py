"""Ambient conditions and length units feeding the acoustic context."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from math import isfinite, sqrt
from typing import Literal

from .errors import InvalidGeometry
from .geometry import AcousticContext, ToneHoleSpec

LengthUnit = Literal["cm", "inches"]
TemperatureScale = Literal["C", "F"]

SPEED_OF_SOUND_0C = 331.3  # m/s in dry air at 0°C
ABSOLUTE_ZERO_OFFSET_C = 273.15
CM_TO_INCH = 0.3937008

UNIT_SCALE: dict[str, float] = {
    "cm": 100.0,
    "inches": 39.3701,
}


def _unit_scale(units: str) -> float:
    try:
        return UNIT_SCALE[units]
    except KeyError:
        raise ValueError(f"Unsupported length unit: {units!r}") from None


def fahrenheit_to_celsius(temperature_f: float) -> float:
    return (temperature_f - 32.0) * 5.0 / 9.0


def temperature_to_celsius(value: float, scale: TemperatureScale = "C") -> float:
    """Return ``value`` expressed in degrees Celsius."""

    if scale == "C":
        return float(value)
    if scale == "F":
        return fahrenheit_to_celsius(value)
    raise ValueError(f"Unsupported temperature scale: {scale!r}")


def speed_of_sound_mps(temperature_c: float) -> float:
    """Return ``331.3 * sqrt(1 + T/273.15)`` in metres per second.

    Non-finite temperatures and temperatures below absolute zero raise
    :class:`InvalidGeometry`.
    """

    if not isfinite(temperature_c):
        raise InvalidGeometry(
            f"temperature must be finite, got {temperature_c!r}",
            stage="speed_of_sound",
        )
    radicand = 1.0 + temperature_c / ABSOLUTE_ZERO_OFFSET_C
    if radicand < 0.0:
        raise InvalidGeometry(
            f"temperature {temperature_c}°C is below absolute zero",
            stage="speed_of_sound",
        )
    return SPEED_OF_SOUND_0C * sqrt(radicand)


def speed_of_sound(temperature_c: float, units: LengthUnit = "inches") -> float:
    """Return the speed of sound in ``units`` per second."""

    return speed_of_sound_mps(temperature_c) * _unit_scale(units)


def convert_length(value: float, from_units: LengthUnit, to_units: LengthUnit) -> float:
    """Convert a length between centimetres and inches."""

    _unit_scale(from_units)
    _unit_scale(to_units)
    if from_units == to_units:
        return float(value)
    if from_units == "cm":
        return value * CM_TO_INCH
    return value / CM_TO_INCH


def convert_context_units(
    context: AcousticContext,
    from_units: LengthUnit,
    to_units: LengthUnit,
) -> AcousticContext:
    """Re-express every length of ``context`` (speed of sound included) in ``to_units``."""

    return replace(
        context,
        speed_of_sound=convert_length(context.speed_of_sound, from_units, to_units),
        bore_diameter=convert_length(context.bore_diameter, from_units, to_units),
        wall_thickness=convert_length(context.wall_thickness, from_units, to_units),
        embouchure_diameter=convert_length(context.embouchure_diameter, from_units, to_units),
    )


def convert_holes_units(
    holes: Sequence[ToneHoleSpec],
    from_units: LengthUnit,
    to_units: LengthUnit,
) -> tuple[ToneHoleSpec, ...]:
    return tuple(
        replace(hole, diameter=convert_length(hole.diameter, from_units, to_units))
        for hole in holes
    )


def build_context(
    *,
    temperature_c: float,
    units: LengthUnit,
    bore_diameter: float,
    wall_thickness: float,
    embouchure_diameter: float,
    end_frequency: float,
) -> AcousticContext:
    """Assemble an :class:`AcousticContext` with a temperature-corrected speed of sound."""

    return AcousticContext(
        speed_of_sound=speed_of_sound(temperature_c, units),
        bore_diameter=bore_diameter,
        wall_thickness=wall_thickness,
        embouchure_diameter=embouchure_diameter,
        end_frequency=end_frequency,
    )


__all__ = [
    "LengthUnit",
    "TemperatureScale",
    "CM_TO_INCH",
    "UNIT_SCALE",
    "fahrenheit_to_celsius",
    "temperature_to_celsius",
    "speed_of_sound_mps",
    "speed_of_sound",
    "convert_length",
    "convert_context_units",
    "convert_holes_units",
    "build_context",
]
