"""FastAPI gateway exposing the flute hole calculator."""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, model_validator

from flute_core import (
    HOLE_COUNT,
    AcousticError,
    ToneHoleSpec,
    build_context,
    compute_positions,
    convert_length,
    major_scale_preset,
    solver_json_schemas,
    speed_of_sound,
    temperature_to_celsius,
)
from flute_core.logging_config import setup_logging

from .config import GatewaySettings

MAX_FREQUENCY_HZ = 20000.0
DISPLAY_DIGITS = {"cm": 2, "inches": 3}

logger = logging.getLogger("flute_core.gateway")

settings = GatewaySettings.from_env()


def solver_schema_catalog() -> dict[str, dict[str, dict[str, Any]]]:
    """Return the JSON schema catalog for the calculator endpoints."""

    return solver_json_schemas()


class HolePayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    frequency: float = Field(..., gt=0, le=MAX_FREQUENCY_HZ)
    diameter: float = Field(..., gt=0)

    def to_spec(self) -> ToneHoleSpec:
        return ToneHoleSpec(frequency=self.frequency, diameter=self.diameter)


class PositionsRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    units: Literal["cm", "inches"] | None = Field(None)
    temperature: float | None = Field(None)
    temperature_scale: Literal["C", "F"] = Field("C")
    bore_diameter: float = Field(..., gt=0)
    wall_thickness: float = Field(..., ge=0)
    embouchure_diameter: float = Field(..., gt=0)
    end_frequency: float = Field(..., gt=0, le=MAX_FREQUENCY_HZ)
    holes: list[HolePayload] = Field(..., min_length=HOLE_COUNT, max_length=HOLE_COUNT)

    @model_validator(mode="after")
    def _holes_fit_inside_bore(self) -> PositionsRequest:
        for index, hole in enumerate(self.holes):
            if hole.diameter >= self.bore_diameter:
                raise ValueError(
                    f"hole {index + 1} diameter {hole.diameter} must be smaller than the bore "
                    f"diameter {self.bore_diameter}"
                )
        return self


class ConvertUnitsRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    from_units: Literal["cm", "inches"]
    to_units: Literal["cm", "inches"]
    bore_diameter: float = Field(..., gt=0)
    wall_thickness: float = Field(..., ge=0)
    embouchure_diameter: float = Field(..., gt=0)
    hole_diameters: list[PositiveFloat] = Field(..., min_length=HOLE_COUNT, max_length=HOLE_COUNT)
    round_for_display: bool = Field(True)


def _positions_payload(payload: PositionsRequest, config: GatewaySettings) -> dict[str, Any]:
    units = payload.units or config.default_units
    raw_temperature = config.default_temperature_c if payload.temperature is None else payload.temperature
    scale = "C" if payload.temperature is None else payload.temperature_scale

    try:
        temperature_c = temperature_to_celsius(raw_temperature, scale)
        context = build_context(
            temperature_c=temperature_c,
            units=units,
            bore_diameter=payload.bore_diameter,
            wall_thickness=payload.wall_thickness,
            embouchure_diameter=payload.embouchure_diameter,
            end_frequency=payload.end_frequency,
        )
    except AcousticError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc

    result = compute_positions(context, [hole.to_spec() for hole in payload.holes])
    if result.error is not None:
        logger.info("Rejected calculation: %s", result.error)
        raise HTTPException(status_code=422, detail=result.error.to_dict())

    positions = result.unwrap()
    return {
        "units": units,
        "temperature_c": temperature_c,
        "speed_of_sound": context.speed_of_sound,
        "context": context.to_dict(),
        "positions": positions.to_dict(),
        "physically_ordered": positions.is_physically_ordered(),
    }


def _preset_payload(key: str) -> dict[str, Any]:
    try:
        base: int | str = int(key) if key.strip().lstrip("-").isdigit() else key
        preset = major_scale_preset(base)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return preset.to_dict()


def _speed_of_sound_payload(
    temperature: float,
    scale: Literal["C", "F"],
    units: Literal["cm", "inches"],
) -> dict[str, Any]:
    try:
        temperature_c = temperature_to_celsius(temperature, scale)
        speed = speed_of_sound(temperature_c, units)
    except AcousticError as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    return {"temperature_c": temperature_c, "units": units, "speed_of_sound": speed}


def _convert_units_payload(payload: ConvertUnitsRequest) -> dict[str, Any]:
    digits = DISPLAY_DIGITS[payload.to_units] if payload.round_for_display else None

    def convert(value: float) -> float:
        converted = convert_length(value, payload.from_units, payload.to_units)
        return round(converted, digits) if digits is not None else converted

    return {
        "units": payload.to_units,
        "bore_diameter": convert(payload.bore_diameter),
        "wall_thickness": convert(payload.wall_thickness),
        "embouchure_diameter": convert(payload.embouchure_diameter),
        "hole_diameters": [convert(value) for value in payload.hole_diameters],
    }


setup_logging(settings.log_level)
app = FastAPI(title="Flute Hole Calculator Gateway", version="0.1.0")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/positions")
async def calculate_positions(payload: PositionsRequest) -> dict[str, Any]:
    return _positions_payload(payload, settings)


@app.get("/presets/{key}")
async def fetch_preset(key: str) -> dict[str, Any]:
    """Return the major-scale preset for a MIDI note number or note name."""

    return _preset_payload(key)


@app.get("/speed-of-sound")
async def fetch_speed_of_sound(
    temperature: float | None = None,
    scale: Literal["C", "F"] = "C",
    units: Literal["cm", "inches"] | None = None,
) -> dict[str, Any]:
    if temperature is None:
        return _speed_of_sound_payload(settings.default_temperature_c, "C", units or settings.default_units)
    return _speed_of_sound_payload(temperature, scale, units or settings.default_units)


@app.post("/convert-units")
async def convert_units(payload: ConvertUnitsRequest) -> dict[str, Any]:
    return _convert_units_payload(payload)


@app.get("/schemas/solvers")
async def list_solver_schemas() -> dict[str, Any]:
    return {"solvers": solver_schema_catalog()}


@app.get("/schemas/solvers/{name}")
async def fetch_solver_schema(name: str) -> dict[str, Any]:
    """Return the JSON schemas for a single endpoint family."""

    catalog = solver_schema_catalog()
    key = name.lower()
    entry = catalog.get(key)
    if entry is None:
        raise HTTPException(status_code=404, detail="Schema family not found")
    return {"name": key, **entry}


__all__ = [
    "app",
    "HolePayload",
    "PositionsRequest",
    "ConvertUnitsRequest",
    "solver_schema_catalog",
]
