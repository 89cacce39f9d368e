"""JSON schema helpers describing the calculation request/response contracts.

The documents follow JSON Schema 2020-12 so the gateway, scripts and any
front-end can share one description of the payloads.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import MISSING, fields, is_dataclass
from types import UnionType
from typing import Any, Union, get_args, get_origin, get_type_hints

from .environment import UNIT_SCALE
from .geometry import HOLE_COUNT, AcousticContext, EmbouchureResult, Positions, ToneHoleResult, ToneHoleSpec
from .presets import FrequencyPreset

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def dataclass_schema(
    cls: type[Any],
    *,
    field_overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a JSON schema describing the given dataclass."""

    if not is_dataclass(cls):  # pragma: no cover - defensive guard
        raise TypeError(f"{cls!r} is not a dataclass")

    overrides = field_overrides or _DATACLASS_OVERRIDES.get(cls)
    type_hints = get_type_hints(cls)

    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []
    for field in fields(cls):
        properties[field.name] = _schema_for_type(type_hints.get(field.name, field.type))
        if field.default is MISSING and field.default_factory is MISSING:
            required.append(field.name)

    if overrides:
        for name, override in overrides.items():
            if name in properties:
                properties[name].update(override)

    return {
        "title": cls.__name__,
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": required,
    }


def positions_request_schema() -> dict[str, Any]:
    """Return the schema of a position calculation request."""

    hole_schema = dataclass_schema(ToneHoleSpec)
    return {
        "$schema": SCHEMA_DRAFT,
        "title": "FlutePositionsRequest",
        "type": "object",
        "additionalProperties": False,
        "required": [
            "bore_diameter",
            "wall_thickness",
            "embouchure_diameter",
            "end_frequency",
            "holes",
        ],
        "properties": {
            "units": {
                "type": "string",
                "enum": sorted(UNIT_SCALE),
                "description": "Length unit used by every diameter and result.",
            },
            "temperature": {
                "type": "number",
                "description": "Ambient air temperature.",
            },
            "temperature_scale": {"type": "string", "enum": ["C", "F"]},
            "bore_diameter": _positive_number_schema("Bore diameter"),
            "wall_thickness": {"type": "number", "minimum": 0.0, "title": "Wall thickness"},
            "embouchure_diameter": _positive_number_schema("Embouchure diameter"),
            "end_frequency": _positive_number_schema(
                "End frequency (Hz)",
                description="Fundamental sounded with every hole closed.",
            ),
            "holes": {
                "type": "array",
                "items": hole_schema,
                "minItems": HOLE_COUNT,
                "maxItems": HOLE_COUNT,
                "description": "Tone holes ordered from the lowest pitch upwards.",
            },
        },
    }


def positions_response_schema() -> dict[str, Any]:
    """Return the schema of a successful position calculation."""

    return {
        "$schema": SCHEMA_DRAFT,
        "title": "FlutePositionsResponse",
        "type": "object",
        "additionalProperties": False,
        "required": [
            "units",
            "speed_of_sound",
            "positions",
            "physically_ordered",
        ],
        "properties": {
            "units": {"type": "string", "enum": sorted(UNIT_SCALE)},
            "temperature_c": {
                "type": "number",
                "description": "Ambient temperature (Celsius) used for the speed of sound.",
            },
            "speed_of_sound": _positive_number_schema("Speed of sound (units/s)"),
            "context": dataclass_schema(AcousticContext),
            "positions": _positions_schema(),
            "physically_ordered": {
                "type": "boolean",
                "description": "False when holes are not strictly ordered from the open end.",
            },
        },
    }


def preset_response_schema() -> dict[str, Any]:
    schema = dataclass_schema(FrequencyPreset)
    schema["$schema"] = SCHEMA_DRAFT
    schema["properties"]["hole_frequencies"].update({"minItems": HOLE_COUNT, "maxItems": HOLE_COUNT})
    return schema


def positions_schema() -> dict[str, dict[str, Any]]:
    return {
        "request": positions_request_schema(),
        "response": positions_response_schema(),
    }


def solver_json_schemas() -> dict[str, dict[str, dict[str, Any]]]:
    """Return the schema catalog keyed by endpoint family."""

    return {
        "positions": positions_schema(),
        "preset": {"response": preset_response_schema()},
    }


def _positions_schema() -> dict[str, Any]:
    schema = dataclass_schema(Positions)
    schema["properties"]["holes"].update({"minItems": HOLE_COUNT, "maxItems": HOLE_COUNT})
    schema["properties"]["embouchure_physical_position"] = {
        "type": "number",
        "description": "Distance of the embouchure centre from the open end.",
    }
    schema["properties"]["hole_physical_positions"] = {
        "type": "array",
        "items": {"type": "number"},
        "minItems": HOLE_COUNT,
        "maxItems": HOLE_COUNT,
        "description": "Hole distances from the open end, lowest hole first.",
    }
    schema["required"] = sorted(schema["properties"])
    return schema


def _schema_for_type(tp: Any) -> dict[str, Any]:
    origin = get_origin(tp)

    if origin is None:
        if tp is float:
            return {"type": "number"}
        if tp is int:
            return {"type": "integer"}
        if tp is str:
            return {"type": "string"}
        if tp is bool:
            return {"type": "boolean"}
        if tp is type(None):
            return {"type": "null"}
        if isinstance(tp, type) and is_dataclass(tp):
            return dataclass_schema(tp)
        return {}

    if origin in (list, Sequence, Iterable):
        args = get_args(tp)
        return {"type": "array", "items": _schema_for_type(args[0]) if args else {}}

    if origin is tuple:
        args = get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return {"type": "array", "items": _schema_for_type(args[0]) or {}}
        return {
            "type": "array",
            "prefixItems": [_schema_for_type(arg) or {} for arg in args],
            "items": False,
        }

    if origin is Union or origin is UnionType:
        options = [opt for opt in (_schema_for_type(arg) for arg in get_args(tp)) if opt]
        if not options:
            return {}
        if len(options) == 1:
            return options[0]
        return {"anyOf": options}

    return {}


def _positive_number_schema(title: str | None = None, *, description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "number", "exclusiveMinimum": 0.0}
    if title:
        schema["title"] = title
    if description:
        schema["description"] = description
    return schema


_CONTEXT_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "speed_of_sound": {"exclusiveMinimum": 0.0},
    "bore_diameter": {"exclusiveMinimum": 0.0},
    "wall_thickness": {"minimum": 0.0},
    "embouchure_diameter": {"exclusiveMinimum": 0.0},
    "end_frequency": {"exclusiveMinimum": 0.0},
}

_HOLE_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "frequency": {"exclusiveMinimum": 0.0},
    "diameter": {"exclusiveMinimum": 0.0},
}

_RESULT_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "index": {"minimum": 0, "maximum": HOLE_COUNT - 1},
}

_DATACLASS_OVERRIDES: dict[type[Any], dict[str, dict[str, Any]]] = {
    AcousticContext: _CONTEXT_FIELD_OVERRIDES,
    ToneHoleSpec: _HOLE_FIELD_OVERRIDES,
    ToneHoleResult: _RESULT_FIELD_OVERRIDES,
    EmbouchureResult: {},
}


__all__ = [
    "dataclass_schema",
    "positions_request_schema",
    "positions_response_schema",
    "preset_response_schema",
    "positions_schema",
    "solver_json_schemas",
]
