#!/usr/bin/env python3
"""Generate golden-file JSON snapshots of solved hole positions for reference flutes.

With ``--schemas`` the request/response JSON schemas the snapshots conform to
are written alongside them under ``schemas/``.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

SCRIPT_PATH = Path(__file__).resolve()
PYTHON_ROOT = SCRIPT_PATH.parent.parent
PROJECT_ROOT = PYTHON_ROOT.parent

for candidate in (PROJECT_ROOT, PYTHON_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from flute_core import (  # noqa: E402 - added after sys.path tweaks for local execution
    build_context,
    compute_positions,
    convert_length,
    major_scale_preset,
    solver_json_schemas,
)

# Reference flute in inches: 0.824" bore, 0.113" wall, 0.5" embouchure.
REFERENCE_GEOMETRY = {
    "bore_diameter": 0.824,
    "wall_thickness": 0.113,
    "embouchure_diameter": 0.500,
}
REFERENCE_HOLE_DIAMETERS = [0.250, 0.4375, 0.3125, 0.3125, 0.375, 0.375]
DEFAULT_KEYS = ["D4", "C4", "G4"]


def _scenario(key: int | str, units: str, temperature_c: float, wall_thickness: float | None) -> dict[str, Any]:
    preset = major_scale_preset(key)
    geometry = dict(REFERENCE_GEOMETRY)
    if wall_thickness is not None:
        geometry["wall_thickness"] = wall_thickness
    geometry = {name: convert_length(value, "inches", units) for name, value in geometry.items()}
    diameters = [convert_length(value, "inches", units) for value in REFERENCE_HOLE_DIAMETERS]

    context = build_context(
        temperature_c=temperature_c,
        units=units,  # type: ignore[arg-type]
        end_frequency=preset.end_frequency,
        **geometry,
    )
    result = compute_positions(context, preset.tone_holes(diameters))

    metadata: dict[str, Any] = {
        "key": key,
        "units": units,
        "temperature_c": temperature_c,
        "preset": preset.to_dict(),
        "context": context.to_dict(),
        "hole_diameters": diameters,
    }
    if result.error is not None:
        return {"metadata": metadata, "error": result.error.to_dict()}
    positions = result.unwrap()
    return {
        "metadata": metadata,
        "positions": positions.to_dict(),
        "physically_ordered": positions.is_physically_ordered(),
    }


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def _write_schemas(output_dir: Path) -> list[str]:
    """Write one file per schema family and direction; return their names relative to *output_dir*."""

    schema_dir = output_dir / "schemas"
    schema_dir.mkdir(parents=True, exist_ok=True)
    written: list[str] = []
    for family, documents in solver_json_schemas().items():
        for direction, schema in documents.items():
            path = schema_dir / f"{family}-{direction}.schema.json"
            _write_json(path, schema)
            written.append(path.relative_to(output_dir).as_posix())
    return written


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("position-snapshots"),
        help="Directory where JSON artefacts will be written.",
    )
    parser.add_argument(
        "--keys",
        nargs="+",
        default=DEFAULT_KEYS,
        help="Base notes (names or MIDI numbers) of the major-scale presets to solve.",
    )
    parser.add_argument(
        "--units",
        choices=["cm", "inches"],
        default="inches",
        help="Length unit of the generated snapshots.",
    )
    parser.add_argument(
        "--temperature",
        type=float,
        default=20.0,
        help="Ambient temperature in degrees Celsius (default: 20).",
    )
    parser.add_argument(
        "--wall-thickness",
        type=float,
        default=None,
        help="Override the reference wall thickness (inches).",
    )
    parser.add_argument(
        "--schemas",
        action="store_true",
        help="Also write the positions/preset JSON schemas under <output>/schemas.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    output_dir = args.output
    output_dir.mkdir(parents=True, exist_ok=True)

    manifest: dict[str, Any] = {"output_dir": str(output_dir.resolve()), "snapshots": {}}
    for raw_key in args.keys:
        key = int(raw_key) if raw_key.isdigit() else raw_key
        payload = _scenario(key, args.units, args.temperature, args.wall_thickness)
        filename = f"positions_{raw_key}_{args.units}.json"
        _write_json(output_dir / filename, payload)
        manifest["snapshots"][filename] = "error" if "error" in payload else "ok"

    if args.schemas:
        manifest["schemas"] = _write_schemas(output_dir)

    _write_json(output_dir / "manifest.json", manifest)
    print(f"Generated {len(args.keys)} position snapshots in {output_dir.resolve()}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
