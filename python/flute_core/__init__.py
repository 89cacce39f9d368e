"""Public interface for the flute hole placement core."""

from .acoustics import (
    PositionSolver,
    closed_hole_correction,
    compute_positions,
    effective_hole_height,
    embouchure_correction,
    end_correction,
    first_hole_correction,
    lattice_hole_correction,
    physical_position,
    project_positions,
)
from .environment import (
    CM_TO_INCH,
    build_context,
    convert_context_units,
    convert_holes_units,
    convert_length,
    fahrenheit_to_celsius,
    speed_of_sound,
    speed_of_sound_mps,
    temperature_to_celsius,
)
from .errors import (
    AcousticError,
    DegenerateNearZero,
    InvalidFrequency,
    InvalidGeometry,
    NoRealSolution,
)
from .geometry import (
    HOLE_COUNT,
    AcousticContext,
    EmbouchureResult,
    Positions,
    ToneHoleResult,
    ToneHoleSpec,
)
from .presets import (
    MAJOR_SCALE_INTERVALS,
    FrequencyPreset,
    major_scale_preset,
    midi_note_to_frequency,
    note_name_to_midi,
)
from .result import Result
from .serialization import (
    dataclass_schema,
    positions_request_schema,
    positions_response_schema,
    positions_schema,
    preset_response_schema,
    solver_json_schemas,
)

__all__ = [
    "HOLE_COUNT",
    "AcousticContext",
    "ToneHoleSpec",
    "ToneHoleResult",
    "EmbouchureResult",
    "Positions",
    "AcousticError",
    "InvalidGeometry",
    "InvalidFrequency",
    "NoRealSolution",
    "DegenerateNearZero",
    "Result",
    "effective_hole_height",
    "closed_hole_correction",
    "end_correction",
    "embouchure_correction",
    "first_hole_correction",
    "lattice_hole_correction",
    "physical_position",
    "project_positions",
    "PositionSolver",
    "compute_positions",
    "CM_TO_INCH",
    "speed_of_sound",
    "speed_of_sound_mps",
    "fahrenheit_to_celsius",
    "temperature_to_celsius",
    "convert_length",
    "convert_context_units",
    "convert_holes_units",
    "build_context",
    "MAJOR_SCALE_INTERVALS",
    "FrequencyPreset",
    "midi_note_to_frequency",
    "note_name_to_midi",
    "major_scale_preset",
    "dataclass_schema",
    "positions_request_schema",
    "positions_response_schema",
    "positions_schema",
    "preset_response_schema",
    "solver_json_schemas",
]
