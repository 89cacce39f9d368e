"""Equal-tempered frequency presets for the end note and six finger holes."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .geometry import HOLE_COUNT, ToneHoleSpec

A4_MIDI_NOTE = 69
A4_FREQUENCY_HZ = 440.0
MAJOR_SCALE_INTERVALS = (0, 2, 4, 5, 7, 9, 11)
MIDI_NOTE_RANGE = (0, 127)

_PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_NOTE_PATTERN = re.compile(r"^\s*([A-Ga-g])([#b]?)(-?\d+)\s*$")


def midi_note_to_frequency(note: float) -> float:
    """Return the equal-tempered frequency of a MIDI note (A4 = 69 = 440 Hz)."""

    return A4_FREQUENCY_HZ * 2.0 ** ((note - A4_MIDI_NOTE) / 12.0)


def note_name_to_midi(name: str) -> int:
    """Parse scientific pitch notation such as ``"D4"``, ``"F#5"`` or ``"Bb3"``."""

    match = _NOTE_PATTERN.match(name)
    if match is None:
        raise ValueError(f"Unrecognised note name: {name!r}")
    letter, accidental, octave = match.groups()
    semitone = _PITCH_CLASSES[letter.upper()]
    if accidental == "#":
        semitone += 1
    elif accidental == "b":
        semitone -= 1
    return 12 * (int(octave) + 1) + semitone


@dataclass(frozen=True, slots=True)
class FrequencyPreset:
    """End and hole frequencies derived from a base note and interval pattern."""

    base_note: int
    end_frequency: float
    hole_frequencies: tuple[float, ...]

    def tone_holes(self, diameters: Sequence[float]) -> tuple[ToneHoleSpec, ...]:
        """Pair the preset frequencies with hole ``diameters`` (lowest hole first)."""

        if len(diameters) != len(self.hole_frequencies):
            raise ValueError(
                f"expected {len(self.hole_frequencies)} diameters, got {len(diameters)}"
            )
        return tuple(
            ToneHoleSpec(frequency=frequency, diameter=float(diameter))
            for frequency, diameter in zip(self.hole_frequencies, diameters, strict=True)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_note": self.base_note,
            "end_frequency": self.end_frequency,
            "hole_frequencies": list(self.hole_frequencies),
        }


def scale_preset(base_note: int, intervals: Sequence[int]) -> FrequencyPreset:
    """Build a preset where ``intervals[0]`` is the end note and the rest are the holes."""

    if len(intervals) != HOLE_COUNT + 1:
        raise ValueError(f"expected {HOLE_COUNT + 1} intervals, got {len(intervals)}")
    end_frequency = midi_note_to_frequency(base_note + intervals[0])
    holes = tuple(midi_note_to_frequency(base_note + step) for step in intervals[1:])
    return FrequencyPreset(base_note=base_note, end_frequency=end_frequency, hole_frequencies=holes)


def major_scale_preset(base_note: int | str) -> FrequencyPreset:
    """Return the major-scale preset whose lowest note is ``base_note``."""

    note = note_name_to_midi(base_note) if isinstance(base_note, str) else int(base_note)
    lowest, highest = MIDI_NOTE_RANGE
    if not lowest <= note <= highest:
        raise ValueError(f"base note {base_note!r} is outside the MIDI range {lowest}..{highest}")
    return scale_preset(note, MAJOR_SCALE_INTERVALS)


__all__ = [
    "MAJOR_SCALE_INTERVALS",
    "MIDI_NOTE_RANGE",
    "FrequencyPreset",
    "midi_note_to_frequency",
    "note_name_to_midi",
    "scale_preset",
    "major_scale_preset",
]
