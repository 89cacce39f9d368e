"""Environment-driven settings for the gateway service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from flute_core.environment import UNIT_SCALE, LengthUnit

DEFAULT_UNITS_ENV = "FLUTE_DEFAULT_UNITS"
DEFAULT_TEMPERATURE_ENV = "FLUTE_DEFAULT_TEMPERATURE_C"
LOG_LEVEL_ENV = "FLUTE_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class GatewaySettings:
    default_units: LengthUnit = "inches"
    default_temperature_c: float = 20.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GatewaySettings:
        env = os.environ if environ is None else environ
        units = env.get(DEFAULT_UNITS_ENV, "inches").strip().lower()
        if units not in UNIT_SCALE:
            raise ValueError(f"{DEFAULT_UNITS_ENV} must be one of {sorted(UNIT_SCALE)}, got {units!r}")
        raw_temperature = env.get(DEFAULT_TEMPERATURE_ENV, "20")
        try:
            temperature = float(raw_temperature)
        except ValueError:
            raise ValueError(f"{DEFAULT_TEMPERATURE_ENV} must be a number, got {raw_temperature!r}") from None
        return cls(
            default_units=units,  # type: ignore[arg-type]
            default_temperature_c=temperature,
            log_level=env.get(LOG_LEVEL_ENV, "INFO").strip().upper(),
        )


__all__ = ["GatewaySettings"]
