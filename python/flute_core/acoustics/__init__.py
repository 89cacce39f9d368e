"""Acoustic correction and position-solver implementations."""

from .corrections import (
    closed_hole_correction,
    effective_hole_height,
    embouchure_correction,
    end_correction,
    first_hole_correction,
    lattice_hole_correction,
)
from .projection import physical_position, project_positions
from .solver import PositionSolver, compute_positions

__all__ = [
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
]
