"""Map acoustic positions onto distances measured from the open end."""

from __future__ import annotations

from collections.abc import Sequence

from ..geometry import EmbouchureResult, Positions, ToneHoleResult
from ._utils import require_finite


def physical_position(acoustic_end_x: float, acoustic_position: float) -> float:
    """Return the distance from the open end (which sits at ``acoustic_end_x``)."""

    return acoustic_end_x - acoustic_position


def project_positions(
    acoustic_end_x: float,
    hole_positions: Sequence[float],
    embouchure_position: float,
) -> Positions:
    """Build the immutable :class:`Positions` snapshot for one solve."""

    require_finite(acoustic_end_x, stage="acoustic_end")
    holes = tuple(
        ToneHoleResult(
            index=index,
            acoustic_position=position,
            physical_position=physical_position(acoustic_end_x, position),
        )
        for index, position in enumerate(hole_positions)
    )
    embouchure = EmbouchureResult(
        acoustic_position=embouchure_position,
        physical_position=physical_position(acoustic_end_x, embouchure_position),
    )
    return Positions(acoustic_end_x=acoustic_end_x, embouchure=embouchure, holes=holes)


__all__ = ["physical_position", "project_positions"]
