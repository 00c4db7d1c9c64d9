"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The domain layer produces them, the service layer converts them into API responses.
(Decouples the domain objects from the information needed to send across boundaries)
"""

from dataclasses import dataclass

from src.core.shared_types import Side


@dataclass(frozen=True)
class AppliedMoveResult:
    """Outcome of one successfully applied move."""

    row: int
    col: int
    side: Side
    won: bool
    draw: bool
    gravity_flipped: bool
