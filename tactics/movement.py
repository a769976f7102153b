from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from loguru import logger

from .grid import GridMap, GridPosition
from .model import Unit
from .selection import SelectionState

class MoveRejection(Enum):
    """Why a move did not happen. Expected outcomes, not faults."""
    NO_SELECTION = "no_selection"
    NOT_SELECTED = "not_selected"
    ALREADY_ACTED = "already_acted"
    INVALID_TARGET = "invalid_target"  # Not one of the four neighbours
    OUT_OF_BOUNDS = "out_of_bounds"
    TILE_OCCUPIED = "tile_occupied"

@dataclass
class MoveResult:
    unit_id: Optional[str]
    origin: Optional[GridPosition]
    target: GridPosition
    rejection: Optional[MoveRejection] = None

    @property
    def ok(self) -> bool:
        return self.rejection is None

def is_occupied(pos: GridPosition, units: Dict[str, Unit], exclude: Optional[str] = None) -> bool:
    """True if any unit other than `exclude` stands on pos."""
    return any(u.pos == pos for u in units.values() if u.id != exclude)

class MovementValidator:
    """Adjacency, bounds and collision checks for player moves."""

    def __init__(self, grid: GridMap):
        self.grid = grid

    def check(self, unit: Optional[Unit], target: GridPosition,
              selection: SelectionState, units: Dict[str, Unit]) -> Optional[MoveRejection]:
        """Return the first failed precondition, or None if the move is legal."""
        if selection.selected_unit is None or unit is None:
            return MoveRejection.NO_SELECTION
        if not selection.is_selected(unit):
            return MoveRejection.NOT_SELECTED
        if unit.status.has_acted:
            return MoveRejection.ALREADY_ACTED
        if not unit.pos.is_adjacent(target):
            return MoveRejection.INVALID_TARGET
        if not self.grid.is_in_bounds(target):
            return MoveRejection.OUT_OF_BOUNDS
        if is_occupied(target, units, exclude=unit.id):
            return MoveRejection.TILE_OCCUPIED
        return None

    def try_move(self, unit: Optional[Unit], target: GridPosition,
                 selection: SelectionState, units: Dict[str, Unit]) -> MoveResult:
        """Move the selected unit one tile, or leave everything untouched."""
        reason = self.check(unit, target, selection, units)
        result = MoveResult(unit_id=unit.id if unit else None,
                            origin=unit.pos if unit else None,
                            target=target, rejection=reason)
        if reason is not None:
            logger.debug(f"[Movement] Rejected move of {result.unit_id} to ({target.x}, {target.y}): {reason.value}")
            return result

        unit.pos = target
        unit.status.has_acted = True
        unit.status.has_moved = True
        logger.debug(f"[Movement] Unit {unit.id} moved to ({target.x}, {target.y})")
        return result

    def valid_moves(self, unit: Unit, units: Dict[str, Unit]) -> List[GridPosition]:
        """Dry run: neighbours the unit could step onto right now."""
        return [
            p for p in unit.pos.adjacent()
            if self.grid.is_in_bounds(p) and not is_occupied(p, units, exclude=unit.id)
        ]
