from dataclasses import dataclass
from typing import Dict, Optional

from loguru import logger

from .grid import GridPosition
from .model import Unit

@dataclass
class SelectionState:
    """Currently selected unit (by id, never by reference) and hovered tile."""
    selected_unit: Optional[str] = None
    hovered_tile: Optional[GridPosition] = None

    def select_unit(self, unit_id: str) -> None:
        self.selected_unit = unit_id

    def clear_selection(self) -> None:
        self.selected_unit = None

    def hover(self, pos: Optional[GridPosition]) -> None:
        self.hovered_tile = pos

    def is_selected(self, unit: Unit) -> bool:
        return self.selected_unit is not None and self.selected_unit == unit.id

    def resolve(self, units: Dict[str, Unit]) -> Optional[Unit]:
        """Re-validate the selection against the live roster.

        Drops the selection when the unit is gone or can no longer be
        selected. Whether it has already acted is left to the movement
        validator, which rejects it with ALREADY_ACTED.
        """
        if self.selected_unit is None:
            return None
        u = units.get(self.selected_unit)
        if u is None or not u.is_selectable:
            logger.debug(f"[Selection] Dropping stale selection {self.selected_unit}")
            self.clear_selection()
            return None
        return u

    def select(self, units: Dict[str, Unit], click_pos: GridPosition) -> Optional[Unit]:
        """Handle a primary click. Returns the newly selected unit, if any.

        Player unit: replaces the current selection. Enemy unit: ignored.
        Empty tile: the current selection is kept, so the same click can be
        used as a movement target.
        """
        clicked = None
        for u in units.values():
            if u.pos == click_pos:
                clicked = u
                break

        if clicked is None:
            return None

        if not clicked.is_selectable:
            logger.debug(f"[Selection] Clicked enemy unit {clicked.id} at ({click_pos.x}, {click_pos.y}) - cannot select")
            return None

        self.select_unit(clicked.id)
        logger.debug(f"[Selection] Selected unit {clicked.id} at ({click_pos.x}, {click_pos.y})")
        return clicked
