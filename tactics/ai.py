from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from loguru import logger

from .grid import GridMap, GridPosition
from .model import Faction, Unit

@dataclass
class AIDecision:
    unit_id: str
    origin: GridPosition
    dest: Optional[GridPosition]  # None when the unit holds position
    target_id: Optional[str]

def find_nearest(unit: Unit, candidates: List[Unit]) -> Optional[Unit]:
    """Closest candidate by Manhattan distance. First seen wins ties."""
    best = None
    best_dist = None
    for c in candidates:
        d = unit.pos.distance_to(c.pos)
        if best_dist is None or d < best_dist:
            best, best_dist = c, d
    return best

class AIController:
    """Greedy pursuit: each enemy unit steps one tile toward the nearest player."""

    def __init__(self, grid: GridMap):
        self.grid = grid

    def _best_step(self, origin: GridPosition, goal: GridPosition,
                   blocked: Set[GridPosition]) -> Optional[GridPosition]:
        best_move = None
        best_dist = origin.distance_to(goal)
        for p in origin.adjacent():
            if not self.grid.is_in_bounds(p) or p in blocked:
                continue
            d = p.distance_to(goal)
            if d < best_dist:
                best_dist = d
                best_move = p
        return best_move

    def run(self, units: Dict[str, Unit]) -> List[AIDecision]:
        """Let every unacted enemy unit act once. Returns what each did."""
        # Positions before anyone moves; vacated tiles stay blocked this tick
        snapshot = {u.id: u.pos for u in units.values()}
        claimed: Set[GridPosition] = set()
        players = [u for u in units.values() if u.faction is Faction.PLAYER]
        decisions: List[AIDecision] = []

        for u in units.values():
            if not u.is_ai_controlled or u.status.has_acted:
                continue

            target = find_nearest(u, players)
            if target is None:
                u.status.has_acted = True
                decisions.append(AIDecision(u.id, u.pos, None, None))
                continue

            blocked = {p for uid, p in snapshot.items() if uid != u.id} | claimed
            dest = self._best_step(snapshot[u.id], target.pos, blocked)
            origin = u.pos
            if dest is not None:
                logger.debug(f"[AI] {u.id} moving from ({origin.x}, {origin.y}) to ({dest.x}, {dest.y}) "
                             f"- approaching {target.id} at ({target.pos.x}, {target.pos.y})")
                u.pos = dest
                u.status.has_moved = True
                claimed.add(dest)
            else:
                logger.debug(f"[AI] {u.id} at ({origin.x}, {origin.y}) has no improving move")
            u.status.has_acted = True
            decisions.append(AIDecision(u.id, origin, dest, target.id))

        return decisions
