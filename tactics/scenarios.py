from typing import Dict, List, Set

from .errors import DuplicateUnitError, InvalidPlacementError
from .grid import GridMap, GridPosition
from .model import Faction, State, Stats, Unit
from .rng import DRNG

# Default dormant stats per faction
FACTION_STATS = {
    Faction.PLAYER: (10, 4, 2),  # max_hp, attack, defense
    Faction.ENEMY: (8, 3, 1),
}

def make_unit(unit_id: str, faction: Faction, x: int, y: int) -> Unit:
    return Unit(id=unit_id, faction=faction, pos=GridPosition(x, y),
                stats=Stats.new(*FACTION_STATS[faction]))

def validate_roster(units: List[Unit], grid: GridMap) -> Dict[str, Unit]:
    """Check ids and placements and return the roster keyed by id."""
    roster: Dict[str, Unit] = {}
    taken: Set[GridPosition] = set()
    for u in units:
        if u.id in roster:
            raise DuplicateUnitError(f"Unit id {u.id} used twice", "DUPLICATE_UNIT", {"unit_id": u.id})
        if not grid.is_in_bounds(u.pos):
            raise InvalidPlacementError(f"Unit {u.id} placed outside the grid", "OUT_OF_BOUNDS",
                                        {"unit_id": u.id, "pos": u.pos.as_list()})
        if u.pos in taken:
            raise InvalidPlacementError(f"Unit {u.id} placed on an occupied tile", "TILE_OCCUPIED",
                                        {"unit_id": u.id, "pos": u.pos.as_list()})
        taken.add(u.pos)
        roster[u.id] = u
    return roster

def make_state(units: List[Unit], grid: GridMap, battle_id: str = "local") -> State:
    return State(ts_ms=0, units=validate_roster(units, grid), battle_id=battle_id)

def default_state(grid: GridMap) -> State:
    """Two player units bottom-left, two enemy units top-right."""
    units = [
        make_unit("P1", Faction.PLAYER, 2, 2),
        make_unit("P2", Faction.PLAYER, 3, 2),
        make_unit("E1", Faction.ENEMY, 6, 7),
        make_unit("E2", Faction.ENEMY, 7, 7),
    ]
    return make_state(units, grid)

def skirmish_state(seed: int, grid: GridMap, players: int = 2, enemies: int = 2) -> State:
    """Random layout on distinct tiles; the same seed gives the same layout."""
    cells = list(grid.positions())
    if players + enemies > len(cells):
        raise InvalidPlacementError("More units than tiles", "GRID_FULL",
                                    {"units": players + enemies, "tiles": len(cells)})
    rng = DRNG(seed)
    picks = rng.sample(cells, players + enemies)
    units = [make_unit(f"P{i + 1}", Faction.PLAYER, p.x, p.y) for i, p in enumerate(picks[:players])]
    units += [make_unit(f"E{i + 1}", Faction.ENEMY, p.x, p.y) for i, p in enumerate(picks[players:])]
    return make_state(units, grid)
