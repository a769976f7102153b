from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from .ai import AIController
from .config import Settings, settings as default_settings
from .errors import UnknownOrderError
from .grid import GridMap, GridPosition
from .model import Event, Order, Phase, State
from .movement import MovementValidator
from .selection import SelectionState
from .turns import TurnManager, TurnStateMachine

@dataclass
class UnitView:
    id: str
    faction: str
    pos: List[int]
    selected: bool
    has_acted: bool
    has_moved: bool

@dataclass
class Snapshot:
    """Read-only view of one tick for the presentation layer."""
    ts_ms: int
    phase: str
    current_turn: int
    active_faction: str
    selected_unit: Optional[str]
    hovered_tile: Optional[List[int]]
    valid_moves: List[List[int]] = field(default_factory=list)
    units: Dict[str, UnitView] = field(default_factory=dict)

class Engine:
    """Deterministic turn-based simulation engine.

    One call to step() is one tick, run as a fixed pipeline:
    selection, player movement, AI movement, turn check, phase transition.
    """

    def __init__(self, initial_state: State, grid: Optional[GridMap] = None,
                 settings: Optional[Settings] = None):
        cfg = settings or default_settings
        self.state = initial_state
        self.grid = grid or GridMap.from_settings(cfg)
        if not self.grid.tiles:
            self.grid.build()
        self.selection = SelectionState()
        self.turns = TurnStateMachine(cfg.enemy_turn_delay_ms)
        self.turn_manager = TurnManager()
        self.validator = MovementValidator(self.grid)
        self.ai = AIController(self.grid)
        self._pending_orders: List[Order] = []

    @property
    def phase(self) -> Phase:
        return self.turns.phase

    def apply_orders(self, orders: List[Order]) -> None:
        """Queue orders to be applied on next step."""
        for o in orders:
            if o.kind not in ("click", "hover"):
                raise UnknownOrderError(f"Unknown order kind {o.kind!r}", "UNKNOWN_ORDER", {"kind": o.kind})
        self._pending_orders.extend(orders)

    def _click(self, pos: GridPosition) -> List[Event]:
        evts: List[Event] = []
        units = self.state.units

        picked = self.selection.select(units, pos)
        if picked is not None:
            evts.append(Event("UnitSelected", self.state.ts_ms,
                              {"unit_id": picked.id, "pos": picked.pos.as_list()}))

        # Player movement only during the player phase; the AI moves in its own
        if self.phase is not Phase.PLAYER_TURN:
            return evts

        unit = self.selection.resolve(units)
        if unit is None or unit.pos == pos:
            return evts
        result = self.validator.try_move(unit, pos, self.selection, units)
        if result.ok:
            evts.append(Event("UnitMoved", self.state.ts_ms,
                              {"unit_id": unit.id, "from": result.origin.as_list(),
                               "to": result.target.as_list(), "by": "player"}))
        return evts

    def _apply_orders_now(self) -> List[Event]:
        """Process queued orders in arrival order and return events."""
        evts: List[Event] = []
        for o in self._pending_orders:
            if o.kind == "hover":
                self.selection.hover(o.pos)
            elif o.kind == "click" and o.pos is not None:
                evts += self._click(o.pos)
        self._pending_orders.clear()
        return evts

    def _ai(self) -> List[Event]:
        """Run the enemy AI during the enemy phase."""
        evts: List[Event] = []
        if self.phase is not Phase.ENEMY_TURN:
            return evts
        for d in self.ai.run(self.state.units):
            if d.dest is not None:
                evts.append(Event("UnitMoved", self.state.ts_ms,
                                  {"unit_id": d.unit_id, "from": d.origin.as_list(),
                                   "to": d.dest.as_list(), "by": "ai", "target": d.target_id}))
            else:
                evts.append(Event("UnitHeld", self.state.ts_ms,
                                  {"unit_id": d.unit_id, "pos": d.origin.as_list(), "target": d.target_id}))
        return evts

    def _turn_check(self, dt_ms: int) -> List[Event]:
        """Switch phase once the active side is done, mirroring into the turn manager."""
        evts: List[Event] = []
        units = list(self.state.units.values())
        nxt = self.turns.check_turn_end(units, dt_ms)
        if nxt is None:
            return evts

        prev = self.phase
        self.turns.enter(nxt, units)
        self.turn_manager.next_turn()
        logger.info(f"[Engine] {prev.value} -> {nxt.value} (turn {self.turn_manager.current_turn})")
        evts.append(Event("PhaseChanged", self.state.ts_ms,
                          {"from": prev.value, "to": nxt.value,
                           "turn": self.turn_manager.current_turn}))
        if nxt is Phase.PLAYER_TURN:
            evts.append(Event("TurnStarted", self.state.ts_ms,
                              {"turn": self.turn_manager.current_turn}))
        return evts

    def step(self, dt_ms: int) -> List[Event]:
        """Advance simulation by dt_ms milliseconds."""
        evts: List[Event] = []
        self.selection.resolve(self.state.units)
        evts += self._apply_orders_now()
        evts += self._ai()
        evts += self._turn_check(dt_ms)
        self.state.ts_ms += dt_ms
        return evts

    def valid_moves(self) -> List[GridPosition]:
        """Tiles the selected unit may move to now, without changing anything."""
        if self.phase is not Phase.PLAYER_TURN:
            return []
        unit = self.selection.resolve(self.state.units)
        if unit is None or unit.status.has_acted:
            return []
        return self.validator.valid_moves(unit, self.state.units)

    def snapshot(self) -> Snapshot:
        """Return current state as a read-only view."""
        moves = self.valid_moves()
        hovered = self.selection.hovered_tile
        return Snapshot(
            ts_ms=self.state.ts_ms,
            phase=self.phase.value,
            current_turn=self.turn_manager.current_turn,
            active_faction=self.turn_manager.active_faction.value,
            selected_unit=self.selection.selected_unit,
            hovered_tile=hovered.as_list() if hovered else None,
            valid_moves=[p.as_list() for p in moves],
            units={
                uid: UnitView(id=u.id, faction=u.faction.value, pos=u.pos.as_list(),
                              selected=self.selection.is_selected(u),
                              has_acted=u.status.has_acted, has_moved=u.status.has_moved)
                for uid, u in self.state.units.items()
            },
        )
