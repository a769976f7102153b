from typing import Iterable, List, Optional

from loguru import logger

from .model import Faction, Phase, Unit

class PhaseTimer:
    """One-shot timer advanced by accumulated delta time."""

    def __init__(self, duration_ms: int):
        self.duration_ms = duration_ms
        self.elapsed_ms = 0

    def tick(self, dt_ms: int) -> None:
        self.elapsed_ms = min(self.duration_ms, self.elapsed_ms + max(0, dt_ms))

    def reset(self) -> None:
        self.elapsed_ms = 0

    @property
    def finished(self) -> bool:
        return self.elapsed_ms >= self.duration_ms

    @property
    def remaining_ms(self) -> int:
        return self.duration_ms - self.elapsed_ms

def all_acted(units: Iterable[Unit], faction: Faction) -> bool:
    """True when every unit of the faction has acted (vacuously true if none)."""
    return all(u.status.has_acted for u in units if u.faction is faction)

class TurnStateMachine:
    """PlayerTurn/EnemyTurn phases and their entry resets."""

    def __init__(self, enemy_turn_delay_ms: int):
        self.phase = Phase.PLAYER_TURN
        self.enemy_timer = PhaseTimer(enemy_turn_delay_ms)

    def check_turn_end(self, units: List[Unit], dt_ms: int) -> Optional[Phase]:
        """Return the phase to switch to, or None to stay.

        The enemy timer only advances while the enemy phase is active.
        """
        if self.phase is Phase.PLAYER_TURN:
            if all_acted(units, Faction.PLAYER):
                return Phase.ENEMY_TURN
            return None

        self.enemy_timer.tick(dt_ms)
        if self.enemy_timer.finished and all_acted(units, Faction.ENEMY):
            return Phase.PLAYER_TURN
        return None

    def enter(self, phase: Phase, units: List[Unit]) -> None:
        """Switch phase and reset turn status of the faction now moving."""
        self.phase = phase
        if phase is Phase.ENEMY_TURN:
            self.enemy_timer.reset()
        for u in units:
            if u.faction is phase.faction:
                u.status.reset()
        logger.info(f"[Turns] Entered {phase.value}")

class TurnManager:
    """Turn counter and active faction, mirrored from phase transitions."""

    def __init__(self):
        self.current_turn = 1
        self.active_faction = Faction.PLAYER

    def next_turn(self) -> None:
        if self.active_faction is Faction.PLAYER:
            self.active_faction = Faction.ENEMY
        else:
            self.current_turn += 1
            self.active_faction = Faction.PLAYER
