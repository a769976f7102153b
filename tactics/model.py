from dataclasses import dataclass, field
from typing import Dict, Literal, Optional
from enum import Enum

from .grid import GridPosition

class Faction(Enum):
    """Side a unit fights for, fixed at creation"""
    PLAYER = "player"  # Selectable, moved by input
    ENEMY = "enemy"    # Moved by the AI controller

class Phase(Enum):
    """Turn state: whose turn it is"""
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"

    @property
    def faction(self) -> Faction:
        return Faction.PLAYER if self is Phase.PLAYER_TURN else Faction.ENEMY

@dataclass
class TurnStatus:
    has_acted: bool = False
    has_moved: bool = False

    def reset(self) -> None:
        self.has_acted = False
        self.has_moved = False

@dataclass
class Stats:
    """Combat stats. Carried on units but not used by any system yet."""
    max_hp: int
    current_hp: int
    attack: int
    defense: int

    @classmethod
    def new(cls, max_hp: int, attack: int, defense: int) -> "Stats":
        return cls(max_hp=max_hp, current_hp=max_hp, attack=attack, defense=defense)

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0

@dataclass
class Unit:
    id: str
    faction: Faction
    pos: GridPosition
    status: TurnStatus = field(default_factory=TurnStatus)
    stats: Optional[Stats] = None

    @property
    def is_selectable(self) -> bool:
        return self.faction is Faction.PLAYER

    @property
    def is_ai_controlled(self) -> bool:
        return self.faction is Faction.ENEMY

@dataclass
class Order:
    kind: Literal["click", "hover"]
    pos: Optional[GridPosition] = None  # Grid cell; None clears the hover

@dataclass
class Event:
    kind: str
    ts_ms: int
    data: Dict

@dataclass
class State:
    ts_ms: int
    units: Dict[str, Unit] = field(default_factory=dict)  # Insertion order is roster order
    battle_id: str = "local"

