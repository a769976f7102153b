from typing import Literal, Optional
from pydantic import BaseModel, Field

class OrderIn(BaseModel):
    """Input event schema. Grid cells by default, or a world point to convert."""
    kind: Literal["click", "hover"]
    x: Optional[float] = None
    y: Optional[float] = None
    space: Literal["grid", "world"] = "grid"

class StartRequest(BaseModel):
    """Battle start request schema."""
    scenario: Literal["default", "skirmish"] = "default"
    seed: int = 42
    players: int = Field(default=2, ge=1)
    enemies: int = Field(default=2, ge=0)
    autorun: Optional[bool] = None  # None uses the configured default

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]

class TurnResponse(BaseModel):
    current_turn: int
    active_faction: str
    phase: str
