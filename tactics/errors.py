"""Exceptions for setup and programming errors.

Invalid moves are not errors: they come back as ``MoveRejection`` values
from the movement validator and never raise.
"""
from typing import Optional


class TacticsError(Exception):
    """Base exception for all simulation errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def __str__(self):
        base_msg = self.message
        if self.error_code:
            base_msg = f"[{self.error_code}] {base_msg}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg = f"{base_msg} (Context: {context_str})"
        return base_msg


class RosterError(TacticsError):
    """Initial roster cannot be placed on the grid."""
    pass


class InvalidPlacementError(RosterError):
    """Unit placed out of bounds or on an occupied tile."""
    pass


class DuplicateUnitError(RosterError):
    """Two units share an id."""
    pass


class UnknownOrderError(TacticsError):
    """Order kind the engine does not understand."""
    pass
