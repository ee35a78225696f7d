"""
Messages delivered to the session reducer.

Timer firings and player input are both expressed as messages so that a
single function owns every state transition.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Tick:
    """Advance the simulation by one step."""


@dataclass(frozen=True)
class SetDirection:
    """Request a new pending direction (UP, DOWN, LEFT or RIGHT)."""
    direction: str


@dataclass(frozen=True)
class Restart:
    """Reset every entity to its initial value."""
