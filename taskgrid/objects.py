"""
Object vocabulary — the fixed set of things that live in the grid world.

Each object has:
- An identifier token used on the action and percept surfaces ("b", "t", ...)
- A kind: a *tool* the agent carries to act on something, or a *goal*
  object whose state change completes part of an episode
- The interaction it is the target of (paint, open, or none)
- The tools that interaction requires

The set is closed: every lookup goes through ObjectId, so an unknown token
is rejected at the edge instead of travelling through the engine as a
string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ObjectId(str, Enum):
    """Identifiers of every object in the world."""
    BRUSH = "b"
    COLOR = "cl"
    KEY = "k"
    CARD = "cd"
    TABLE = "t"
    CHAIR = "ch"
    DOOR = "d"

    @property
    def token(self) -> str:
        return self.value

    @staticmethod
    def parse(value) -> Optional["ObjectId"]:
        """Resolve a token (or an ObjectId) to an ObjectId, None if unknown."""
        if isinstance(value, ObjectId):
            return value
        try:
            return ObjectId(str(value))
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ObjectSpec:
    """Static description of one object."""

    object_id: ObjectId
    name: str
    is_tool: bool
    is_dynamic: bool  # re-placed each episode and nudged while on the ground
    interaction: Optional[str] = None  # "paint", "open" or None
    requires: Tuple[ObjectId, ...] = ()
    glyph: str = "?"  # single character used by WorldState.render

    def __repr__(self) -> str:
        return f"ObjectSpec({self.object_id.token}, {self.name})"


# ---------------------------------------------------------------------------
# Object registry
# ---------------------------------------------------------------------------

_BRUSH = ObjectSpec(ObjectId.BRUSH, "brush", is_tool=True, is_dynamic=False, glyph="B")
_COLOR = ObjectSpec(ObjectId.COLOR, "color", is_tool=True, is_dynamic=False, glyph="L")
_KEY = ObjectSpec(ObjectId.KEY, "key", is_tool=True, is_dynamic=False, glyph="K")
_CARD = ObjectSpec(ObjectId.CARD, "card", is_tool=True, is_dynamic=False, glyph="R")

_TABLE = ObjectSpec(ObjectId.TABLE, "table", is_tool=False, is_dynamic=True,
                    interaction="paint", requires=(ObjectId.BRUSH, ObjectId.COLOR),
                    glyph="T")
_CHAIR = ObjectSpec(ObjectId.CHAIR, "chair", is_tool=False, is_dynamic=True,
                    interaction="paint", requires=(ObjectId.BRUSH, ObjectId.COLOR),
                    glyph="H")
_DOOR = ObjectSpec(ObjectId.DOOR, "door", is_tool=False, is_dynamic=True,
                   interaction="open", requires=(ObjectId.KEY, ObjectId.CARD),
                   glyph="D")

OBJECT_REGISTRY: dict[ObjectId, ObjectSpec] = {
    spec.object_id: spec
    for spec in (_BRUSH, _COLOR, _KEY, _CARD, _TABLE, _CHAIR, _DOOR)
}

# Convenience groupings
TOOL_OBJECTS = [s.object_id for s in OBJECT_REGISTRY.values() if s.is_tool]
DYNAMIC_OBJECTS = [s.object_id for s in OBJECT_REGISTRY.values() if s.is_dynamic]
PAINTABLE_OBJECTS = [s.object_id for s in OBJECT_REGISTRY.values()
                     if s.interaction == "paint"]
OPENABLE_OBJECTS = [s.object_id for s in OBJECT_REGISTRY.values()
                    if s.interaction == "open"]
