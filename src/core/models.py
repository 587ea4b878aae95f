"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the db layer (lower) and the rules engine (domain) convert to/from the model defined here,
so neither needs to know how the other one represents a game.
"""

from dataclasses import dataclass, field
from typing import Any

# Type aliases to make GameModel easier to read
CardId = str
DominoRecord = dict[str, Any]
ChainLinkRecord = dict[str, str]


@dataclass
class GameModel:
    """Serializable snapshot of a game. Undo history is never part of it."""

    tableau: list[list[CardId]]
    pairs: list[list[CardId]] = field(default_factory=list)
    dominos: list[DominoRecord] = field(default_factory=list)
    chains: list[list[ChainLinkRecord]] = field(default_factory=list)
    move_count: int = 0
    status: str = "in progress"
