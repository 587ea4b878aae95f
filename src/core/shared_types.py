"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    WON = "won"


class ActionType(StrEnum):
    """Every transition the UI layer can ask for (the reducer's vocabulary)."""

    NEW_GAME = "new game"
    UNDO = "undo"
    MOVE_CARD = "move card"
    CREATE_PAIR = "create pair"
    CREATE_DOMINO = "create domino"
    ADD_TO_CHAIN = "add to chain"
    REMOVE_LAST_FROM_CHAIN = "remove last from chain"
    CLEAR_CHAIN = "clear chain"
    JOIN_CHAINS = "join chains"
    REORDER_PAIRS = "reorder pairs"
    REORDER_DOMINOS = "reorder dominos"
    REORDER_CHAINS = "reorder chains"


class ReorderTarget(StrEnum):
    PAIRS = "pairs"
    DOMINOS = "dominos"
    CHAINS = "chains"
