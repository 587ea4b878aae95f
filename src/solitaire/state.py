"""
The game state, its undo history, and the helpers every transition uses to produce the next state.

Every transition in the rules modules has the shape (state, args) -> state.
If a transition is rejected, the exact same state object is handed back, so `new is old` tells the caller nothing happened.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence, TypeVar

from src.solitaire.cards import (
    Card,
    RandomFn,
    Tableau,
    create_deck,
    deal_tableau,
    shuffle_deck,
)
from src.solitaire.pieces import Chain, Domino, Pair

MAX_HISTORY = 50

T = TypeVar("T")


@dataclass(frozen=True)
class Snapshot:
    """Everything undo restores. Immutable all the way down, so it can never be changed by later moves."""

    tableau: Tableau
    pairs: tuple[Pair, ...]
    dominos: tuple[Domino, ...]
    chains: tuple[Chain, ...]
    move_count: int


@dataclass(frozen=True)
class GameState:
    tableau: Tableau
    pairs: tuple[Pair, ...] = ()
    dominos: tuple[Domino, ...] = ()
    chains: tuple[Chain, ...] = ()
    move_count: int = 0
    history: tuple[Snapshot, ...] = field(default=(), repr=False)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            tableau=self.tableau,
            pairs=self.pairs,
            dominos=self.dominos,
            chains=self.chains,
            move_count=self.move_count,
        )

    @property
    def can_undo(self) -> bool:
        return len(self.history) > 0


def create_initial_state(
    deck: Optional[Sequence[Card]] = None, rng: RandomFn = random.random
) -> GameState:
    """Deal a new game. Without a deck, a full deck is shuffled using `rng`."""
    if deck is None:
        deck = shuffle_deck(create_deck(), rng)
    return GameState(tableau=deal_tableau(deck))


def with_history(state: GameState) -> tuple[Snapshot, ...]:
    """Push the current state onto the history. Oldest entries fall off beyond MAX_HISTORY."""
    history = (*state.history, state.snapshot())
    return history[-MAX_HISTORY:]


def commit(state: GameState, counts_as_move: bool = True, **changes: Any) -> GameState:
    """
    Produce the next state from an accepted transition.
    ----

    ----
    Records the pre-transition snapshot and (by default) counts a move.
    Reordering and taking dominos back out of a chain are undoable but are not moves.
    """
    move_count = state.move_count + 1 if counts_as_move else state.move_count
    return replace(
        state,
        **changes,
        move_count=move_count,
        history=with_history(state),
    )


def undo_state(state: GameState) -> GameState:
    """Restore the most recent snapshot (chains included). No-op without history."""
    if not state.history:
        return state
    previous = state.history[-1]
    return GameState(
        tableau=previous.tableau,
        pairs=previous.pairs,
        dominos=previous.dominos,
        chains=previous.chains,
        move_count=previous.move_count,
        history=state.history[:-1],
    )


def move_within(
    items: Sequence[T], from_index: int, to_index: int
) -> Optional[tuple[T, ...]]:
    """Remove the item at from_index and insert it at to_index. None when there is nothing to do."""
    if from_index == to_index:
        return None
    if not (0 <= from_index < len(items) and 0 <= to_index < len(items)):
        return None
    reordered = list(items)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return tuple(reordered)


def without_indices(items: Sequence[T], *indices: int) -> tuple[T, ...]:
    """Remove several positions at once. Highest index goes first so the others do not shift."""
    remaining = list(items)
    for index in sorted(set(indices), reverse=True):
        del remaining[index]
    return tuple(remaining)
