"""Moving cards between the tableau columns."""

from typing import Optional

from src.solitaire.cards import Card, Tableau, top_card
from src.solitaire.state import GameState, commit


def can_stack(top: Optional[Card], bottom: Optional[Card]) -> bool:
    """A card goes on top of another of the same rank, or one it adds up to 14 with (A on K, 6 on 8, ...)."""
    if top is None or bottom is None:
        return False
    return top.rank == bottom.rank or top.value + bottom.value == 14


def move_card(state: GameState, from_col: int, to_col: int) -> GameState:
    """
    Move the top card of from_col onto to_col.

    ---
    Any card can go into an empty column. Otherwise the top cards must stack.
    """
    if from_col == to_col:
        return state
    card = top_card(state.tableau, from_col)
    if card is None or not 0 <= to_col < len(state.tableau):
        return state

    destination = state.tableau[to_col]
    if destination and not can_stack(card, destination[-1]):
        return state

    return commit(state, tableau=_relocate(state.tableau, from_col, to_col, card))


def _relocate(tableau: Tableau, from_col: int, to_col: int, card: Card) -> Tableau:
    columns = list(tableau)
    columns[from_col] = columns[from_col][:-1]
    columns[to_col] = (*columns[to_col], card)
    return tuple(columns)
