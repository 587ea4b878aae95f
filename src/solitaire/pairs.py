"""Pairing the top cards of two columns: one red, one black, values adding up to 14."""

from typing import Optional

from src.solitaire.cards import Card, top_card
from src.solitaire.pieces import Pair
from src.solitaire.state import GameState, commit, move_within

MAX_PAIRS = 6


def can_pair(card_a: Optional[Card], card_b: Optional[Card]) -> bool:
    if card_a is None or card_b is None:
        return False
    return card_a.is_red != card_b.is_red and card_a.value + card_b.value == 14


def make_pair(card_a: Card, card_b: Card) -> Pair:
    """Red card first."""
    return (card_a, card_b) if card_a.is_red else (card_b, card_a)


def get_pair_lower_value(pair: Pair) -> int:
    return min(card.value for card in pair)


def create_pair_from_tableau(state: GameState, from_col: int, to_col: int) -> GameState:
    """
    Take the top cards of two columns and put them in the pair pool.

    ---
    NOTE: the pool holds at most MAX_PAIRS pairs, and cards never go back from a pair to the tableau.
    """
    if len(state.pairs) >= MAX_PAIRS:
        return state
    if from_col == to_col:
        return state

    card_a = top_card(state.tableau, from_col)
    card_b = top_card(state.tableau, to_col)
    if not can_pair(card_a, card_b):
        return state

    columns = list(state.tableau)
    columns[from_col] = columns[from_col][:-1]
    columns[to_col] = columns[to_col][:-1]
    return commit(
        state,
        tableau=tuple(columns),
        pairs=(*state.pairs, make_pair(card_a, card_b)),
    )


def reorder_pairs(state: GameState, from_index: int, to_index: int) -> GameState:
    pairs = move_within(state.pairs, from_index, to_index)
    if pairs is None:
        return state
    return commit(state, counts_as_move=False, pairs=pairs)
