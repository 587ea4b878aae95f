"""
Dominos: two pairs that together hold one card of every suit.

Each pair is known by its label, the two ranks sorted by value ("A-K", "5-9", "7-7").
A domino shows the two labels of its pairs, and these are what chains match on.
"""

from typing import Optional

from src.solitaire.cards import RANK_VALUES
from src.solitaire.pieces import Domino, Pair
from src.solitaire.state import GameState, commit, move_within, without_indices

LABEL_SEPARATOR = "-"


def get_pair_label(pair: Pair) -> str:
    """Lower card first: a King/Ace pair is 'A-K'."""
    low, high = sorted(pair, key=lambda card: card.value)
    return f"{low.rank}{LABEL_SEPARATOR}{high.rank}"


def label_value(label: str) -> int:
    """The value of the lower rank in a label ('A-K' -> 1, '5-9' -> 5)."""
    return RANK_VALUES[label.split(LABEL_SEPARATOR)[0]]


def can_form_domino(pair1: Optional[Pair], pair2: Optional[Pair]) -> bool:
    """
    All four suits must appear across the two pairs.
    ---

    ---
    NOTE: the labels of the two pairs do not have to match. Only suit coverage counts.
    """
    if pair1 is None or pair2 is None:
        return False
    suits = {card.suit for card in (*pair1, *pair2)}
    return len(suits) == 4


def normalize_domino_values(label1: str, label2: str) -> tuple[str, str]:
    """Order two labels by their lower card value, so the same two pairs always give the same domino."""
    if label_value(label1) <= label_value(label2):
        return label1, label2
    return label2, label1


def domino_id(pair1: Pair, pair2: Pair) -> str:
    """A card sits in at most one domino, so its four card ids identify it."""
    return "D:" + "".join(card.id for card in (*pair1, *pair2))


def build_domino(pair1: Pair, pair2: Pair) -> Domino:
    label1 = get_pair_label(pair1)
    label2 = get_pair_label(pair2)
    value1, value2 = normalize_domino_values(label1, label2)

    # pair1/pair2 follow the order of value1/value2
    if label1 != value1:
        pair1, pair2 = pair2, pair1

    return Domino(
        id=domino_id(pair1, pair2),
        pair1=pair1,
        pair2=pair2,
        value1=value1,
        value2=value2,
    )


def create_domino_from_pairs(
    state: GameState, pair_index1: int, pair_index2: int
) -> GameState:
    if pair_index1 == pair_index2:
        return state
    if not all(0 <= index < len(state.pairs) for index in (pair_index1, pair_index2)):
        return state

    pair1 = state.pairs[pair_index1]
    pair2 = state.pairs[pair_index2]
    if not can_form_domino(pair1, pair2):
        return state

    return commit(
        state,
        pairs=without_indices(state.pairs, pair_index1, pair_index2),
        dominos=(*state.dominos, build_domino(pair1, pair2)),
    )


def reorder_dominos(state: GameState, from_index: int, to_index: int) -> GameState:
    dominos = move_within(state.dominos, from_index, to_index)
    if dominos is None:
        return state
    return commit(state, counts_as_move=False, dominos=dominos)
