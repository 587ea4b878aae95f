"""Card identity, the deck, shuffling and dealing the tableau."""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Self, Sequence

RandomFn = Callable[[], float]
Column = tuple["Card", ...]
Tableau = tuple[Column, ...]

COLUMN_COUNT = 8


class Suit(Enum):
    """Values are the symbols used in card ids."""

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"


# canonical deck order is suit-major, in this order
SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)
RED_SUITS: frozenset[Suit] = frozenset({Suit.HEARTS, Suit.DIAMONDS})

RANKS: tuple[str, ...] = (
    "A",
    "2",
    "3",
    "4",
    "5",
    "6",
    "7",
    "8",
    "9",
    "10",
    "J",
    "Q",
    "K",
)
RANK_VALUES: dict[str, int] = {rank: value for value, rank in enumerate(RANKS, start=1)}

SYMBOL_TO_SUIT: dict[str, Suit] = {suit.value: suit for suit in Suit}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: Suit
    value: int = field(init=False)
    is_red: bool = field(init=False)
    id: str = field(init=False)

    def __post_init__(self) -> None:
        # frozen: derived fields have to be set around the dataclass' __setattr__
        object.__setattr__(self, "value", RANK_VALUES[self.rank])
        object.__setattr__(self, "is_red", self.suit in RED_SUITS)
        object.__setattr__(self, "id", f"{self.rank}{self.suit.value}")

    @classmethod
    def from_id(cls, card_id: str) -> Self:
        """'10♥' -> Card('10', Suit.HEARTS). The suit symbol is always the last character."""
        rank, symbol = card_id[:-1], card_id[-1:]
        if rank not in RANK_VALUES or symbol not in SYMBOL_TO_SUIT:
            raise ValueError(f"Not a card id: {card_id!r}")
        return cls(rank, SYMBOL_TO_SUIT[symbol])


def create_deck() -> list[Card]:
    """All 52 cards, suit-major (A♥ ... K♥, A♦ ... K♠)."""
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def shuffle_deck(deck: Sequence[Card], rng: RandomFn = random.random) -> list[Card]:
    """
    Fisher-Yates shuffle on a copy of the deck.

    ---
    `rng` returns a float in [0, 1). Pass something like `random.Random(seed).random` for a repeatable deal.
    """
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal_tableau(deck: Sequence[Card], column_count: int = COLUMN_COUNT) -> Tableau:
    """Card i goes to column i % column_count. Deck order is kept within every column (first dealt = bottom)."""
    columns: list[list[Card]] = [[] for _ in range(column_count)]
    for index, card in enumerate(deck):
        columns[index % column_count].append(card)
    return tuple(tuple(column) for column in columns)


def top_card(tableau: Tableau, column_index: int) -> Optional[Card]:
    """Only the top card of a column can be moved or paired. None for empty / unknown columns."""
    if not 0 <= column_index < len(tableau):
        return None
    column = tableau[column_index]
    return column[-1] if column else None


def count_tableau_cards(tableau: Tableau) -> int:
    return sum(len(column) for column in tableau)
