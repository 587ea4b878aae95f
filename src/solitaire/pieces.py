"""
What gets built out of cards: pairs, dominos and the links of a chain.

(placed in its own module as the state and every rules module need to import them)
"""

from dataclasses import dataclass, replace
from typing import Self

from src.solitaire.cards import Card

# Always (red card, black card)
Pair = tuple[Card, Card]


@dataclass(frozen=True)
class Domino:
    """
    Two pairs whose four cards cover all four suits.

    value1 / value2 are the labels of pair1 / pair2, with value1 always the label holding the lower card value.
    """

    id: str
    pair1: Pair
    pair2: Pair
    value1: str
    value2: str
    in_chain: bool = False

    @property
    def cards(self) -> tuple[Card, ...]:
        return (*self.pair1, *self.pair2)

    @property
    def values(self) -> tuple[str, str]:
        return (self.value1, self.value2)

    def with_in_chain(self, in_chain: bool) -> Self:
        return replace(self, in_chain=in_chain)


@dataclass(frozen=True)
class ChainLink:
    """
    A domino placed in a chain.

    display_value1 faces the previous link (or is the chain's start), display_value2 faces the next link.
    """

    domino: Domino
    display_value1: str
    display_value2: str

    @property
    def id(self) -> str:
        return self.domino.id

    def flipped(self) -> Self:
        return replace(
            self,
            display_value1=self.display_value2,
            display_value2=self.display_value1,
        )


Chain = tuple[ChainLink, ...]
