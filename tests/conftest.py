"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base
from src.solitaire.cards import Card, create_deck

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

StackedDeckFn = Callable[[dict[int, list[str]]], list[Card]]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def stacked_deck() -> StackedDeckFn:
    """
    Call the inner function with {column: [card ids, top card first]} to get a deck that deals exactly those cards
    on top of the given columns. All other cards fill the remaining positions in canonical order.

    ---
    With 52 cards over 8 columns, columns 0-3 get 7 cards and columns 4-7 get 6 cards.
    The card at depth d (0 = top) of column c was dealt from position c + 48 - 8d (c < 4) or c + 40 - 8d (c >= 4).
    """

    def _position(column: int, depth: int) -> int:
        top = column + 48 if column < 4 else column + 40
        return top - 8 * depth

    def _stack(columns: dict[int, list[str]]) -> list[Card]:
        placed: dict[int, Card] = {}
        for column, card_ids in columns.items():
            for depth, card_id in enumerate(card_ids):
                placed[_position(column, depth)] = Card.from_id(card_id)

        leftovers = iter(card for card in create_deck() if card not in placed.values())
        return [placed[index] if index in placed else next(leftovers) for index in range(52)]

    return _stack


@pytest.fixture
def chain_ready_deck(stacked_deck: StackedDeckFn) -> list[Card]:
    """
    Top cards that pair up (0+1, 2+3, 4+5, 6+7), and pairs that make two dominos sharing the label '5-9':

    * A♥ K♣ + 5♦ 9♠ -> domino A-K | 5-9
    * 3♦ J♠ + 5♥ 9♣ -> domino 3-J | 5-9
    """
    return stacked_deck(
        {
            0: ["A♥"],
            1: ["K♣"],
            2: ["5♦"],
            3: ["9♠"],
            4: ["3♦"],
            5: ["J♠"],
            6: ["5♥"],
            7: ["9♣"],
        }
    )
