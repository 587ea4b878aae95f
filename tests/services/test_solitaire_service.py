"""Unit tests for src/services/solitaire_service.py"""

import random
from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import ReorderTarget, Status
from src.services.solitaire_service import (
    AddToChainRequest,
    ClearChainRequest,
    CreateDominoRequest,
    CreatePairRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinChainsRequest,
    MoveCardRequest,
    NewGameRequest,
    RemoveLastFromChainRequest,
    ReorderRequest,
    ResumeGameRequest,
    SolitaireService,
    UndoRequest,
)
from src.solitaire.cards import Card
from src.solitaire.game import to_model
from src.solitaire.state import create_initial_state


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}
        self.updates = 0

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        if game_id not in self._games:
            return None
        self.updates += 1
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> SolitaireService:
    return SolitaireService(mock_repository, rng=random.Random(0).random)


@pytest.fixture
def stored_game_id(mock_repository: MockRepository, chain_ready_deck: list[Card]) -> UUID:
    """A saved game (not yet live in the service) dealt from the chain-ready deck."""
    _, game_id = mock_repository.create_game(
        to_model(create_initial_state(deck=chain_ready_deck))
    )
    return game_id


# --- NEW GAME ---
def test_create_a_new_game(service: SolitaireService, mock_repository: MockRepository) -> None:
    response = service.create_new_game(NewGameRequest())

    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)
    assert response.status == Status.IN_PROGRESS
    assert response.move_count == 0
    assert response.tableau_card_count == 52
    assert sorted(len(column) for column in response.tableau) == [6, 6, 6, 6, 7, 7, 7, 7]
    assert response.pairs == []
    assert response.dominos == []
    assert response.chains == []
    assert not response.can_undo

    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.tableau == response.tableau


def test_new_game_with_seed_is_repeatable(service: SolitaireService) -> None:
    first = service.create_new_game(NewGameRequest(seed=123))
    second = service.create_new_game(NewGameRequest(seed=123))
    assert first.game_id != second.game_id
    assert first.tableau == second.tableau


# --- RESUME ---
def test_resume_without_id_deals_new_game(service: SolitaireService) -> None:
    response = service.resume_game(ResumeGameRequest())
    assert response.move_count == 0
    assert response.tableau_card_count == 52


def test_resume_unknown_id_deals_new_game(
    service: SolitaireService, mock_repository: MockRepository
) -> None:
    unknown = uuid4()
    response = service.resume_game(ResumeGameRequest(game_id=unknown))
    assert response.game_id != unknown
    assert mock_repository.get_game(response.game_id) is not None


def test_resume_saved_game(service: SolitaireService, stored_game_id: UUID) -> None:
    response = service.resume_game(ResumeGameRequest(game_id=stored_game_id))
    assert response.game_id == stored_game_id
    assert response.tableau[0][-1] == "A♥"
    assert not response.can_undo


def test_resume_broken_saved_game(
    service: SolitaireService, mock_repository: MockRepository
) -> None:
    """Broken data is replaced by a fresh deal under the same id, never an error."""
    broken = GameModel(tableau=[["A♥"], ["K♣"]], move_count=40)
    _, game_id = mock_repository.create_game(broken)

    response = service.resume_game(ResumeGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert response.move_count == 0
    assert response.tableau_card_count == 52

    repaired = mock_repository.get_game(game_id)
    assert repaired is not None
    assert len(repaired.tableau) == 8


# --- GET ---
def test_get_unknown_game(service: SolitaireService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_get_game_state(service: SolitaireService, stored_game_id: UUID) -> None:
    response = service.get_game_state(GetGameRequest(game_id=stored_game_id))
    assert response.game_id == stored_game_id
    assert response.move_count == 0


# --- PLAYING ---
def test_play_up_to_a_chain(
    service: SolitaireService, mock_repository: MockRepository, stored_game_id: UUID
) -> None:
    game_id = stored_game_id
    for from_column in (0, 2, 4, 6):
        service.create_pair(
            CreatePairRequest(game_id=game_id, from_column=from_column, to_column=from_column + 1)
        )
    response = service.create_domino(CreateDominoRequest(game_id=game_id, pair_index1=0, pair_index2=1))
    assert len(response.dominos) == 1
    assert response.pairs == [["3♦", "J♠"], ["5♥", "9♣"]]

    service.create_domino(CreateDominoRequest(game_id=game_id, pair_index1=0, pair_index2=1))
    service.add_to_chain(AddToChainRequest(game_id=game_id, domino_index=0))
    response = service.add_to_chain(AddToChainRequest(game_id=game_id, domino_index=1))

    assert response.move_count == 8
    assert response.total_chain_length == 2
    assert [(link.display_value1, link.display_value2) for link in response.chains[0]] == [
        ("A-K", "5-9"),
        ("5-9", "3-J"),
    ]
    assert all(domino.in_chain for domino in response.dominos)

    # every accepted action was persisted
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.move_count == 8
    assert len(stored.chains[0]) == 2


def test_move_card_and_undo(service: SolitaireService, stored_game_id: UUID) -> None:
    before = service.get_game_state(GetGameRequest(game_id=stored_game_id))

    moved = service.move_card(MoveCardRequest(game_id=stored_game_id, from_column=0, to_column=1))
    assert moved.move_count == 1
    assert moved.tableau[1][-1] == "A♥"
    assert moved.can_undo

    undone = service.undo(UndoRequest(game_id=stored_game_id))
    assert undone.tableau == before.tableau
    assert undone.move_count == 0
    assert not undone.can_undo


def test_rejected_action_is_not_persisted(
    service: SolitaireService, mock_repository: MockRepository, stored_game_id: UUID
) -> None:
    """2nd column top is K♣, 3rd is 5♦: no stacking, nothing changes."""
    response = service.move_card(
        MoveCardRequest(game_id=stored_game_id, from_column=1, to_column=2)
    )
    assert response.move_count == 0
    assert mock_repository.updates == 0


def test_undo_without_history(service: SolitaireService, stored_game_id: UUID) -> None:
    response = service.undo(UndoRequest(game_id=stored_game_id))
    assert response.move_count == 0
    assert not response.can_undo


def test_reorder_pairs(service: SolitaireService, stored_game_id: UUID) -> None:
    service.create_pair(CreatePairRequest(game_id=stored_game_id, from_column=0, to_column=1))
    service.create_pair(CreatePairRequest(game_id=stored_game_id, from_column=2, to_column=3))

    response = service.reorder(
        ReorderRequest(game_id=stored_game_id, target=ReorderTarget.PAIRS, from_index=1, to_index=0)
    )
    assert response.pairs == [["5♦", "9♠"], ["A♥", "K♣"]]
    assert response.move_count == 2


def test_chain_removal_and_join(service: SolitaireService, stored_game_id: UUID) -> None:
    game_id = stored_game_id
    for from_column in (0, 2, 4, 6):
        service.create_pair(
            CreatePairRequest(game_id=game_id, from_column=from_column, to_column=from_column + 1)
        )
    service.create_domino(CreateDominoRequest(game_id=game_id, pair_index1=0, pair_index2=1))
    service.create_domino(CreateDominoRequest(game_id=game_id, pair_index1=0, pair_index2=1))
    service.add_to_chain(AddToChainRequest(game_id=game_id, domino_index=0))
    service.add_to_chain(AddToChainRequest(game_id=game_id, domino_index=1))

    response = service.remove_last_from_chain(RemoveLastFromChainRequest(game_id=game_id))
    assert response.total_chain_length == 1
    assert not response.dominos[1].in_chain

    response = service.clear_chain(ClearChainRequest(game_id=game_id))
    assert response.chains == []
    assert not any(domino.in_chain for domino in response.dominos)
    assert response.move_count == 8

    # a chain cannot be joined with itself
    response = service.add_to_chain(AddToChainRequest(game_id=game_id, domino_index=0))
    assert response.move_count == 9
    response = service.join_chains(JoinChainsRequest(game_id=game_id, chain_index1=0, chain_index2=0))
    assert response.move_count == 9
    assert response.total_chain_length == 1


def test_actions_on_unknown_game(service: SolitaireService) -> None:
    with pytest.raises(RepositoryError):
        service.move_card(MoveCardRequest(game_id=uuid4(), from_column=0, to_column=1))


# --- DELETE ---
def test_delete_game(
    service: SolitaireService, mock_repository: MockRepository, stored_game_id: UUID
) -> None:
    service.get_game_state(GetGameRequest(game_id=stored_game_id))
    service.delete_game(DeleteGameRequest(game_id=stored_game_id))

    assert mock_repository.get_game(stored_game_id) is None
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=stored_game_id))


# --- LIVE SESSIONS ---
def test_live_games_are_capped(mock_repository: MockRepository) -> None:
    service = SolitaireService(mock_repository, rng=random.Random(0).random, max_sessions=2)
    for _ in range(5):
        service.create_new_game(NewGameRequest())
    assert len(service._sessions) == 2


def test_evicted_game_resumes_from_repository(
    mock_repository: MockRepository, stored_game_id: UUID
) -> None:
    """Only the undo history is lost when a game drops out of memory."""
    service = SolitaireService(mock_repository, rng=random.Random(0).random, max_sessions=2)
    moved = service.move_card(MoveCardRequest(game_id=stored_game_id, from_column=0, to_column=1))
    assert moved.can_undo

    service.create_new_game(NewGameRequest())
    service.create_new_game(NewGameRequest())
    assert stored_game_id not in service._sessions

    response = service.resume_game(ResumeGameRequest(game_id=stored_game_id))
    assert response.game_id == stored_game_id
    assert response.move_count == 1
    assert response.tableau == moved.tableau
    assert not response.can_undo


def test_recently_used_game_stays_in_memory(
    mock_repository: MockRepository, stored_game_id: UUID
) -> None:
    service = SolitaireService(mock_repository, rng=random.Random(0).random, max_sessions=2)
    service.move_card(MoveCardRequest(game_id=stored_game_id, from_column=0, to_column=1))
    first_new = service.create_new_game(NewGameRequest())
    service.get_game_state(GetGameRequest(game_id=stored_game_id))
    service.create_new_game(NewGameRequest())

    assert first_new.game_id not in service._sessions
    assert service.undo(UndoRequest(game_id=stored_game_id)).move_count == 0
