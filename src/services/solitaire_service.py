"""Orchestration of communication from the UI / API layer to the rules engine and persistence layers (and the reverse direction)."""

import logging
import random
from collections import OrderedDict
from typing import Any, Optional
from uuid import UUID

from src.api.models import (
    AddToChainRequest,
    ChainLinkView,
    ClearChainRequest,
    CreateDominoRequest,
    CreatePairRequest,
    DeleteGameRequest,
    DominoView,
    GameResponse,
    GetGameRequest,
    JoinChainsRequest,
    MoveCardRequest,
    NewGameRequest,
    RemoveLastFromChainRequest,
    ReorderRequest,
    ResumeGameRequest,
    UndoRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import ActionType, ReorderTarget
from src.db.repository import GameRepository
from src.solitaire.cards import RandomFn, count_tableau_cards
from src.solitaire.chains import get_total_chain_length
from src.solitaire.game import apply_action, game_status, load_or_new, new_game, to_model
from src.solitaire.state import GameState

logger = logging.getLogger(__name__)

# Live games (with their undo history) kept in memory; the least recently used one is dropped beyond this.
MAX_SESSIONS = 256

REORDER_ACTIONS: dict[ReorderTarget, ActionType] = {
    ReorderTarget.PAIRS: ActionType.REORDER_PAIRS,
    ReorderTarget.DOMINOS: ActionType.REORDER_DOMINOS,
    ReorderTarget.CHAINS: ActionType.REORDER_CHAINS,
}


class SolitaireService:
    """
    Orchestration of layers for the solitaire game.

    ---
    Live game states are kept in memory per game id, so the undo history survives between calls.
    At most max_sessions of them: an evicted game is restored from its snapshot, without undo history.
    The repository only ever sees snapshots (without history), written after every accepted transition.
    """

    def __init__(
        self,
        repository: GameRepository,
        rng: Optional[RandomFn] = None,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self.repo = repository
        self.rng = rng or random.random
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[UUID, GameState] = OrderedDict()

    # -- API routes logic ---
    def create_new_game(self, request: NewGameRequest) -> GameResponse:
        """Discard whatever was being played and deal a fresh game."""
        state = new_game(self._rng_for(request.seed))
        _, game_id = self.repo.create_game(to_model(state))
        self._remember(game_id, state)
        return self._create_game_response(game_id, state)

    def resume_game(self, request: ResumeGameRequest) -> GameResponse:
        """
        Continue a saved game.
        ----

        ----
        Missing or broken saved data is never an error for the player: they simply get a fresh deal.
        """
        if request.game_id is None:
            return self.create_new_game(NewGameRequest(seed=request.seed))

        live_state = self._live_state(request.game_id)
        if live_state is not None:
            return self._create_game_response(request.game_id, live_state)

        stored_model = self.repo.get_game(request.game_id)
        if stored_model is None:
            logger.warning("No saved game %s, dealing a new game.", request.game_id)
            return self.create_new_game(NewGameRequest(seed=request.seed))

        state = self._restore(request.game_id, stored_model, self._rng_for(request.seed))
        return self._create_game_response(request.game_id, state)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        state = self._load_state(request.game_id)
        return self._create_game_response(request.game_id, state)

    def undo(self, request: UndoRequest) -> GameResponse:
        return self._apply(request.game_id, ActionType.UNDO)

    def move_card(self, request: MoveCardRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.MOVE_CARD,
            from_col=request.from_column,
            to_col=request.to_column,
        )

    def create_pair(self, request: CreatePairRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.CREATE_PAIR,
            from_col=request.from_column,
            to_col=request.to_column,
        )

    def create_domino(self, request: CreateDominoRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.CREATE_DOMINO,
            pair_index1=request.pair_index1,
            pair_index2=request.pair_index2,
        )

    def add_to_chain(self, request: AddToChainRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.ADD_TO_CHAIN,
            domino_index=request.domino_index,
            chain_index=request.chain_index,
        )

    def remove_last_from_chain(self, request: RemoveLastFromChainRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.REMOVE_LAST_FROM_CHAIN,
            chain_index=request.chain_index,
        )

    def clear_chain(self, request: ClearChainRequest) -> GameResponse:
        return self._apply(
            request.game_id, ActionType.CLEAR_CHAIN, chain_index=request.chain_index
        )

    def join_chains(self, request: JoinChainsRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            ActionType.JOIN_CHAINS,
            chain_index1=request.chain_index1,
            chain_index2=request.chain_index2,
        )

    def reorder(self, request: ReorderRequest) -> GameResponse:
        return self._apply(
            request.game_id,
            REORDER_ACTIONS[request.target],
            from_index=request.from_index,
            to_index=request.to_index,
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self._sessions.pop(request.game_id, None)
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _apply(self, game_id: UUID, action: ActionType, **arguments: Any) -> GameResponse:
        """Run one transition. Only accepted transitions get persisted."""
        state = self._load_state(game_id)
        next_state = apply_action(state, action, **arguments)
        if next_state is state:
            logger.debug("Rejected %s on game %s with %s", action, game_id, arguments)
            return self._create_game_response(game_id, state)

        self._remember(game_id, next_state)
        self.repo.update_game(game_id, to_model(next_state))
        return self._create_game_response(game_id, next_state)

    def _load_state(self, game_id: UUID) -> GameState:
        """Live state if there is one, otherwise restored from the repository (raises error if no record exists)."""
        live_state = self._live_state(game_id)
        if live_state is not None:
            return live_state
        stored_model = self.repo.get_game(game_id)
        if stored_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._restore(game_id, stored_model, self.rng)

    def _restore(
        self, game_id: UUID, stored_model: GameModel, rng: RandomFn
    ) -> GameState:
        state, loaded = load_or_new(stored_model, rng)
        if not loaded:
            logger.warning("Saved game %s is not a valid game, dealing a new one.", game_id)
            self.repo.update_game(game_id, to_model(state))
        self._remember(game_id, state)
        return state

    def _live_state(self, game_id: UUID) -> Optional[GameState]:
        state = self._sessions.get(game_id)
        if state is not None:
            self._sessions.move_to_end(game_id)
        return state

    def _remember(self, game_id: UUID, state: GameState) -> None:
        self._sessions[game_id] = state
        self._sessions.move_to_end(game_id)
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.debug("Dropped live game %s from memory (its snapshot stays stored).", evicted_id)

    def _rng_for(self, seed: Optional[int]) -> RandomFn:
        return random.Random(seed).random if seed is not None else self.rng

    def _create_game_response(self, game_id: UUID, state: GameState) -> GameResponse:
        """Convert a GameState into a GameResponse (for game with given ID.)"""
        model = to_model(state)
        return GameResponse(
            game_id=game_id,
            status=game_status(state),
            move_count=state.move_count,
            tableau=model.tableau,
            pairs=model.pairs,
            dominos=[
                DominoView(
                    id=domino.id,
                    value1=domino.value1,
                    value2=domino.value2,
                    cards=[card.id for card in domino.cards],
                    in_chain=domino.in_chain,
                )
                for domino in state.dominos
            ],
            chains=[[ChainLinkView(**record) for record in chain] for chain in model.chains],
            can_undo=state.can_undo,
            total_chain_length=get_total_chain_length(state.chains),
            tableau_card_count=count_tableau_cards(state.tableau),
        )
