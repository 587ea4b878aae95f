"""
Entrypoint into the rules engine for the service layer.

* converts a GameState to/from the transport GameModel (a snapshot without undo history)
* dispatches UI actions to the pure transitions (the reducer)
"""

import random
from typing import Any, Callable, Optional

from src.core.exceptions import InvalidSnapshotError, UnknownActionError
from src.core.models import ChainLinkRecord, DominoRecord, GameModel
from src.core.shared_types import ActionType, Status
from src.solitaire.cards import COLUMN_COUNT, Card, RandomFn, Tableau, create_deck
from src.solitaire.chains import (
    add_domino_to_chain,
    check_win,
    clear_chain,
    join_chains,
    remove_last_from_chain,
    reorder_chains,
)
from src.solitaire.dominos import (
    build_domino,
    can_form_domino,
    create_domino_from_pairs,
    reorder_dominos,
)
from src.solitaire.pairs import can_pair, create_pair_from_tableau, make_pair, reorder_pairs
from src.solitaire.pieces import Chain, ChainLink, Domino, Pair
from src.solitaire.state import GameState, create_initial_state, undo_state
from src.solitaire.tableau import move_card

Transition = Callable[..., GameState]

TRANSITIONS: dict[ActionType, Transition] = {
    ActionType.UNDO: undo_state,
    ActionType.MOVE_CARD: move_card,
    ActionType.CREATE_PAIR: create_pair_from_tableau,
    ActionType.CREATE_DOMINO: create_domino_from_pairs,
    ActionType.ADD_TO_CHAIN: add_domino_to_chain,
    ActionType.REMOVE_LAST_FROM_CHAIN: remove_last_from_chain,
    ActionType.CLEAR_CHAIN: clear_chain,
    ActionType.JOIN_CHAINS: join_chains,
    ActionType.REORDER_PAIRS: reorder_pairs,
    ActionType.REORDER_DOMINOS: reorder_dominos,
    ActionType.REORDER_CHAINS: reorder_chains,
}


def new_game(rng: RandomFn = random.random) -> GameState:
    return create_initial_state(rng=rng)


def game_status(state: GameState) -> Status:
    return Status.WON if check_win(state.chains) else Status.IN_PROGRESS


def apply_action(
    state: GameState,
    action: ActionType,
    rng: RandomFn = random.random,
    **arguments: Any,
) -> GameState:
    """
    The reducer: route an action and its arguments to the matching transition.

    ---
    NEW_GAME throws the current state away. Every other action follows the reject-by-no-op rule.
    """
    if action == ActionType.NEW_GAME:
        return new_game(rng)
    transition = TRANSITIONS.get(action)
    if transition is None:
        raise UnknownActionError(f"No transition for action {action!r}.")
    return transition(state, **arguments)


# --- SNAPSHOTS ---
def to_model(state: GameState) -> GameModel:
    """Encode into the format the Service layer stores. History is left out on purpose."""
    return GameModel(
        tableau=[[card.id for card in column] for column in state.tableau],
        pairs=[[card.id for card in pair] for pair in state.pairs],
        dominos=[_domino_to_record(domino) for domino in state.dominos],
        chains=[[_link_to_record(link) for link in chain] for chain in state.chains],
        move_count=state.move_count,
        status=game_status(state).value,
    )


def from_model(model: GameModel) -> GameState:
    """
    Rebuild a GameState from a stored snapshot. The result starts with an empty history.
    ----

    ----
    Raises InvalidSnapshotError when the snapshot cannot be a game:
    * the tableau is missing or does not have exactly COLUMN_COUNT columns
    * unknown card ids, invalid pairs or dominos, chains pointing at unknown dominos
    * empty chains, or chains whose neighbouring links do not meet on the same label
    * the cards found are not exactly the 52 cards of one deck
    """
    try:
        tableau = _tableau_from_records(model.tableau)
        pairs = tuple(_pair_from_record(record) for record in model.pairs)
        dominos = tuple(_domino_from_record(record) for record in model.dominos)
        by_id = {domino.id: domino for domino in dominos}
        chains = tuple(
            tuple(_link_from_record(record, by_id) for record in chain)
            for chain in model.chains
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidSnapshotError(f"Malformed game snapshot: {e}") from e

    move_count = model.move_count
    if isinstance(move_count, bool) or not isinstance(move_count, int) or move_count < 0:
        raise InvalidSnapshotError(f"Invalid move count: {move_count!r}")

    _assert_chains_linked(chains)
    _assert_chain_flags(dominos, chains)
    _assert_full_deck(tableau, pairs, dominos)
    return GameState(
        tableau=tableau,
        pairs=pairs,
        dominos=dominos,
        chains=chains,
        move_count=move_count,
    )


def load_or_new(
    model: Optional[GameModel], rng: RandomFn = random.random
) -> tuple[GameState, bool]:
    """
    Saved game if there is a valid one, otherwise a fresh deal.

    Returns the state and whether it was loaded (False means freshly dealt).
    """
    if model is None:
        return new_game(rng), False
    try:
        return from_model(model), True
    except InvalidSnapshotError:
        return new_game(rng), False


# -- PRIVATE HELPERS ---
def _domino_to_record(domino: Domino) -> DominoRecord:
    return {
        "id": domino.id,
        "pair1": [card.id for card in domino.pair1],
        "pair2": [card.id for card in domino.pair2],
        "value1": domino.value1,
        "value2": domino.value2,
        "in_chain": domino.in_chain,
    }


def _link_to_record(link: ChainLink) -> ChainLinkRecord:
    return {
        "domino_id": link.id,
        "display_value1": link.display_value1,
        "display_value2": link.display_value2,
    }


def _tableau_from_records(columns: Any) -> Tableau:
    if not isinstance(columns, list) or len(columns) != COLUMN_COUNT:
        raise ValueError(f"tableau must be a list of {COLUMN_COUNT} columns")
    return tuple(tuple(Card.from_id(card_id) for card_id in column) for column in columns)


def _pair_from_record(record: list[str]) -> Pair:
    if len(record) != 2:
        raise ValueError(f"a pair holds two cards, got {record!r}")
    card_a, card_b = (Card.from_id(card_id) for card_id in record)
    if not can_pair(card_a, card_b):
        raise ValueError(f"not a valid pair: {record!r}")
    return make_pair(card_a, card_b)


def _domino_from_record(record: DominoRecord) -> Domino:
    pair1 = _pair_from_record(record["pair1"])
    pair2 = _pair_from_record(record["pair2"])
    if not can_form_domino(pair1, pair2):
        raise ValueError(f"pairs do not cover all four suits: {record!r}")
    domino = build_domino(pair1, pair2)
    if (domino.value1, domino.value2) != (record["value1"], record["value2"]):
        raise ValueError(f"domino values do not match its pairs: {record!r}")
    return domino.with_in_chain(bool(record["in_chain"]))


def _link_from_record(record: ChainLinkRecord, dominos: dict[str, Domino]) -> ChainLink:
    domino = dominos[record["domino_id"]]
    display = (record["display_value1"], record["display_value2"])
    if display not in (domino.values, domino.values[::-1]):
        raise ValueError(f"chain link shows values the domino does not have: {record!r}")
    return ChainLink(domino, *display)


def _assert_chains_linked(chains: tuple[Chain, ...]) -> None:
    """Every chain holds at least one link, and neighbouring links meet on the same label."""
    for chain_index, chain in enumerate(chains):
        if not chain:
            raise InvalidSnapshotError(f"Chain {chain_index} is empty.")
        for previous, following in zip(chain, chain[1:]):
            if previous.display_value2 != following.display_value1:
                raise InvalidSnapshotError(
                    f"Chain {chain_index} is broken between {previous.id} and {following.id}."
                )


def _assert_chain_flags(dominos: tuple[Domino, ...], chains: tuple[Chain, ...]) -> None:
    """in_chain must be set for exactly the dominos that sit in a chain, each at most once."""
    chained_ids = [link.id for chain in chains for link in chain]
    if len(chained_ids) != len(set(chained_ids)):
        raise InvalidSnapshotError("A domino appears in more than one chain position.")
    flagged_ids = {domino.id for domino in dominos if domino.in_chain}
    if flagged_ids != set(chained_ids):
        raise InvalidSnapshotError("in_chain flags do not match the chains.")


def _assert_full_deck(
    tableau: Tableau, pairs: tuple[Pair, ...], dominos: tuple[Domino, ...]
) -> None:
    cards = [card for column in tableau for card in column]
    cards.extend(card for pair in pairs for card in pair)
    cards.extend(card for domino in dominos for card in domino.cards)
    if sorted(card.id for card in cards) != sorted(card.id for card in create_deck()):
        raise InvalidSnapshotError("Snapshot does not hold exactly one full deck of cards.")
