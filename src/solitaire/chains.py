"""
Chains of dominos.

Key idea: every link carries its own orientation (display_value1 -> display_value2), so a chain reads
start -> end by walking its links, and the labels where two neighbouring links meet are always equal.

- the start of a chain is the first link's display_value1
- the end of a chain is the last link's display_value2

A domino that does not fit any chain starts a new one. Dominos are never left unplaceable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from src.solitaire.pieces import Chain, ChainLink, Domino
from src.solitaire.state import GameState, commit, move_within, without_indices

# 13 dominos * 4 cards = the whole deck
WINNING_CHAIN_LENGTH = 13


class ChainPosition(Enum):
    END = "end"
    START = "start"


@dataclass(frozen=True)
class ChainEnds:
    start: str
    end: str


ChainExtender = Callable[[Chain, Domino], Optional[Chain]]


# --- MATCHING RULES ---
def can_connect_dominos(domino_a: Domino, domino_b: Domino) -> bool:
    """Any of the four value combinations match."""
    return any(a == b for a in domino_a.values for b in domino_b.values)


def get_chain_end_values(chain: Chain) -> Optional[ChainEnds]:
    if not chain:
        return None
    return ChainEnds(start=chain[0].display_value1, end=chain[-1].display_value2)


def can_connect_to_chain_end(domino: Domino, chain: Chain) -> bool:
    ends = get_chain_end_values(chain)
    if ends is None:
        return True
    return ends.end in domino.values


def can_connect_to_chain_start(domino: Domino, chain: Chain) -> bool:
    ends = get_chain_end_values(chain)
    if ends is None:
        return True
    return ends.start in domino.values


def get_connectable_chains(
    domino: Domino, chains: tuple[Chain, ...]
) -> list[tuple[int, ChainPosition]]:
    """Every (chain index, position) the domino could be attached to, in chain order, end before start."""
    options: list[tuple[int, ChainPosition]] = []
    for chain_index, chain in enumerate(chains):
        if not chain:
            continue
        if can_connect_to_chain_end(domino, chain):
            options.append((chain_index, ChainPosition.END))
        if can_connect_to_chain_start(domino, chain):
            options.append((chain_index, ChainPosition.START))
    return options


# --- BUILDING CHAINS ---
def start_new_chain(domino: Domino) -> Chain:
    """A single link needs no orientation: it shows value1 -> value2."""
    return (ChainLink(domino, domino.value1, domino.value2),)


def extend_chain_end(chain: Chain, domino: Domino) -> Optional[Chain]:
    """Append the domino, turned so the matching value faces the chain. None if nothing matches."""
    if not chain:
        return start_new_chain(domino)
    if not can_connect_to_chain_end(domino, chain):
        return None

    end = chain[-1].display_value2
    if domino.value1 == end:
        link = ChainLink(domino, domino.value1, domino.value2)
    else:
        link = ChainLink(domino, domino.value2, domino.value1)
    return (*chain, link)


def extend_chain_start(chain: Chain, domino: Domino) -> Optional[Chain]:
    """Prepend the domino. The matching value becomes display_value2, next to the old start."""
    if not chain:
        return start_new_chain(domino)
    if not can_connect_to_chain_start(domino, chain):
        return None

    start = chain[0].display_value1
    if domino.value2 == start:
        link = ChainLink(domino, domino.value1, domino.value2)
    else:
        link = ChainLink(domino, domino.value2, domino.value1)
    return (link, *chain)


def reverse_chain(chain: Chain) -> Chain:
    """Read the chain the other way around. Every link is flipped so neighbours keep matching."""
    return tuple(link.flipped() for link in reversed(chain))


# --- TRANSITIONS ---
def add_domino_to_chain(
    state: GameState, domino_index: int, chain_index: Optional[int] = None
) -> GameState:
    """
    Place a free domino in a chain.
    ----

    ----
    * chain_index given: attach at that chain's end, else at its start, else start a new chain.
    * no chain_index: the first chain accepting it at its end, then the first accepting it at its start,
      else start a new chain.

    Rejected only for an unknown domino / chain index or a domino that is already in a chain.
    """
    if not 0 <= domino_index < len(state.dominos):
        return state
    domino = state.dominos[domino_index]
    if domino.in_chain:
        return state

    placed = domino.with_in_chain(True)
    if chain_index is None:
        chains = _attach_to_first_fitting_chain(state.chains, placed)
    elif 0 <= chain_index < len(state.chains):
        chains = _attach_to_chain(state.chains, chain_index, placed)
    else:
        return state

    dominos = list(state.dominos)
    dominos[domino_index] = placed
    return commit(state, dominos=tuple(dominos), chains=chains)


def remove_last_from_chain(state: GameState, chain_index: int = 0) -> GameState:
    """Give the last link of a chain back to the domino pool. A chain left empty disappears."""
    if not 0 <= chain_index < len(state.chains):
        return state
    chain = state.chains[chain_index]
    if not chain:
        return state

    removed, remaining = chain[-1], chain[:-1]
    chains = list(state.chains)
    if remaining:
        chains[chain_index] = remaining
    else:
        del chains[chain_index]

    return commit(
        state,
        counts_as_move=False,
        dominos=_release(state.dominos, {removed.id}),
        chains=tuple(chains),
    )


def clear_chain(state: GameState, chain_index: Optional[int] = None) -> GameState:
    """Break up one chain (or all of them when chain_index is None). Its dominos return to the pool."""
    if not state.chains:
        return state

    if chain_index is None:
        cleared = state.chains
        chains: tuple[Chain, ...] = ()
    elif 0 <= chain_index < len(state.chains):
        cleared = (state.chains[chain_index],)
        chains = without_indices(state.chains, chain_index)
    else:
        return state

    released_ids = {link.id for chain in cleared for link in chain}
    return commit(
        state,
        counts_as_move=False,
        dominos=_release(state.dominos, released_ids),
        chains=chains,
    )


def can_join_chains(chain1: Chain, chain2: Chain) -> bool:
    ends1 = get_chain_end_values(chain1)
    ends2 = get_chain_end_values(chain2)
    if ends1 is None or ends2 is None:
        return False
    return any(a == b for a in (ends1.start, ends1.end) for b in (ends2.start, ends2.end))


def join_chains(state: GameState, chain_index1: int, chain_index2: int) -> GameState:
    """Merge two chains with a shared end label. The merged chain goes to the back of the list."""
    if chain_index1 == chain_index2:
        return state
    if not all(0 <= index < len(state.chains) for index in (chain_index1, chain_index2)):
        return state

    chain1 = state.chains[chain_index1]
    chain2 = state.chains[chain_index2]
    joined = _joined(chain1, chain2)
    if joined is None:
        return state

    chains = (*without_indices(state.chains, chain_index1, chain_index2), joined)
    return commit(state, chains=chains)


def reorder_chains(state: GameState, from_index: int, to_index: int) -> GameState:
    chains = move_within(state.chains, from_index, to_index)
    if chains is None:
        return state
    return commit(state, counts_as_move=False, chains=chains)


# --- END CONDITION ---
def check_circular(chain: Chain) -> bool:
    """A chain of at least two links closes on itself when its start label equals its end label."""
    if len(chain) < 2:
        return False
    ends = get_chain_end_values(chain)
    return ends is not None and ends.start == ends.end


def check_win(chains: Optional[tuple[Chain, ...]]) -> bool:
    """One single circular chain holding all 13 dominos (so all 52 cards)."""
    if not chains or len(chains) != 1:
        return False
    chain = chains[0]
    return len(chain) == WINNING_CHAIN_LENGTH and check_circular(chain)


def get_total_chain_length(chains: Optional[tuple[Chain, ...]]) -> int:
    if not chains:
        return 0
    return sum(len(chain) for chain in chains)


# -- PRIVATE HELPERS ---
def _attach_to_chain(
    chains: tuple[Chain, ...], chain_index: int, domino: Domino
) -> tuple[Chain, ...]:
    chain = chains[chain_index]
    extended = extend_chain_end(chain, domino) or extend_chain_start(chain, domino)
    if extended is None:
        return (*chains, start_new_chain(domino))
    return _replace_chain(chains, chain_index, extended)


def _attach_to_first_fitting_chain(
    chains: tuple[Chain, ...], domino: Domino
) -> tuple[Chain, ...]:
    extenders: tuple[ChainExtender, ...] = (extend_chain_end, extend_chain_start)
    for extend in extenders:
        for chain_index, chain in enumerate(chains):
            extended = extend(chain, domino)
            if extended is not None:
                return _replace_chain(chains, chain_index, extended)
    return (*chains, start_new_chain(domino))


def _replace_chain(
    chains: tuple[Chain, ...], chain_index: int, chain: Chain
) -> tuple[Chain, ...]:
    updated = list(chains)
    updated[chain_index] = chain
    return tuple(updated)


def _release(dominos: tuple[Domino, ...], domino_ids: set[str]) -> tuple[Domino, ...]:
    """Clear the in_chain flag of the given dominos in the pool."""
    return tuple(
        domino.with_in_chain(False) if domino.id in domino_ids else domino
        for domino in dominos
    )


def _joined(chain1: Chain, chain2: Chain) -> Optional[Chain]:
    """
    Orientation follows from which ends match (checked in this order):

    1. end1 == start2: chain1 + chain2
    2. end1 == end2: chain1 + reversed chain2
    3. start1 == end2: chain2 + chain1
    4. start1 == start2: reversed chain2 + chain1
    """
    ends1 = get_chain_end_values(chain1)
    ends2 = get_chain_end_values(chain2)
    if ends1 is None or ends2 is None:
        return None

    if ends1.end == ends2.start:
        return (*chain1, *chain2)
    if ends1.end == ends2.end:
        return (*chain1, *reverse_chain(chain2))
    if ends1.start == ends2.end:
        return (*chain2, *chain1)
    if ends1.start == ends2.start:
        return (*reverse_chain(chain2), *chain1)
    return None
