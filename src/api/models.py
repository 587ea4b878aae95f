"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import ReorderTarget, Status

CardId = str


def _non_negative(value: Optional[int]) -> Optional[int]:
    if value is not None and value < 0:
        raise InvalidRequestError(f"Index must be zero or positive, got {value}.")
    return value


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    seed: Optional[int] = None


class ResumeGameRequest(BaseModel):
    """No game_id (or an unknown / broken one) means: deal a fresh game."""

    game_id: Optional[UUID] = None
    seed: Optional[int] = None


class GetGameRequest(BaseModel):
    game_id: UUID


class UndoRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class MoveCardRequest(BaseModel):
    game_id: UUID
    from_column: int
    to_column: int

    @field_validator(*["from_column", "to_column"])
    @classmethod
    def validate_column(cls, value: int) -> int:
        return _non_negative(value)


class CreatePairRequest(BaseModel):
    game_id: UUID
    from_column: int
    to_column: int

    @field_validator(*["from_column", "to_column"])
    @classmethod
    def validate_column(cls, value: int) -> int:
        return _non_negative(value)


class CreateDominoRequest(BaseModel):
    game_id: UUID
    pair_index1: int
    pair_index2: int

    @field_validator(*["pair_index1", "pair_index2"])
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _non_negative(value)


class AddToChainRequest(BaseModel):
    game_id: UUID
    domino_index: int
    chain_index: Optional[int] = None

    @field_validator(*["domino_index", "chain_index"])
    @classmethod
    def validate_index(cls, value: Optional[int]) -> Optional[int]:
        return _non_negative(value)


class RemoveLastFromChainRequest(BaseModel):
    game_id: UUID
    chain_index: int = 0

    @field_validator("chain_index")
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _non_negative(value)


class ClearChainRequest(BaseModel):
    game_id: UUID
    chain_index: Optional[int] = None

    @field_validator("chain_index")
    @classmethod
    def validate_index(cls, value: Optional[int]) -> Optional[int]:
        return _non_negative(value)


class JoinChainsRequest(BaseModel):
    game_id: UUID
    chain_index1: int
    chain_index2: int

    @field_validator(*["chain_index1", "chain_index2"])
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _non_negative(value)


class ReorderRequest(BaseModel):
    game_id: UUID
    target: ReorderTarget
    from_index: int
    to_index: int

    @field_validator(*["from_index", "to_index"])
    @classmethod
    def validate_index(cls, value: int) -> int:
        return _non_negative(value)


# --- RESPONSE MODELS ---
class DominoView(BaseModel):
    id: str
    value1: str
    value2: str
    cards: list[CardId]
    in_chain: bool


class ChainLinkView(BaseModel):
    domino_id: str
    display_value1: str
    display_value2: str


class GameResponse(BaseModel):
    game_id: UUID
    status: Status
    move_count: int
    tableau: list[list[CardId]]
    pairs: list[list[CardId]]
    dominos: list[DominoView]
    chains: list[list[ChainLinkView]]
    can_undo: bool
    total_chain_length: int
    tableau_card_count: int
