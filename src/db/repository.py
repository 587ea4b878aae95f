"""Storage collaborator for game snapshots (SQLAlchemy implementation in sql_repository.py, tests use a dictionary)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """
    Anything that can keep GameModel snapshots by game ID.

    ---
    Snapshots never carry undo history. Lookups for unknown IDs return None instead of raising,
    the service decides what a missing game means.
    """

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored snapshot, or None when nothing is stored under this ID."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store the snapshot of a freshly dealt game under a new ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the stored snapshot after an accepted transition. None if the ID is unknown."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Forget a game. Returns the last snapshot it had, if any."""
        ...
