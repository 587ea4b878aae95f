"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from dataclasses import asdict
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """
    Game snapshots stored using SQL / methods implemented using SQLAlchemy.

    ---
    One row per game: every GameModel field maps 1:1 onto a column of the same name.
    """

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        game_db = DBGame(id=new_id, **_columns(game))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.info("Stored new game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the snapshot of an existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            logger.warning("Cannot update game %s: no such record", game_id)
            return None
        for column, value in _columns(game).items():
            setattr(game_db, column, value)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.info("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            **{name: getattr(game_db, name) for name in GameModel.__dataclass_fields__}
        )


def _columns(game: GameModel) -> dict[str, Any]:
    """Column values for a snapshot (deep copies, so the ORM never shares lists with the caller)."""
    columns = asdict(game)
    columns["status"] = str(game.status)
    return columns
