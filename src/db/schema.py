"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    tableau: Mapped[list[list[str]]] = mapped_column(JSON)
    pairs: Mapped[list[list[str]]] = mapped_column(JSON, default=list)
    dominos: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    chains: Mapped[list[list[dict[str, str]]]] = mapped_column(JSON, default=list)
    move_count: Mapped[int] = mapped_column(default=0)
    status: Mapped[str] = mapped_column(default=Status.IN_PROGRESS.value)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
