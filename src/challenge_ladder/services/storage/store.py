"""Ladder storage layer backed by SQLModel on DuckDB."""

from __future__ import annotations

import asyncio
import gc
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import structlog
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

from challenge_ladder.core.config import LadderConfig

from .activity_repository import ActivityRepository
from .challenge_repository import ChallengeRepository
from .ladder_repository import LadderRepository
from .match_repository import MatchRepository

logger = structlog.get_logger()

T = TypeVar("T")


class LadderStore:
    """Persistence layer for ladder, challenge, match and activity records.

    Reads go through the per-table repositories. Every mutation runs as one
    read-validate-write unit inside ``run_transaction``: writes are serialized
    by a store-wide lock, the callback reads current state, validates, mutates,
    and the session commits once at the end. An exception rolls the whole unit
    back.
    """

    def __init__(self, config: LadderConfig, db_path: str | Path | None = None) -> None:
        """Initialize ladder store.

        Args:
            config: Ladder configuration.
            db_path: Optional database file (defaults to the configured path).
        """
        self.config = config
        self.db_path = Path(db_path) if db_path is not None else config.get_database_path()
        self._write_lock = threading.Lock()
        self._engine = None
        self._init_db()

        self.ladder = LadderRepository(self._engine)
        self.challenges = ChallengeRepository(self._engine)
        self.matches = MatchRepository(self._engine)
        self.activity = ActivityRepository(self._engine)

    def _init_db(self) -> None:
        """Initialize DuckDB database and create tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        db_url = f"duckdb:///{self.db_path}"
        # Use NullPool to avoid connection pooling issues on Windows
        self._engine = create_engine(db_url, poolclass=NullPool)
        SQLModel.metadata.create_all(self._engine)
        logger.info("store_init", path=str(self.db_path))

    def transaction_sync(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` in a single committed transaction on the calling thread."""
        with self._write_lock, Session(self._engine, expire_on_commit=False) as session:
            try:
                result = fn(session)
                session.commit()
            except Exception:
                session.rollback()
                raise
            return result

    async def run_transaction(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` in a single committed transaction on a worker thread."""
        return await asyncio.to_thread(self.transaction_sync, fn)

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine:
            self._engine.dispose()

    def close_sync(self) -> None:
        """Synchronously dispose of the database engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None

        gc.collect()
