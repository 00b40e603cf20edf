"""Read-side base for the ladder repositories."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from sqlmodel import Session

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlmodel.sql.expression import SelectOfScalar

T = TypeVar("T")


class AsyncRepository:
    """Run short read-only sessions on a worker thread.

    Mutations never go through a repository; they run inside
    ``LadderStore.run_transaction`` so reads and writes of one operation share
    a session.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    async def _run_session(self, fn: Callable[[Session], T]) -> T:
        def _run() -> T:
            with Session(self._engine) as session:
                return fn(session)

        return await asyncio.to_thread(_run)

    async def _all(self, statement: SelectOfScalar[T]) -> list[T]:
        """Execute a select and return every row."""
        return await self._run_session(lambda session: list(session.exec(statement).all()))
