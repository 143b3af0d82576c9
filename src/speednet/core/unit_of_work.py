"""Explicit unit of work over an async SQLAlchemy session factory."""

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from speednet.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class UnitOfWork:
    """Run a closure against one transactional session.

    The transaction commits when the closure returns and rolls back when it
    raises. after_commit hooks run only once the commit has succeeded, which is
    where cache invalidation belongs.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def run(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        after_commit: Callable[[T], None] | None = None,
    ) -> T:
        async with self._session_factory() as db:
            try:
                async with db.begin():
                    result = await work(db)
            except Exception:
                logger.info("unit_of_work.rolled_back")
                raise

        if after_commit is not None:
            after_commit(result)
        return result

    async def read(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Run a read-only closure. Nothing is committed."""
        async with self._session_factory() as db:
            return await work(db)
