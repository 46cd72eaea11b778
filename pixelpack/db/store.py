"""
Durable key/value store used by the persistence synchronizer.

Every call runs in its own session and transaction, so each put, get and
clear succeeds or fails independently.
"""

from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pixelpack.db.operations import clear_namespace, get_record, put_record


class KeyValueStore(Protocol):
    """Async namespaced key/value storage."""

    async def put(self, namespace: str, key: str, value: dict[str, Any]) -> None: ...

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None: ...

    async def clear(self, namespace: str) -> None: ...


class DatabaseStore:
    """`KeyValueStore` backed by the `stored_records` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def put(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        async with self._session_factory() as session, session.begin():
            await put_record(session, namespace, key, value)

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            record = await get_record(session, namespace, key)
            return dict(record.value) if record else None

    async def clear(self, namespace: str) -> None:
        async with self._session_factory() as session, session.begin():
            await clear_namespace(session, namespace)

    async def ping(self) -> None:
        """Round-trip a trivial query. Raises if the database is unreachable."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
