"""
Database CRUD operations.

Async functions for reading, writing and clearing namespaced records.
Callers own the session and decide when to commit.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pixelpack.models.db import StoredRecordDB


async def get_record(session: AsyncSession, namespace: str, key: str) -> StoredRecordDB | None:
    """
    Get a record by namespace and key.

    Returns None if nothing is stored there.
    """
    result = await session.execute(
        select(StoredRecordDB).where(
            StoredRecordDB.namespace == namespace,
            StoredRecordDB.key == key,
        )
    )
    return result.scalar_one_or_none()


async def put_record(
    session: AsyncSession,
    namespace: str,
    key: str,
    value: dict[str, Any],
) -> StoredRecordDB:
    """
    Insert or replace a record.

    The stored value is replaced wholesale.
    """
    existing = await get_record(session, namespace, key)

    if existing:
        existing.value = value
        await session.flush()
        return existing

    record = StoredRecordDB(namespace=namespace, key=key, value=value)
    session.add(record)
    await session.flush()
    return record


async def clear_namespace(session: AsyncSession, namespace: str) -> int:
    """
    Delete every record in a namespace.

    Returns the number of deleted records.
    """
    result = await session.execute(
        delete(StoredRecordDB).where(StoredRecordDB.namespace == namespace)
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]
