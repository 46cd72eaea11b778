"""
Debounced persistence of the game state.

Two namespaces are persisted independently, each with its own debounce
timer:

- config: catalog, cosmetics, audio (window: config_debounce_seconds)
- progress: wallet, inventory, stats, battle deck (window: progress_debounce_seconds)

Every mutation reschedules its namespace's timer. When a timer fires, one
write is dispatched. Writes are never cancelled once dispatched.

ORDERING:
Writes to the same namespace are serialized with a lock, and each write
serializes the state only after acquiring it. Completions are therefore
totally ordered, and the last write to complete always carries the state as
it was when that write started. A slow write can delay later ones but
cannot land on top of them with older data.

FAILURES:
Store errors are logged and swallowed. In-memory state stays
authoritative; nothing is retried. Mutations made after the last
successful write are lost if the process dies.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from pixelpack.config import CONFIG_NAMESPACE, MAIN_KEY, PROGRESS_NAMESPACE
from pixelpack.db.snapshot import (
    config_from_record,
    config_to_record,
    progress_from_record,
    progress_to_record,
)
from pixelpack.db.store import KeyValueStore
from pixelpack.models.game_state import GameState
from pixelpack.services.catalog import default_config

logger = logging.getLogger(__name__)

NAMESPACES = (CONFIG_NAMESPACE, PROGRESS_NAMESPACE)

_SERIALIZERS: dict[str, Callable[[GameState], dict[str, Any]]] = {
    CONFIG_NAMESPACE: lambda state: config_to_record(state.config),
    PROGRESS_NAMESPACE: progress_to_record,
}


class PersistenceSynchronizer:
    """
    Owns the debounce timers and in-flight writes for one game session.

    Scheduling requires a running event loop. Nothing is written until a
    state is bound, either by `load()` or `bind()`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        config_debounce: float,
        progress_debounce: float,
        starting_gold: int,
    ) -> None:
        self._store = store
        self._delays = {
            CONFIG_NAMESPACE: config_debounce,
            PROGRESS_NAMESPACE: progress_debounce,
        }
        self._starting_gold = starting_gold
        self._state: GameState | None = None
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._locks = {namespace: asyncio.Lock() for namespace in NAMESPACES}
        self._in_flight: set[asyncio.Task[bool]] = set()

    def bind(self, state: GameState) -> None:
        """Set the state that fired writes serialize."""
        self._state = state

    def is_pending(self, namespace: str) -> bool:
        """Whether a debounce timer is waiting to fire for `namespace`."""
        return namespace in self._timers

    @property
    def in_flight(self) -> int:
        """Number of dispatched writes that have not completed."""
        return len(self._in_flight)

    # --- Load ---

    async def load(self) -> GameState:
        """
        Load both namespaces and rebuild the game state.

        The saved catalog is reconciled against this build's defaults. Each
        namespace falls back independently: unreadable config means default
        config, unreadable progress means a new game on the loaded config.
        The returned state is bound for subsequent writes.
        """
        try:
            config = config_from_record(await self._store.get(CONFIG_NAMESPACE, MAIN_KEY))
        except Exception:
            logger.exception("Failed to load saved config, using defaults")
            config = default_config()

        try:
            progress_record = await self._store.get(PROGRESS_NAMESPACE, MAIN_KEY)
            state = progress_from_record(progress_record, config, self._starting_gold)
        except Exception:
            logger.exception("Failed to load saved progress, starting a new game")
            state = GameState(gold=self._starting_gold, config=config)

        self.bind(state)
        logger.info(
            "game_loaded",
            extra={
                "gold": state.gold,
                "inventory_size": len(state.inventory),
                "catalog_size": len(state.config.cards),
            },
        )
        return state

    # --- Writes ---

    def schedule(self, namespace: str) -> None:
        """Restart the debounce timer for `namespace`."""
        if self._state is None:
            logger.debug("Ignoring %s write before state is bound", namespace)
            return

        loop = asyncio.get_running_loop()
        self._cancel_timer(namespace)
        self._timers[namespace] = loop.call_later(self._delays[namespace], self._fire, namespace)

    def write_now(self, namespace: str) -> asyncio.Task[bool]:
        """Skip the debounce window: cancel any pending timer and dispatch a write."""
        self._cancel_timer(namespace)
        return self._dispatch(namespace)

    async def flush(self) -> None:
        """Fire every pending timer immediately and wait for all writes to finish."""
        for namespace in list(self._timers):
            self.write_now(namespace)
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait until no write is in flight."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight))

    async def clear_all(self) -> None:
        """
        Erase every namespace from the store.

        Pending timers are cancelled and in-flight writes are awaited first,
        so nothing written before the clear can land after it.
        """
        for namespace in list(self._timers):
            self._cancel_timer(namespace)
        await self.wait_idle()

        for namespace in NAMESPACES:
            async with self._locks[namespace]:
                try:
                    await self._store.clear(namespace)
                except Exception:
                    logger.exception("Failed to clear %s storage", namespace)

    async def aclose(self) -> None:
        """Flush pending writes before shutdown."""
        await self.flush()

    def _cancel_timer(self, namespace: str) -> None:
        timer = self._timers.pop(namespace, None)
        if timer is not None:
            timer.cancel()

    def _fire(self, namespace: str) -> None:
        self._timers.pop(namespace, None)
        self._dispatch(namespace)

    def _dispatch(self, namespace: str) -> asyncio.Task[bool]:
        task = asyncio.get_running_loop().create_task(self._write(namespace))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        logger.debug("Dispatched %s write", namespace)
        return task

    async def _write(self, namespace: str) -> bool:
        """Serialize the bound state and put it. Returns False if the store failed."""
        async with self._locks[namespace]:
            if self._state is None:
                return False

            record = _SERIALIZERS[namespace](self._state)
            try:
                await self._store.put(namespace, MAIN_KEY, record)
            except Exception:
                logger.exception("Failed to save %s to storage", namespace)
                return False

        logger.debug("Saved %s", namespace)
        return True
