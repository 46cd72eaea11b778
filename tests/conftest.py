import asyncio
import copy
from collections.abc import Callable
from typing import Any

import pytest

from pixelpack.models.card import CardDefinition, CardInstance, PackDefinition
from pixelpack.models.rarity import CardVariant, Rarity
from pixelpack.services.valuation import calculate_value


class ScriptedRandom:
    """Random source that replays a fixed list of draws."""

    def __init__(self, values: list[float]) -> None:
        self._values = list(values)

    def random(self) -> float:
        if not self._values:
            raise AssertionError("ScriptedRandom ran out of draws")
        return self._values.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._values)


class MemoryStore:
    """
    In-process key/value store with controllable latency and failures.

    `latencies` is consumed one entry per put, in call order. Completed puts
    are appended to `puts` in completion order.
    """

    def __init__(self) -> None:
        self.data: dict[tuple[str, str], dict[str, Any]] = {}
        self.puts: list[tuple[str, dict[str, Any]]] = []
        self.latencies: list[float] = []
        self.fail_puts = False
        self.fail_gets = False

    async def put(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        delay = self.latencies.pop(0) if self.latencies else 0.0
        if delay:
            await asyncio.sleep(delay)
        if self.fail_puts:
            raise RuntimeError("store unavailable")
        self.data[(namespace, key)] = copy.deepcopy(value)
        self.puts.append((namespace, copy.deepcopy(value)))

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        if self.fail_gets:
            raise RuntimeError("store unavailable")
        value = self.data.get((namespace, key))
        return copy.deepcopy(value) if value is not None else None

    async def clear(self, namespace: str) -> None:
        for stored in [k for k in self.data if k[0] == namespace]:
            del self.data[stored]

    def writes_to(self, namespace: str) -> list[dict[str, Any]]:
        return [value for ns, value in self.puts if ns == namespace]


@pytest.fixture
def scripted() -> Callable[..., ScriptedRandom]:
    """Build a random source from a list of draws."""

    def _build(*values: float) -> ScriptedRandom:
        return ScriptedRandom(list(values))

    return _build


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_card() -> Callable[..., CardInstance]:
    """Build owned card instances with sequential ids."""
    counter = {"n": 0}

    def _make(
        definition_id: str = "c1",
        rarity: Rarity = Rarity.COMMON,
        variant: CardVariant = CardVariant.STANDARD,
        *,
        is_locked: bool = False,
        instance_id: str | None = None,
    ) -> CardInstance:
        counter["n"] += 1
        return CardInstance(
            instance_id=instance_id or f"inst-{counter['n']}",
            definition_id=definition_id,
            name=definition_id.title(),
            theme="Fantasy",
            rarity=rarity,
            variant=variant,
            value=calculate_value(rarity, variant),
            obtained_at=1_700_000_000_000 + counter["n"],
            is_locked=is_locked,
        )

    return _make


@pytest.fixture
def starter_weights() -> dict[Rarity, int]:
    return {
        Rarity.COMMON: 80,
        Rarity.UNCOMMON: 15,
        Rarity.RARE: 4,
        Rarity.EPIC: 1,
        Rarity.LEGENDARY: 0,
    }


@pytest.fixture
def small_catalog() -> list[CardDefinition]:
    return [
        CardDefinition(id="c_bh", name="Black Hole", theme="Cosmic", image_id=70),
        CardDefinition(id="c1", name="Slime", theme="Fantasy", image_id=10),
    ]


@pytest.fixture
def cheap_pack(starter_weights: dict[Rarity, int]) -> PackDefinition:
    return PackDefinition(
        id="half",
        name="Half Pack",
        theme="Basic",
        price=50,
        card_count=2,
        rarity_weights=starter_weights,
    )
