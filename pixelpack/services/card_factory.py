"""
Card generation.

Turns a pack into owned card instances: rarity from the pack's weights,
definition drawn uniformly from the whole catalog (the pack theme does not
constrain it), variant from the decision table, value frozen at creation.
"""

import time
import uuid
from collections.abc import Callable, Sequence

from pixelpack.models.card import CardDefinition, CardInstance, PackDefinition
from pixelpack.services.sampling import RandomSource, sample_rarity, select_variant
from pixelpack.services.valuation import calculate_value


class EmptyCatalogError(ValueError):
    """Raised when cards are generated from a catalog with no definitions."""


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


def new_instance_id() -> str:
    return uuid.uuid4().hex


class CardFactory:
    """
    Generates card instances.

    The random source, clock and id generator are injectable so generation
    can be replayed in tests.
    """

    def __init__(
        self,
        rng: RandomSource,
        clock: Callable[[], int] = epoch_millis,
        id_factory: Callable[[], str] = new_instance_id,
    ) -> None:
        self._rng = rng
        self._clock = clock
        self._id_factory = id_factory

    def pick_definition(self, catalog: Sequence[CardDefinition]) -> CardDefinition:
        """Draw one definition uniformly from the catalog."""
        if not catalog:
            raise EmptyCatalogError("Cannot generate a card from an empty catalog")
        index = int(self._rng.random() * len(catalog))
        # random() < 1.0, but guard the multiply against rounding up
        return catalog[min(index, len(catalog) - 1)]

    def generate(self, pack: PackDefinition, catalog: Sequence[CardDefinition]) -> CardInstance:
        """Generate a single card from `pack`."""
        rarity = sample_rarity(pack.rarity_weights, self._rng)
        definition = self.pick_definition(catalog)
        variant = select_variant(pack.theme, definition.theme, self._rng)

        return CardInstance(
            instance_id=self._id_factory(),
            definition_id=definition.id,
            name=definition.name,
            theme=definition.theme,
            rarity=rarity,
            variant=variant,
            value=calculate_value(rarity, variant),
            obtained_at=self._clock(),
            is_locked=False,
            image_id=definition.image_id,
            image_uri=definition.image_uri,
        )

    def open_pack(
        self, pack: PackDefinition, catalog: Sequence[CardDefinition]
    ) -> list[CardInstance]:
        """Generate `pack.card_count` cards."""
        return [self.generate(pack, catalog) for _ in range(pack.card_count)]
