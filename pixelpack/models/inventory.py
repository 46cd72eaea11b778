from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from pixelpack.models.card import CardInstance
from pixelpack.models.rarity import CardVariant, Rarity


@dataclass
class InventoryLedger:
    """
    The player's owned card instances, in acquisition order.

    The ledger never deduplicates on its own and never removes a locked
    instance. Removal operations silently skip locked cards.
    """

    cards: list[CardInstance] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[CardInstance]:
        return iter(self.cards)

    def get(self, instance_id: str) -> CardInstance | None:
        """Find an instance by id."""
        for card in self.cards:
            if card.instance_id == instance_id:
                return card
        return None

    def add(self, cards: Iterable[CardInstance]) -> None:
        """Append instances to the collection."""
        self.cards.extend(cards)

    def remove(self, instance_ids: Iterable[str]) -> list[CardInstance]:
        """
        Remove the unlocked instances whose id is in `instance_ids`.

        Locked instances and unknown ids are skipped. Returns the removed
        instances in ledger order.
        """
        wanted = set(instance_ids)
        kept: list[CardInstance] = []
        removed: list[CardInstance] = []
        for card in self.cards:
            if card.instance_id in wanted and not card.is_locked:
                removed.append(card)
            else:
                kept.append(card)
        self.cards = kept
        return removed

    def toggle_lock(self, instance_id: str) -> CardInstance | None:
        """Flip the lock flag. Returns the updated instance, or None if absent."""
        for index, card in enumerate(self.cards):
            if card.instance_id == instance_id:
                updated = replace(card, is_locked=not card.is_locked)
                self.cards[index] = updated
                return updated
        return None

    def duplicate_ids(self) -> list[str]:
        """
        Ids of the duplicates a dedup run would sell.

        Instances are visited by descending value (stable, so ties keep
        acquisition order). The first instance seen for a key is kept and
        marks the key, even when locked. Later instances with a marked key
        are queued unless locked.
        """
        seen: set[tuple[str, Rarity, CardVariant]] = set()
        queued: list[str] = []

        for card in sorted(self.cards, key=lambda c: c.value, reverse=True):
            key = card.dedup_key
            if key not in seen:
                seen.add(key)
                continue
            if not card.is_locked:
                queued.append(card.instance_id)

        return queued

    def unlocked_ids(self) -> list[str]:
        """Ids of every instance that is not locked."""
        return [card.instance_id for card in self.cards if not card.is_locked]

    def replace_art(self, definition_id: str, image_uri: str) -> int:
        """Point every instance of a definition at new art. Returns count updated."""
        updated = 0
        for index, card in enumerate(self.cards):
            if card.definition_id == definition_id:
                self.cards[index] = replace(card, image_uri=image_uri)
                updated += 1
        return updated

    def clear(self) -> None:
        """Drop every instance, locked or not."""
        self.cards.clear()
