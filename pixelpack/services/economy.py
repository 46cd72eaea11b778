"""
Wallet and economy operations.

Every operation mutates the `GameState` synchronously and completely before
returning; none of them await. After a mutation the affected namespace is
scheduled for a debounced write.

FAILURE POLICY:
- Unknown ids, insufficient gold and similar refusals return None/False
  (or an empty result). They never raise.
- Locked cards are silently skipped by every sale path.
- Battle results are applied as given: gold may go negative (debt allowed).
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

from pixelpack.config import CONFIG_NAMESPACE, PROGRESS_NAMESPACE
from pixelpack.models.card import CardInstance, PackDefinition
from pixelpack.models.game_state import (
    AudioTrack,
    CosmeticType,
    GameConfig,
    GameState,
    GameStats,
    SFXType,
)
from pixelpack.models.rarity import best_rarity
from pixelpack.services.card_factory import CardFactory, new_instance_id
from pixelpack.services.catalog import default_config
from pixelpack.services.persistence import PersistenceSynchronizer

logger = logging.getLogger(__name__)

DEFAULT_BATTLE_DECK_LIMIT = 10


@dataclass(frozen=True, slots=True)
class SaleEvent:
    """Gold credited by a sale, battle reward or cosmetic purchase."""

    amount: int


@dataclass(frozen=True, slots=True)
class SaleResult:
    """Outcome of a sale. Empty when nothing was sellable."""

    sold: tuple[CardInstance, ...] = ()
    gold_earned: int = 0

    @property
    def count(self) -> int:
        return len(self.sold)


SaleListener = Callable[[SaleEvent], None]


class EconomyController:
    """
    Coordinates wallet, inventory and stats for one game session.

    Args:
        state: The session's game state, mutated in place
        factory: Card generator used for pack purchases
        synchronizer: Schedules durable writes; None disables persistence
        starting_gold: Wallet balance after a reset
        battle_deck_limit: Maximum battle deck size
    """

    def __init__(
        self,
        state: GameState,
        factory: CardFactory,
        synchronizer: PersistenceSynchronizer | None = None,
        *,
        starting_gold: int = 100,
        battle_deck_limit: int = DEFAULT_BATTLE_DECK_LIMIT,
    ) -> None:
        self.state = state
        self._factory = factory
        self._synchronizer = synchronizer
        self._starting_gold = starting_gold
        self._battle_deck_limit = battle_deck_limit
        self._sale_listeners: list[SaleListener] = []

        if synchronizer is not None:
            synchronizer.bind(state)

    # --- Notifications ---

    def add_sale_listener(self, listener: SaleListener) -> None:
        """Register a callback for sale notifications (coin effects, sounds)."""
        self._sale_listeners.append(listener)

    def _notify_sale(self, amount: int) -> None:
        self.state.coin_events += 1
        event = SaleEvent(amount=amount)
        for listener in self._sale_listeners:
            listener(event)

    def _changed(self, *namespaces: str) -> None:
        if self._synchronizer is None:
            return
        for namespace in namespaces:
            self._synchronizer.schedule(namespace)

    # --- Packs ---

    def buy_pack(self, pack_id: str) -> list[CardInstance] | None:
        """
        Buy and open a pack.

        Returns the new cards, or None if the pack is unknown, unaffordable,
        or cannot generate cards (empty catalog or zero rarity weight). The
        wallet is only debited when cards are generated.
        """
        state = self.state
        pack = state.config.find_pack(pack_id)

        refusal = "unknown_pack" if pack is None else self._purchase_refusal(pack)
        if pack is None or refusal is not None:
            logger.info("pack_purchase_refused", extra={"pack_id": pack_id, "reason": refusal})
            return None

        new_cards = self._factory.open_pack(pack, state.config.cards)

        state.gold -= pack.price
        state.inventory.add(new_cards)
        state.stats.packs_opened += 1
        state.stats.cards_obtained += len(new_cards)
        state.stats.highest_rarity_found = best_rarity(
            state.stats.highest_rarity_found, [card.rarity for card in new_cards]
        )

        logger.info(
            "pack_purchased",
            extra={
                "pack_id": pack.id,
                "price": pack.price,
                "cards": len(new_cards),
                "gold": state.gold,
            },
        )
        self._changed(PROGRESS_NAMESPACE)
        return new_cards

    def _purchase_refusal(self, pack: PackDefinition) -> str | None:
        if pack.price > self.state.gold:
            return "insufficient_gold"
        if pack.card_count > 0 and not self.state.config.cards:
            return "empty_catalog"
        if pack.card_count > 0 and pack.total_weight() <= 0:
            return "empty_weight_table"
        return None

    # --- Selling ---

    def sell_card(self, instance_id: str) -> SaleResult:
        """Sell one card. Locked or unknown cards are left alone."""
        return self.sell_multiple_cards([instance_id])

    def sell_multiple_cards(self, instance_ids: Iterable[str]) -> SaleResult:
        """
        Sell a batch of cards.

        Locked cards in the batch are skipped and not credited. Sold ids are
        also dropped from the battle deck.
        """
        state = self.state
        sold = state.inventory.remove(instance_ids)
        if not sold:
            return SaleResult()

        sold_ids = {card.instance_id for card in sold}
        state.battle_deck = [i for i in state.battle_deck if i not in sold_ids]

        total = sum(card.value for card in sold)
        state.gold += total
        state.stats.total_gold_earned += total

        logger.info("cards_sold", extra={"count": len(sold), "gold_earned": total})
        self._notify_sale(total)
        self._changed(PROGRESS_NAMESPACE)
        return SaleResult(sold=tuple(sold), gold_earned=total)

    def sell_all_duplicates(self) -> SaleResult:
        """Keep the most valuable copy per (definition, rarity, variant); sell the rest."""
        duplicate_ids = self.state.inventory.duplicate_ids()
        logger.info("dedup_run", extra={"queued": len(duplicate_ids)})
        return self.sell_multiple_cards(duplicate_ids)

    def sell_all_inventory(self) -> SaleResult:
        """Sell every unlocked card."""
        return self.sell_multiple_cards(self.state.inventory.unlocked_ids())

    def toggle_lock(self, instance_id: str) -> CardInstance | None:
        """Flip a card's lock. Returns the updated card, or None if absent."""
        card = self.state.inventory.toggle_lock(instance_id)
        if card is not None:
            self._changed(PROGRESS_NAMESPACE)
        return card

    # --- Battles ---

    def toggle_battle_deck(self, instance_id: str) -> bool:
        """
        Add or remove a card from the battle deck.

        Additions beyond the deck limit are refused. Returns whether the card
        is in the deck afterwards.
        """
        deck = self.state.battle_deck
        if instance_id in deck:
            deck.remove(instance_id)
            self._changed(PROGRESS_NAMESPACE)
            return False

        if len(deck) >= self._battle_deck_limit:
            return False

        deck.append(instance_id)
        self._changed(PROGRESS_NAMESPACE)
        return True

    def record_battle_result(
        self, won: bool, gold_delta: int, card_won: CardInstance | None = None
    ) -> None:
        """
        Apply a finished battle.

        `gold_delta` is applied unclamped, so a loss can leave the wallet
        negative. A won card whose id is already owned gets a fresh id. There
        is no replay protection: call once per battle.
        """
        state = self.state
        state.gold += gold_delta

        if card_won is not None:
            if state.inventory.get(card_won.instance_id) is not None:
                card_won = replace(card_won, instance_id=new_instance_id())
            state.inventory.add([card_won])
            state.stats.cards_obtained += 1

        if won:
            state.stats.battles_won += 1
        else:
            state.stats.battles_lost += 1

        if gold_delta > 0:
            state.stats.total_gold_earned += gold_delta
            self._notify_sale(gold_delta)

        logger.info(
            "battle_recorded",
            extra={"won": won, "gold_delta": gold_delta, "gold": state.gold},
        )
        self._changed(PROGRESS_NAMESPACE)

    # --- Resets ---

    def reset_progress(self) -> None:
        """
        Start over with starting gold, no cards and zeroed stats.

        The config is kept. Progress is written immediately, bypassing the
        debounce window.
        """
        state = self.state
        state.gold = self._starting_gold
        state.inventory.clear()
        state.battle_deck.clear()
        state.stats = GameStats()

        logger.info("progress_reset", extra={"gold": state.gold})
        if self._synchronizer is not None:
            self._synchronizer.write_now(PROGRESS_NAMESPACE)

    async def factory_reset(self) -> None:
        """
        Erase all durable storage and return to a brand-new game.

        This cannot be undone.
        """
        if self._synchronizer is not None:
            await self._synchronizer.clear_all()

        state = self.state
        state.gold = self._starting_gold
        state.inventory.clear()
        state.battle_deck.clear()
        state.stats = GameStats()
        state.config = default_config()
        state.coin_events = 0

        logger.warning("factory_reset")

    # --- Config ---

    def update_config(self, config: GameConfig) -> None:
        """Replace the whole config (admin edits)."""
        self.state.config = config
        self._changed(CONFIG_NAMESPACE)

    def update_card_image(self, card_id: str, image_uri: str) -> bool:
        """
        Set uploaded art for a definition and every owned copy of it.

        Only art changes; owned values are untouched. Returns False if the
        definition is unknown.
        """
        config = self.state.config
        if config.find_card(card_id) is None:
            return False

        config.cards = [
            replace(card, image_uri=image_uri) if card.id == card_id else card
            for card in config.cards
        ]
        updated = self.state.inventory.replace_art(card_id, image_uri)

        self._changed(CONFIG_NAMESPACE)
        if updated:
            self._changed(PROGRESS_NAMESPACE)
        return True

    def update_custom_sfx(self, sfx_type: SFXType, data_uri: str) -> None:
        self.state.config.custom_sfx[sfx_type] = data_uri
        self._changed(CONFIG_NAMESPACE)

    def update_card_back(self, data_uri: str) -> None:
        self.state.config.active_card_back_uri = data_uri
        self._changed(CONFIG_NAMESPACE)

    def update_game_logo(self, data_uri: str) -> None:
        self.state.config.game_logo_uri = data_uri
        self._changed(CONFIG_NAMESPACE)

    def add_audio_track(self, track: AudioTrack) -> None:
        self.state.config.audio_tracks.append(track)
        self._changed(CONFIG_NAMESPACE)

    def remove_audio_track(self, track_id: str) -> bool:
        config = self.state.config
        remaining = [t for t in config.audio_tracks if t.id != track_id]
        if len(remaining) == len(config.audio_tracks):
            return False
        config.audio_tracks = remaining
        self._changed(CONFIG_NAMESPACE)
        return True

    # --- Cosmetics ---

    def buy_cosmetic(self, item_id: str) -> bool:
        """
        Buy a cosmetic.

        Refused (False) if unknown, already owned, or unaffordable.
        """
        state = self.state
        item = state.config.find_cosmetic(item_id)
        if item is None or item.purchased or state.gold < item.price:
            return False

        state.gold -= item.price
        state.config.cosmetics = [
            replace(c, purchased=True) if c.id == item_id else c for c in state.config.cosmetics
        ]

        logger.info("cosmetic_purchased", extra={"item_id": item_id, "price": item.price})
        self._notify_sale(item.price)
        self._changed(CONFIG_NAMESPACE, PROGRESS_NAMESPACE)
        return True

    def equip_cosmetic(self, item_id: str) -> bool:
        """Equip an owned cosmetic. Empty cosmetic data clears the slot."""
        config = self.state.config
        item = config.find_cosmetic(item_id)
        if item is None or not item.purchased:
            return False

        if item.type is CosmeticType.CARD_BACK:
            config.active_card_back_uri = item.data or None
        else:
            config.active_border_style = item.data or None

        self._changed(CONFIG_NAMESPACE)
        return True
