"""Tests for the economy controller."""

import random
from dataclasses import replace

import pytest

from pixelpack.config import CONFIG_NAMESPACE, PROGRESS_NAMESPACE
from pixelpack.models.card import PackDefinition
from pixelpack.models.game_state import AudioTrack, GameConfig, GameState, SFXType
from pixelpack.models.inventory import InventoryLedger
from pixelpack.models.rarity import Rarity
from pixelpack.services.card_factory import CardFactory
from pixelpack.services.catalog import default_config
from pixelpack.services.economy import EconomyController, SaleEvent
from pixelpack.services.persistence import PersistenceSynchronizer


@pytest.fixture
def config(small_catalog, cheap_pack) -> GameConfig:
    zero_weights = PackDefinition(
        id="dud",
        name="Dud",
        theme="Basic",
        price=10,
        card_count=3,
        rarity_weights={rarity: 0 for rarity in Rarity},
    )
    return GameConfig(cards=small_catalog, packs=[cheap_pack, zero_weights])


@pytest.fixture
def state(config) -> GameState:
    return GameState(gold=100, config=config)


@pytest.fixture
def economy(state) -> EconomyController:
    return EconomyController(state, CardFactory(random.Random(42)))


class TestBuyPack:
    def test_debits_until_unaffordable(self, economy) -> None:
        """A 50-gold pack can be bought twice from 100 gold."""
        first = economy.buy_pack("half")
        assert first is not None and len(first) == 2
        assert economy.state.gold == 50

        second = economy.buy_pack("half")
        assert second is not None
        assert economy.state.gold == 0
        assert len(economy.state.inventory) == 4

        assert economy.buy_pack("half") is None
        assert economy.state.gold == 0
        assert len(economy.state.inventory) == 4

    def test_updates_stats(self, economy) -> None:
        cards = economy.buy_pack("half")

        stats = economy.state.stats
        assert stats.packs_opened == 1
        assert stats.cards_obtained == 2
        assert stats.highest_rarity_found == max((c.rarity for c in cards), key=lambda r: r.rank)

    def test_highest_rarity_only_rises(self, economy) -> None:
        economy.state.stats.highest_rarity_found = Rarity.LEGENDARY

        economy.buy_pack("half")

        assert economy.state.stats.highest_rarity_found is Rarity.LEGENDARY

    def test_unknown_pack(self, economy) -> None:
        assert economy.buy_pack("nope") is None
        assert economy.state.gold == 100

    def test_zero_weight_pack_not_debited(self, economy) -> None:
        """A pack that cannot roll a rarity is refused before charging."""
        assert economy.buy_pack("dud") is None
        assert economy.state.gold == 100
        assert economy.state.stats.packs_opened == 0

    def test_empty_catalog_not_debited(self, economy) -> None:
        economy.state.config.cards = []

        assert economy.buy_pack("half") is None
        assert economy.state.gold == 100

    def test_exact_price_affordable(self, economy) -> None:
        economy.state.gold = 50

        assert economy.buy_pack("half") is not None
        assert economy.state.gold == 0


class TestSelling:
    def test_sell_card_credits_value(self, economy, make_card) -> None:
        card = make_card(rarity=Rarity.RARE)
        economy.state.inventory.add([card])

        result = economy.sell_card(card.instance_id)

        assert result.count == 1
        assert result.gold_earned == 75
        assert economy.state.gold == 175
        assert economy.state.stats.total_gold_earned == 75
        assert len(economy.state.inventory) == 0

    def test_locked_cards_excluded(self, economy, make_card) -> None:
        locked = make_card(rarity=Rarity.EPIC, is_locked=True)
        free = make_card()
        economy.state.inventory.add([locked, free])

        result = economy.sell_multiple_cards([locked.instance_id, free.instance_id])

        assert [c.instance_id for c in result.sold] == [free.instance_id]
        assert economy.state.gold == 105
        assert economy.state.inventory.get(locked.instance_id) is not None

    def test_sold_cards_leave_battle_deck(self, economy, make_card) -> None:
        a, b = make_card(), make_card()
        economy.state.inventory.add([a, b])
        economy.toggle_battle_deck(a.instance_id)
        economy.toggle_battle_deck(b.instance_id)

        economy.sell_card(a.instance_id)

        assert economy.state.battle_deck == [b.instance_id]

    def test_listeners_notified(self, economy, make_card) -> None:
        events: list[SaleEvent] = []
        economy.add_sale_listener(events.append)
        card = make_card()
        economy.state.inventory.add([card])

        economy.sell_card(card.instance_id)

        assert events == [SaleEvent(amount=5)]
        assert economy.state.coin_events == 1

    def test_empty_sale_is_silent(self, economy, make_card) -> None:
        """Nothing sellable means no gold, no event."""
        events: list[SaleEvent] = []
        economy.add_sale_listener(events.append)
        locked = make_card(is_locked=True)
        economy.state.inventory.add([locked])

        result = economy.sell_card(locked.instance_id)

        assert result.count == 0
        assert result.gold_earned == 0
        assert events == []
        assert economy.state.coin_events == 0
        assert economy.state.gold == 100

    def test_sell_all_duplicates(self, economy, make_card) -> None:
        keep = make_card("c1")
        dupes = [make_card("c1"), make_card("c1")]
        other = make_card("c2")
        economy.state.inventory.add([keep, *dupes, other])

        result = economy.sell_all_duplicates()

        assert {c.instance_id for c in result.sold} == {d.instance_id for d in dupes}
        assert [c.instance_id for c in economy.state.inventory] == [
            keep.instance_id,
            other.instance_id,
        ]
        assert economy.sell_all_duplicates().count == 0

    def test_sell_all_inventory_keeps_locked(self, economy, make_card) -> None:
        locked = make_card(is_locked=True)
        economy.state.inventory.add([make_card(), make_card(), locked])

        result = economy.sell_all_inventory()

        assert result.count == 2
        assert list(economy.state.inventory) == [locked]
        assert economy.state.gold == 110

    def test_toggle_lock(self, economy, make_card) -> None:
        card = make_card()
        economy.state.inventory.add([card])

        assert economy.toggle_lock(card.instance_id).is_locked is True
        assert economy.toggle_lock("missing") is None


class TestBattles:
    def test_deck_capped(self, economy, make_card) -> None:
        cards = [make_card() for _ in range(11)]
        economy.state.inventory.add(cards)

        added = [economy.toggle_battle_deck(c.instance_id) for c in cards]

        assert added == [True] * 10 + [False]
        assert len(economy.state.battle_deck) == 10

    def test_toggle_removes(self, economy, make_card) -> None:
        card = make_card()
        economy.state.inventory.add([card])

        assert economy.toggle_battle_deck(card.instance_id) is True
        assert economy.toggle_battle_deck(card.instance_id) is False
        assert economy.state.battle_deck == []

    def test_custom_limit(self, state, make_card) -> None:
        economy = EconomyController(state, CardFactory(random.Random(1)), battle_deck_limit=1)

        assert economy.toggle_battle_deck("a") is True
        assert economy.toggle_battle_deck("b") is False

    def test_loss_can_go_negative(self, economy) -> None:
        """Debt is allowed: losses are applied unclamped."""
        economy.state.gold = 10

        economy.record_battle_result(False, -15)

        assert economy.state.gold == -5
        assert economy.state.stats.battles_lost == 1
        assert economy.state.stats.total_gold_earned == 0
        assert economy.state.coin_events == 0

    def test_win_credits_and_awards_card(self, economy, make_card) -> None:
        prize = make_card("c9", Rarity.EPIC)

        economy.record_battle_result(True, 40, card_won=prize)

        assert economy.state.gold == 140
        assert economy.state.stats.battles_won == 1
        assert economy.state.stats.total_gold_earned == 40
        assert economy.state.stats.cards_obtained == 1
        assert economy.state.inventory.get(prize.instance_id) == prize
        assert economy.state.coin_events == 1

    def test_won_card_with_owned_id_gets_fresh_id(self, economy, make_card) -> None:
        """Instance ids stay unique even when a prize reuses an owned id."""
        owned = make_card(instance_id="dup", is_locked=True)
        economy.state.inventory.add([owned])

        economy.record_battle_result(True, 10, card_won=make_card(instance_id="dup"))

        ids = [c.instance_id for c in economy.state.inventory]
        assert len(ids) == 2
        assert len(set(ids)) == 2
        assert economy.sell_card("dup").count == 0
        assert economy.state.inventory.get("dup") == owned


class TestResets:
    def test_reset_progress_keeps_config(self, economy, make_card) -> None:
        economy.state.inventory.add([make_card(is_locked=True)])
        economy.state.battle_deck.append("x")
        economy.state.stats.packs_opened = 3
        economy.state.gold = 7
        catalog = economy.state.config

        economy.reset_progress()

        assert economy.state.gold == 100
        assert len(economy.state.inventory) == 0
        assert economy.state.battle_deck == []
        assert economy.state.stats.packs_opened == 0
        assert economy.state.config is catalog

    async def test_reset_progress_writes_immediately(self, state, memory_store) -> None:
        sync = PersistenceSynchronizer(
            memory_store, config_debounce=60, progress_debounce=60, starting_gold=100
        )
        economy = EconomyController(state, CardFactory(random.Random(1)), sync)
        economy.state.gold = 3
        economy.record_battle_result(True, 1)
        assert sync.is_pending(PROGRESS_NAMESPACE)

        economy.reset_progress()
        await sync.wait_idle()

        assert not sync.is_pending(PROGRESS_NAMESPACE)
        assert memory_store.writes_to(PROGRESS_NAMESPACE)[-1]["gold"] == 100

    async def test_factory_reset_clears_storage(self, state, memory_store, make_card) -> None:
        sync = PersistenceSynchronizer(
            memory_store, config_debounce=60, progress_debounce=60, starting_gold=100
        )
        economy = EconomyController(state, CardFactory(random.Random(1)), sync)
        economy.state.inventory.add([make_card()])
        economy.update_card_back("data:back")
        await sync.flush()
        assert memory_store.data

        await economy.factory_reset()

        assert memory_store.data == {}
        assert economy.state.gold == 100
        assert len(economy.state.inventory) == 0
        assert economy.state.config == default_config()


class TestConfigEdits:
    def test_update_card_image_keeps_values(self, economy, make_card) -> None:
        owned = make_card("c1", Rarity.RARE)
        economy.state.inventory.add([owned])

        assert economy.update_card_image("c1", "data:slime") is True

        assert economy.state.config.find_card("c1").image_uri == "data:slime"
        updated = economy.state.inventory.get(owned.instance_id)
        assert updated.image_uri == "data:slime"
        assert updated.value == owned.value

    def test_update_card_image_unknown(self, economy) -> None:
        assert economy.update_card_image("missing", "data:x") is False

    def test_update_config_replaces(self, economy) -> None:
        fresh = default_config()

        economy.update_config(fresh)

        assert economy.state.config is fresh

    def test_sounds_and_branding(self, economy) -> None:
        economy.update_custom_sfx(SFXType.SELL, "data:ding")
        economy.update_card_back("data:back")
        economy.update_game_logo("data:logo")

        config = economy.state.config
        assert config.custom_sfx == {SFXType.SELL: "data:ding"}
        assert config.active_card_back_uri == "data:back"
        assert config.game_logo_uri == "data:logo"

    def test_audio_tracks(self, economy) -> None:
        economy.add_audio_track(AudioTrack(id="t1", name="Theme", data_uri="data:mp3"))

        assert [t.id for t in economy.state.config.audio_tracks] == ["t1"]
        assert economy.remove_audio_track("t1") is True
        assert economy.remove_audio_track("t1") is False

    async def test_config_edits_schedule_config_namespace(self, state, memory_store) -> None:
        sync = PersistenceSynchronizer(
            memory_store, config_debounce=60, progress_debounce=60, starting_gold=100
        )
        economy = EconomyController(state, CardFactory(random.Random(1)), sync)

        economy.update_game_logo("data:logo")

        assert sync.is_pending(CONFIG_NAMESPACE)
        assert not sync.is_pending(PROGRESS_NAMESPACE)
        await sync.flush()
        assert memory_store.writes_to(CONFIG_NAMESPACE)[-1]["gameLogoUri"] == "data:logo"


class TestCosmetics:
    @pytest.fixture
    def shop(self) -> EconomyController:
        state = GameState(gold=600, inventory=InventoryLedger(), config=default_config())
        return EconomyController(state, CardFactory(random.Random(1)))

    def test_buy_and_equip_card_back(self, shop) -> None:
        assert shop.buy_cosmetic("cb_red") is True

        assert shop.state.gold == 100
        assert shop.state.config.find_cosmetic("cb_red").purchased is True
        assert shop.equip_cosmetic("cb_red") is True
        assert shop.state.config.active_card_back_uri == shop.state.config.find_cosmetic(
            "cb_red"
        ).data

    def test_cannot_buy_twice(self, shop) -> None:
        shop.buy_cosmetic("bs_rounded")

        assert shop.buy_cosmetic("bs_rounded") is False
        assert shop.state.gold == 100

    def test_unaffordable(self, shop) -> None:
        assert shop.buy_cosmetic("cb_gold") is False
        assert shop.state.gold == 600

    def test_equip_requires_ownership(self, shop) -> None:
        assert shop.equip_cosmetic("bs_neon") is False
        assert shop.equip_cosmetic("missing") is False

    def test_equip_default_clears_slot(self, shop) -> None:
        shop.buy_cosmetic("bs_rounded")
        shop.equip_cosmetic("bs_rounded")
        assert shop.state.config.active_border_style == "rounded-3xl"

        shop.equip_cosmetic("bs_default")

        assert shop.state.config.active_border_style is None

    def test_zero_price_cosmetic(self, shop) -> None:
        shop.state.config.cosmetics = [
            replace(c, price=0) if c.id == "cb_gold" else c for c in shop.state.config.cosmetics
        ]

        assert shop.buy_cosmetic("cb_gold") is True
        assert shop.state.gold == 600
