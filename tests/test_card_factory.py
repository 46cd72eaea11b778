"""Tests for card generation."""

import random
from dataclasses import replace

import pytest

from pixelpack.models.card import CardDefinition
from pixelpack.models.rarity import CardVariant, Rarity
from pixelpack.services.card_factory import CardFactory, EmptyCatalogError
from pixelpack.services.catalog import DEFAULT_CARDS, DEFAULT_PACKS


def fixed_clock() -> int:
    return 1_700_000_000_000


class TestGenerate:
    def test_composes_all_stages(self, scripted, small_catalog, cheap_pack) -> None:
        """Rarity, definition, variant and value come from one draw sequence."""
        # rarity 50/100 -> COMMON, definition 0 -> Black Hole (Cosmic),
        # special hit, Cosmic pool hit, no override
        rng = scripted(0.5, 0.0, 0.05, 0.1, 0.5)
        factory = CardFactory(rng, clock=fixed_clock, id_factory=lambda: "fixed-id")

        card = factory.generate(cheap_pack, small_catalog)

        assert card.instance_id == "fixed-id"
        assert card.definition_id == "c_bh"
        assert card.name == "Black Hole"
        assert card.theme == "Cosmic"
        assert card.image_id == 70
        assert card.rarity is Rarity.COMMON
        assert card.variant is CardVariant.COSMIC
        assert card.value == 50
        assert card.obtained_at == 1_700_000_000_000
        assert card.is_locked is False
        assert card.is_foil is True
        assert rng.remaining == 0

    def test_definition_drawn_from_whole_catalog(self, scripted, small_catalog, cheap_pack) -> None:
        """The pack theme does not restrict which definition is drawn."""
        factory = CardFactory(scripted(0.0, 0.99, 0.5, 0.5))

        card = factory.generate(cheap_pack, small_catalog)

        assert card.definition_id == "c1"
        assert card.variant is CardVariant.STANDARD
        assert card.value == 5

    def test_empty_catalog_rejected(self, scripted, cheap_pack) -> None:
        factory = CardFactory(scripted(0.5, 0.5))

        with pytest.raises(EmptyCatalogError):
            factory.generate(cheap_pack, [])

    def test_snapshots_uploaded_art(self, scripted, cheap_pack) -> None:
        catalog = [CardDefinition(id="x", name="X", theme="Retro", image_uri="data:art")]
        factory = CardFactory(scripted(0.0, 0.0, 0.9, 0.9))

        card = factory.generate(cheap_pack, catalog)

        assert card.image_uri == "data:art"


class TestOpenPack:
    def test_generates_card_count(self) -> None:
        factory = CardFactory(random.Random(3))
        diamond = next(p for p in DEFAULT_PACKS if p.theme == "Diamond")

        cards = factory.open_pack(diamond, list(DEFAULT_CARDS))

        assert len(cards) == diamond.card_count

    def test_instance_ids_unique(self) -> None:
        factory = CardFactory(random.Random(5))
        pack = DEFAULT_PACKS[0]

        ids = [c.instance_id for _ in range(100) for c in factory.open_pack(pack, DEFAULT_CARDS)]

        assert len(set(ids)) == len(ids)

    def test_zero_card_pack_draws_nothing(self, scripted, cheap_pack) -> None:
        empty = replace(cheap_pack, card_count=0)

        assert CardFactory(scripted()).open_pack(empty, DEFAULT_CARDS) == []

    def test_values_frozen_against_catalog_edits(self, small_catalog, cheap_pack) -> None:
        """Editing a definition later never changes an owned card."""
        factory = CardFactory(random.Random(11))
        card = factory.generate(cheap_pack, small_catalog)
        original_value = card.value

        small_catalog[:] = [replace(d, name="Renamed") for d in small_catalog]

        assert card.value == original_value
        assert card.name != "Renamed"
