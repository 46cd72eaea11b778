"""
Snapshot serialization.

Converts the game state to and from the JSON records kept in the durable
store. Records use the camelCase field names of the save format:

    config   -> main -> {cards, packs, audioTracks, customSFX, activeCardBackUri,
                         activeBorderStyle, gameLogoUri, cosmetics}
    progress -> main -> {gold, inventory, stats, battleDeck}

Loading is tolerant of older saves: fields added by later versions are
backfilled with defaults instead of failing the load.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pixelpack.models.card import CardDefinition, CardInstance, PackDefinition
from pixelpack.models.game_state import (
    AudioTrack,
    CosmeticItem,
    CosmeticType,
    GameConfig,
    GameState,
    GameStats,
    SFXType,
)
from pixelpack.models.inventory import InventoryLedger
from pixelpack.models.rarity import CardVariant, Rarity
from pixelpack.services.catalog import (
    DEFAULT_CARDS,
    DEFAULT_COSMETICS,
    DEFAULT_PACKS,
    default_config,
    merge_new_cards,
)
from pixelpack.services.valuation import calculate_value

logger = logging.getLogger(__name__)

T = TypeVar("T")


# --- Config ---


def _parse_each(raw: Any, parse: Callable[[dict[str, Any]], T], label: str) -> list[T]:
    """Parse each record of a saved list, dropping the ones that fail."""
    parsed: list[T] = []
    for item in raw if isinstance(raw, list) else []:
        try:
            parsed.append(parse(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("Dropping unreadable %s: %r", label, item)
    return parsed



def card_definition_to_record(card: CardDefinition) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": card.id,
        "name": card.name,
        "theme": card.theme,
        "imageId": card.image_id,
    }
    if card.image_uri is not None:
        record["imageUri"] = card.image_uri
    return record


def card_definition_from_record(record: dict[str, Any]) -> CardDefinition:
    return CardDefinition(
        id=str(record["id"]),
        name=record.get("name", ""),
        theme=record.get("theme", ""),
        image_id=int(record.get("imageId", 0)),
        image_uri=record.get("imageUri"),
    )


def pack_to_record(pack: PackDefinition) -> dict[str, Any]:
    return {
        "id": pack.id,
        "name": pack.name,
        "theme": pack.theme,
        "price": pack.price,
        "cardCount": pack.card_count,
        "rarityWeights": {rarity.value: weight for rarity, weight in pack.rarity_weights.items()},
        "description": pack.description,
    }


def pack_from_record(record: dict[str, Any]) -> PackDefinition:
    weights: dict[Rarity, int] = {}
    for name, weight in (record.get("rarityWeights") or {}).items():
        try:
            weights[Rarity(name)] = int(weight)
        except (TypeError, ValueError):
            logger.warning("Dropping unknown rarity weight %r in pack %s", name, record.get("id"))
    return PackDefinition(
        id=str(record["id"]),
        name=record.get("name", ""),
        theme=record.get("theme", ""),
        price=int(record.get("price", 0)),
        card_count=int(record.get("cardCount", 0)),
        rarity_weights=weights,
        description=record.get("description", ""),
    )


def cosmetic_to_record(item: CosmeticItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "type": item.type.value,
        "price": item.price,
        "data": item.data,
        "purchased": item.purchased,
    }


def cosmetic_from_record(record: dict[str, Any]) -> CosmeticItem:
    return CosmeticItem(
        id=str(record["id"]),
        name=record.get("name", ""),
        type=CosmeticType(record["type"]),
        price=int(record.get("price", 0)),
        data=record.get("data", ""),
        purchased=bool(record.get("purchased", False)),
    )


def config_to_record(config: GameConfig) -> dict[str, Any]:
    """Serialize the config namespace record."""
    return {
        "cards": [card_definition_to_record(card) for card in config.cards],
        "packs": [pack_to_record(pack) for pack in config.packs],
        "audioTracks": [
            {"id": track.id, "name": track.name, "dataUri": track.data_uri}
            for track in config.audio_tracks
        ],
        "customSFX": {sfx.value: uri for sfx, uri in config.custom_sfx.items()},
        "activeCardBackUri": config.active_card_back_uri,
        "activeBorderStyle": config.active_border_style,
        "gameLogoUri": config.game_logo_uri,
        "cosmetics": [cosmetic_to_record(item) for item in config.cosmetics],
    }


def config_from_record(record: dict[str, Any] | None) -> GameConfig:
    """
    Rebuild the config from a saved record, reconciled against this build.

    Saved catalog entries are kept as-is; definitions new to this build are
    appended. Missing packs and cosmetics fall back to the shipped defaults,
    missing audio tracks and sound overrides to empty. An empty saved list
    stays empty. Unreadable entries are dropped with a warning.
    """
    if not record:
        return default_config()

    saved_cards = [card_definition_from_record(c) for c in record.get("cards") or []]
    packs = record.get("packs")
    cosmetics = record.get("cosmetics")

    custom_sfx: dict[SFXType, str] = {}
    for name, uri in (record.get("customSFX") or {}).items():
        try:
            custom_sfx[SFXType(name)] = uri
        except ValueError:
            logger.warning("Dropping unknown sound override: %s", name)

    return GameConfig(
        cards=merge_new_cards(saved_cards, DEFAULT_CARDS),
        packs=(
            _parse_each(packs, pack_from_record, "pack")
            if packs is not None
            else list(DEFAULT_PACKS)
        ),
        audio_tracks=[
            AudioTrack(id=str(t["id"]), name=t.get("name", ""), data_uri=t.get("dataUri", ""))
            for t in record.get("audioTracks") or []
        ],
        custom_sfx=custom_sfx,
        active_card_back_uri=record.get("activeCardBackUri"),
        active_border_style=record.get("activeBorderStyle"),
        game_logo_uri=record.get("gameLogoUri"),
        cosmetics=(
            _parse_each(cosmetics, cosmetic_from_record, "cosmetic")
            if cosmetics is not None
            else list(DEFAULT_COSMETICS)
        ),
    )


# --- Progress ---


def card_instance_to_record(card: CardInstance) -> dict[str, Any]:
    record: dict[str, Any] = {
        "instanceId": card.instance_id,
        "definitionId": card.definition_id,
        "name": card.name,
        "theme": card.theme,
        "rarity": card.rarity.value,
        "variant": card.variant.value,
        "isFoil": card.is_foil,
        "isLocked": card.is_locked,
        "value": card.value,
        "imageId": card.image_id,
        "obtainedAt": card.obtained_at,
    }
    if card.image_uri is not None:
        record["imageUri"] = card.image_uri
    return record


def card_instance_from_record(record: dict[str, Any]) -> CardInstance:
    """
    Rebuild an owned instance.

    Saves older than the variant system only carry `isFoil`; those load as
    FOIL or STANDARD. The stored value is kept even if the value tables
    have changed since.
    """
    rarity = Rarity(record["rarity"])
    if "variant" in record:
        variant = CardVariant(record["variant"])
    else:
        variant = CardVariant.FOIL if record.get("isFoil") else CardVariant.STANDARD

    value = record.get("value")
    if not isinstance(value, int):
        value = calculate_value(rarity, variant)

    return CardInstance(
        instance_id=str(record["instanceId"]),
        definition_id=str(record["definitionId"]),
        name=record.get("name", ""),
        theme=record.get("theme", ""),
        rarity=rarity,
        variant=variant,
        value=value,
        obtained_at=int(record.get("obtainedAt", 0)),
        is_locked=bool(record.get("isLocked", False)),
        image_id=int(record.get("imageId", 0)),
        image_uri=record.get("imageUri"),
    )


def stats_to_record(stats: GameStats) -> dict[str, Any]:
    return {
        "packsOpened": stats.packs_opened,
        "cardsObtained": stats.cards_obtained,
        "totalGoldEarned": stats.total_gold_earned,
        "highestRarityFound": (
            stats.highest_rarity_found.value if stats.highest_rarity_found else None
        ),
        "battlesWon": stats.battles_won,
        "battlesLost": stats.battles_lost,
    }


def stats_from_record(record: dict[str, Any] | None) -> GameStats:
    record = record or {}
    highest: Rarity | None = None
    if record.get("highestRarityFound"):
        try:
            highest = Rarity(record["highestRarityFound"])
        except ValueError:
            logger.warning("Ignoring unknown highest rarity: %r", record["highestRarityFound"])
    return GameStats(
        packs_opened=int(record.get("packsOpened") or 0),
        cards_obtained=int(record.get("cardsObtained") or 0),
        total_gold_earned=int(record.get("totalGoldEarned") or 0),
        highest_rarity_found=highest,
        battles_won=int(record.get("battlesWon") or 0),
        battles_lost=int(record.get("battlesLost") or 0),
    )


def progress_to_record(state: GameState) -> dict[str, Any]:
    """Serialize the progress namespace record."""
    return {
        "gold": state.gold,
        "inventory": [card_instance_to_record(card) for card in state.inventory],
        "stats": stats_to_record(state.stats),
        "battleDeck": list(state.battle_deck),
    }


def progress_from_record(
    record: dict[str, Any] | None,
    config: GameConfig,
    starting_gold: int,
) -> GameState:
    """
    Rebuild the game state from a saved progress record.

    Instances that no longer parse are dropped with a warning rather than
    failing the whole load.
    """
    if not record:
        return GameState(gold=starting_gold, config=config)

    gold = record.get("gold")
    if not isinstance(gold, int) or isinstance(gold, bool):
        gold = starting_gold

    cards: list[CardInstance] = []
    raw_inventory = record.get("inventory")
    for raw in raw_inventory if isinstance(raw_inventory, list) else []:
        try:
            cards.append(card_instance_from_record(raw))
        except (KeyError, TypeError, ValueError):
            logger.warning("Dropping unreadable card instance: %r", raw)

    battle_deck = record.get("battleDeck")

    return GameState(
        gold=gold,
        inventory=InventoryLedger(cards=cards),
        stats=stats_from_record(record.get("stats")),
        battle_deck=[str(i) for i in battle_deck] if isinstance(battle_deck, list) else [],
        config=config,
    )
