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
from pixelpack.models.rarity import RARITY_ORDER, CardVariant, Rarity, best_rarity

__all__ = [
    "AudioTrack",
    "CardDefinition",
    "CardInstance",
    "CardVariant",
    "CosmeticItem",
    "CosmeticType",
    "GameConfig",
    "GameState",
    "GameStats",
    "InventoryLedger",
    "PackDefinition",
    "RARITY_ORDER",
    "Rarity",
    "SFXType",
    "best_rarity",
]
