"""
PixelPack services.

Card generation and catalog logic. The economy controller and persistence
synchronizer are imported from their own modules.
"""

from pixelpack.services.card_factory import CardFactory, EmptyCatalogError
from pixelpack.services.catalog import (
    DEFAULT_CARDS,
    DEFAULT_COSMETICS,
    DEFAULT_PACKS,
    default_config,
    merge_new_cards,
)
from pixelpack.services.sampling import (
    EmptyWeightTableError,
    RandomSource,
    sample_rarity,
    select_variant,
)
from pixelpack.services.valuation import calculate_value

__all__ = [
    "CardFactory",
    "DEFAULT_CARDS",
    "DEFAULT_COSMETICS",
    "DEFAULT_PACKS",
    "EmptyCatalogError",
    "EmptyWeightTableError",
    "RandomSource",
    "calculate_value",
    "default_config",
    "merge_new_cards",
    "sample_rarity",
    "select_variant",
]
