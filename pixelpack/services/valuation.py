"""
Card valuation.

value = floor(5 x rarity base x variant multiplier). Both tables are fixed;
changing them changes the worth of every card generated afterwards (never
of cards already owned).
"""

import math

from pixelpack.models.rarity import CardVariant, Rarity

VALUE_SCALE = 5

RARITY_BASE_VALUES: dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.UNCOMMON: 5,
    Rarity.RARE: 15,
    Rarity.EPIC: 50,
    Rarity.LEGENDARY: 200,
}

VARIANT_MULTIPLIERS: dict[CardVariant, int] = {
    CardVariant.STANDARD: 1,
    CardVariant.FOIL: 5,
    CardVariant.HOLOGRAPHIC: 6,
    CardVariant.HAUNTED: 8,
    CardVariant.FROZEN: 8,
    CardVariant.MAGMA: 8,
    CardVariant.COSMIC: 10,
    CardVariant.GLITCH: 15,
    CardVariant.RADIANT: 20,
}


def calculate_value(rarity: Rarity, variant: CardVariant) -> int:
    """Coin value of a card with this rarity and variant."""
    return math.floor(VALUE_SCALE * RARITY_BASE_VALUES[rarity] * VARIANT_MULTIPLIERS[variant])
