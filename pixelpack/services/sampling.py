"""
Rarity and variant sampling.

Variant selection is an ordered decision table. Each stage draws from the
random source independently, in this order:

1. Special roll: is this draw a variant at all?
2. Themed pool: card themes with their own variants get first pick.
3. Generic pool: everything the themed pool did not resolve.
4. Radiant override: a separate roll that replaces whatever came before.

The override runs last and overwrites unconditionally, so it can replace a
themed variant that is worth more than RADIANT would be on its own.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from pixelpack.models.rarity import RARITY_ORDER, CardVariant, Rarity

# Pack theme that gets boosted variant odds
PREMIUM_PACK_THEME = "Diamond"

SPECIAL_CHANCE = 0.10
PREMIUM_SPECIAL_CHANCE = 0.60

RADIANT_CHANCE = 0.001
PREMIUM_RADIANT_CHANCE = 0.01


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1). `random.Random` qualifies."""

    def random(self) -> float: ...


class EmptyWeightTableError(ValueError):
    """Raised when a rarity table has no positive weight to sample from."""


@dataclass(frozen=True, slots=True)
class ThemedPool:
    """
    Variants reserved for a card theme.

    `chance` is the probability the pool resolves at all. With more than one
    variant a second draw picks one, using the upper bounds in `splits`.
    """

    chance: float
    variants: tuple[CardVariant, ...]
    splits: tuple[float, ...] = ()


THEMED_POOLS: dict[str, ThemedPool] = {
    "Cosmic": ThemedPool(chance=0.6, variants=(CardVariant.COSMIC,)),
    "Horror": ThemedPool(chance=0.6, variants=(CardVariant.HAUNTED,)),
    "Elemental": ThemedPool(
        chance=0.4,
        variants=(CardVariant.MAGMA, CardVariant.FROZEN, CardVariant.RADIANT),
        splits=(0.33, 0.66),
    ),
}

# Upper bound of each bucket over a single uniform draw
GENERIC_POOL: tuple[tuple[float, CardVariant], ...] = (
    (0.5, CardVariant.FOIL),
    (0.7, CardVariant.HOLOGRAPHIC),
    (0.8, CardVariant.MAGMA),
    (0.9, CardVariant.FROZEN),
    (1.0, CardVariant.GLITCH),
)


def sample_rarity(weights: Mapping[Rarity, int], rng: RandomSource) -> Rarity:
    """
    Draw a rarity tier from a weight table.

    Walks tiers in canonical order, subtracting each weight from a uniform
    draw over [0, total) until the draw falls inside a tier. Missing tiers
    weigh 0.

    Raises:
        EmptyWeightTableError: If the weights sum to zero
    """
    total = sum(weights.get(rarity, 0) for rarity in RARITY_ORDER)
    if total <= 0:
        raise EmptyWeightTableError("Rarity weights must contain at least one positive weight")

    remaining = rng.random() * total
    for rarity in RARITY_ORDER:
        weight = weights.get(rarity, 0)
        if remaining < weight:
            return rarity
        remaining -= weight

    # Float drift at the top of the range: settle on the last reachable tier
    return next(r for r in reversed(RARITY_ORDER) if weights.get(r, 0) > 0)


def is_premium(pack_theme: str) -> bool:
    return pack_theme == PREMIUM_PACK_THEME


def roll_special(pack_theme: str, rng: RandomSource) -> bool:
    """Stage 1: whether this draw leaves STANDARD."""
    chance = PREMIUM_SPECIAL_CHANCE if is_premium(pack_theme) else SPECIAL_CHANCE
    return rng.random() < chance


def pick_themed_variant(card_theme: str, rng: RandomSource) -> CardVariant | None:
    """Stage 2: the card theme's own pool. None means fall through to the generic pool."""
    pool = THEMED_POOLS.get(card_theme)
    if pool is None or rng.random() >= pool.chance:
        return None
    if len(pool.variants) == 1:
        return pool.variants[0]

    draw = rng.random()
    for bound, variant in zip(pool.splits, pool.variants, strict=False):
        if draw < bound:
            return variant
    return pool.variants[-1]


def pick_generic_variant(rng: RandomSource) -> CardVariant:
    """Stage 3: one draw over the generic cumulative buckets."""
    draw = rng.random()
    for bound, variant in GENERIC_POOL:
        if draw < bound:
            return variant
    return GENERIC_POOL[-1][1]


def apply_radiant_override(
    variant: CardVariant, pack_theme: str, rng: RandomSource
) -> CardVariant:
    """Stage 4: independent roll that forces RADIANT over any earlier result."""
    chance = PREMIUM_RADIANT_CHANCE if is_premium(pack_theme) else RADIANT_CHANCE
    if rng.random() < chance:
        return CardVariant.RADIANT
    return variant


def select_variant(pack_theme: str, card_theme: str, rng: RandomSource) -> CardVariant:
    """Run the full decision table for one card."""
    variant = CardVariant.STANDARD
    if roll_special(pack_theme, rng):
        variant = pick_themed_variant(card_theme, rng) or pick_generic_variant(rng)
    return apply_radiant_override(variant, pack_theme, rng)
