from enum import Enum


class Rarity(str, Enum):
    """Rarity tiers, declared in canonical order (lowest first)."""

    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"

    @property
    def rank(self) -> int:
        """Position in the canonical order. COMMON is 0."""
        return RARITY_ORDER.index(self)


class CardVariant(str, Enum):
    """Cosmetic variants. Each one multiplies a card's value."""

    STANDARD = "STANDARD"
    FOIL = "FOIL"
    HOLOGRAPHIC = "HOLOGRAPHIC"
    COSMIC = "COSMIC"
    HAUNTED = "HAUNTED"
    MAGMA = "MAGMA"
    FROZEN = "FROZEN"
    GLITCH = "GLITCH"
    RADIANT = "RADIANT"


# Sampling walks this order; reordering changes seeded outcomes
RARITY_ORDER: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.EPIC,
    Rarity.LEGENDARY,
)


def best_rarity(current: Rarity | None, candidates: list[Rarity]) -> Rarity | None:
    """Return the highest rarity among `current` and `candidates`."""
    best = current
    for rarity in candidates:
        if best is None or rarity.rank > best.rank:
            best = rarity
    return best
