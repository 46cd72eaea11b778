from dataclasses import dataclass, field

from pixelpack.models.rarity import CardVariant, Rarity


@dataclass(frozen=True, slots=True)
class CardDefinition:
    """
    A catalog entry that card instances are drawn from.

    Attributes:
        id: Stable key, never changes once published
        name: Display name (admin-editable)
        theme: Category tag, e.g. "Cosmic" or "Horror"
        image_id: Fallback art id
        image_uri: Admin-uploaded art override, if any
    """

    id: str
    name: str
    theme: str
    image_id: int = 0
    image_uri: str | None = None


@dataclass(frozen=True, slots=True)
class PackDefinition:
    """
    A purchasable pack.

    Attributes:
        id: Stable key
        name: Display name
        theme: Pack tier tag; "Diamond" boosts variant chances
        price: Cost in gold
        card_count: Cards generated per purchase
        rarity_weights: Relative weight per rarity tier
        description: Shop blurb
    """

    id: str
    name: str
    theme: str
    price: int
    card_count: int
    rarity_weights: dict[Rarity, int] = field(default_factory=dict)
    description: str = ""

    def total_weight(self) -> int:
        """Sum of all rarity weights."""
        return sum(self.rarity_weights.values())


@dataclass(frozen=True, slots=True)
class CardInstance:
    """
    A concrete card owned by the player.

    `value` is computed once at generation and never recomputed. Name, theme
    and art are snapshotted from the definition so the instance survives
    catalog edits.
    """

    instance_id: str
    definition_id: str
    name: str
    theme: str
    rarity: Rarity
    variant: CardVariant
    value: int
    obtained_at: int
    is_locked: bool = False
    image_id: int = 0
    image_uri: str | None = None

    @property
    def is_foil(self) -> bool:
        """Any non-standard variant counts as foil for older consumers."""
        return self.variant is not CardVariant.STANDARD

    @property
    def dedup_key(self) -> tuple[str, Rarity, CardVariant]:
        """Instances sharing this key are duplicates of each other."""
        return (self.definition_id, self.rarity, self.variant)
