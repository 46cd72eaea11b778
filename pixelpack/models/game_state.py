"""
Game state aggregate.

One `GameState` owns everything a session mutates: the wallet, the
inventory ledger, stats, the battle deck selection and the catalog config.
Engine operations receive it explicitly; there is no module-level state.
"""

from dataclasses import dataclass, field
from enum import Enum

from pixelpack.models.card import CardDefinition, PackDefinition
from pixelpack.models.inventory import InventoryLedger
from pixelpack.models.rarity import Rarity


class CosmeticType(str, Enum):
    """Slot a cosmetic occupies when equipped."""

    CARD_BACK = "CARD_BACK"
    BORDER_STYLE = "BORDER_STYLE"


class SFXType(str, Enum):
    """Sound effects that accept a custom override."""

    OPEN_PACK = "openPack"
    REVEAL_COMMON = "revealCommon"
    REVEAL_RARE = "revealRare"
    REVEAL_EPIC = "revealEpic"
    REVEAL_LEGENDARY = "revealLegendary"
    REVEAL_FOIL = "revealFoil"
    SELL = "sell"


@dataclass(frozen=True, slots=True)
class CosmeticItem:
    """
    A purchasable cosmetic.

    Attributes:
        id: Stable key
        name: Display name
        type: Which slot it equips into
        price: Cost in gold
        data: Image URI for card backs, style id for borders
        purchased: Whether the player owns it
    """

    id: str
    name: str
    type: CosmeticType
    price: int
    data: str = ""
    purchased: bool = False


@dataclass(frozen=True, slots=True)
class AudioTrack:
    """An uploaded music track."""

    id: str
    name: str
    data_uri: str


@dataclass
class GameStats:
    """Lifetime counters. All only ever grow between resets."""

    packs_opened: int = 0
    cards_obtained: int = 0
    total_gold_earned: int = 0
    highest_rarity_found: Rarity | None = None
    battles_won: int = 0
    battles_lost: int = 0


@dataclass
class GameConfig:
    """Catalog and presentation settings, persisted under the config namespace."""

    cards: list[CardDefinition] = field(default_factory=list)
    packs: list[PackDefinition] = field(default_factory=list)
    audio_tracks: list[AudioTrack] = field(default_factory=list)
    custom_sfx: dict[SFXType, str] = field(default_factory=dict)
    active_card_back_uri: str | None = None
    active_border_style: str | None = None
    game_logo_uri: str | None = None
    cosmetics: list[CosmeticItem] = field(default_factory=list)

    def find_pack(self, pack_id: str) -> PackDefinition | None:
        """Look up a pack by id."""
        return next((p for p in self.packs if p.id == pack_id), None)

    def find_card(self, card_id: str) -> CardDefinition | None:
        """Look up a card definition by id."""
        return next((c for c in self.cards if c.id == card_id), None)

    def find_cosmetic(self, item_id: str) -> CosmeticItem | None:
        """Look up a cosmetic by id."""
        return next((c for c in self.cosmetics if c.id == item_id), None)


@dataclass
class GameState:
    """
    Everything one session owns.

    Attributes:
        gold: Wallet balance. May go negative after battle losses.
        inventory: Owned card instances
        stats: Lifetime counters
        battle_deck: Instance ids selected for battle, in selection order
        config: Catalog and cosmetics
        coin_events: Bumped on every sale notification
    """

    gold: int
    inventory: InventoryLedger = field(default_factory=InventoryLedger)
    stats: GameStats = field(default_factory=GameStats)
    battle_deck: list[str] = field(default_factory=list)
    config: GameConfig = field(default_factory=GameConfig)
    coin_events: int = 0
