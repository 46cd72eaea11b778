"""
Default catalog shipped with the build, and load-time reconciliation.

Saved catalogs are authoritative for every entry they contain (admins may
have uploaded art). New builds only ever add definitions whose id the save
does not know yet.
"""

import logging
from collections.abc import Sequence

from pixelpack.models.card import CardDefinition, PackDefinition
from pixelpack.models.game_state import CosmeticItem, CosmeticType, GameConfig
from pixelpack.models.rarity import Rarity

logger = logging.getLogger(__name__)


def _cards(theme: str, entries: list[tuple[str, str, int]]) -> list[CardDefinition]:
    return [
        CardDefinition(id=cid, name=name, theme=theme, image_id=img) for cid, name, img in entries
    ]


DEFAULT_CARDS: tuple[CardDefinition, ...] = (
    *_cards(
        "Fantasy",
        [
            ("c1", "Slime", 10),
            ("c2", "Goblin", 11),
            ("c3", "Knight", 12),
            ("c4", "Dragon", 13),
            ("c_wiz", "Wizard", 14),
            ("c_mimic", "Mimic Chest", 15),
            ("c_skel", "Skeleton King", 16),
            ("c_phx", "Phoenix", 17),
            ("c_uni", "Unicorn", 101),
            ("c_grif", "Griffin", 102),
            ("c_hydra", "Hydra", 103),
        ],
    ),
    *_cards(
        "Sci-Fi",
        [
            ("c5", "Robot", 20),
            ("c6", "Laser Gun", 21),
            ("c7", "Alien", 22),
            ("c8", "Spaceship", 23),
            ("c_mech", "Mecha Suit", 24),
            ("c_cyborg", "Cyborg", 25),
            ("c_plasma", "Plasma Blade", 26),
            ("c_station", "Space Station", 120),
            ("c_droid", "Battle Droid", 121),
        ],
    ),
    *_cards(
        "Horror",
        [
            ("c9", "Zombie", 30),
            ("c10", "Vampire", 31),
            ("c_ghost", "Poltergeist", 32),
            ("c_reaper", "Grim Reaper", 33),
            ("c_wolfman", "Werewolf", 130),
            ("c_mummy", "Ancient Mummy", 131),
            ("c_witch", "Swamp Witch", 132),
        ],
    ),
    *_cards(
        "Cyberpunk",
        [
            ("c_neon", "Neon Bike", 40),
            ("c_hack", "Hacker", 41),
            ("c_kat", "Nano Katana", 42),
            ("c_chip", "Data Chip", 43),
            ("c_goggles", "VR Goggles", 44),
            ("c_drone", "Spy Drone", 140),
            ("c_synth", "Synth Pop Star", 141),
        ],
    ),
    *_cards(
        "Nature",
        [
            ("c_tree", "Ancient Oak", 50),
            ("c_wolf", "Spirit Wolf", 51),
            ("c_shroom", "Mushroom", 52),
            ("c_crys", "Mana Crystal", 53),
            ("c_flower", "Lotus", 54),
            ("c_ent", "Treant", 150),
            ("c_fairy", "Pixie", 151),
        ],
    ),
    *_cards(
        "Food",
        [
            ("c_burg", "Pixel Burger", 60),
            ("c_pot", "Health Potion", 61),
            ("c_ramen", "Ramen Bowl", 62),
            ("c_sushi", "Sushi Roll", 63),
            ("c_coffee", "Hot Coffee", 64),
            ("c_pizza", "Slice of Pizza", 65),
            ("c_cake", "Birthday Cake", 160),
            ("c_donut", "Glazed Donut", 161),
        ],
    ),
    *_cards(
        "Retro",
        [
            ("c_flop", "Floppy Disk", 80),
            ("c_joy", "Joystick", 81),
            ("c_crt", "CRT Monitor", 82),
            ("c_cart", "Game Cartridge", 83),
            ("c_boy", "Handheld", 84),
            ("c_vhs", "VHS Tape", 180),
            ("c_walk", "Cassette Player", 181),
        ],
    ),
    *_cards(
        "Cosmic",
        [
            ("c_bh", "Black Hole", 70),
            ("c_neb", "Nebula", 71),
            ("c_star", "Supernova", 72),
            ("c_comet", "Comet", 73),
            ("c_planet", "Ringed Planet", 170),
            ("c_quas", "Quasar", 171),
            ("c_void", "Void Walker", 172),
        ],
    ),
    *_cards(
        "Elemental",
        [
            ("c_fire", "Fire Elemental", 90),
            ("c_ice", "Ice Golem", 91),
            ("c_thun", "Thunder Bird", 92),
            ("c_earth", "Rock Golem", 93),
        ],
    ),
)


def _weights(common: int, uncommon: int, rare: int, epic: int, legendary: int) -> dict[Rarity, int]:
    return {
        Rarity.COMMON: common,
        Rarity.UNCOMMON: uncommon,
        Rarity.RARE: rare,
        Rarity.EPIC: epic,
        Rarity.LEGENDARY: legendary,
    }


DEFAULT_PACKS: tuple[PackDefinition, ...] = (
    PackDefinition(
        id="p1",
        name="Starter Pack",
        theme="Basic",
        price=10,
        card_count=3,
        rarity_weights=_weights(80, 15, 4, 1, 0),
        description="Cheap and cheerful.",
    ),
    PackDefinition(
        id="p2",
        name="Silver Pack",
        theme="Silver",
        price=50,
        card_count=5,
        rarity_weights=_weights(50, 30, 15, 4, 1),
        description="Better chances.",
    ),
    PackDefinition(
        id="p3",
        name="Gold Pack",
        theme="Gold",
        price=250,
        card_count=5,
        rarity_weights=_weights(20, 30, 30, 15, 5),
        description="High stakes!",
    ),
    PackDefinition(
        id="p_cosmic",
        name="Diamond Pack",
        theme="Diamond",
        price=2500,
        card_count=10,
        rarity_weights=_weights(0, 10, 30, 40, 20),
        description="The ultimate luxury. High variant chance!",
    ),
)

# 1x1 PNG placeholders until real card back art is uploaded
_RED_BACK = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="  # noqa: E501
)
_GOLD_BACK = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="  # noqa: E501
)

DEFAULT_COSMETICS: tuple[CosmeticItem, ...] = (
    CosmeticItem("cb_default", "Classic Blue", CosmeticType.CARD_BACK, 0, "", purchased=True),
    CosmeticItem("cb_red", "Ruby Red", CosmeticType.CARD_BACK, 500, _RED_BACK),
    CosmeticItem("cb_gold", "Midas Touch", CosmeticType.CARD_BACK, 2000, _GOLD_BACK),
    CosmeticItem(
        "bs_default", "Standard Borders", CosmeticType.BORDER_STYLE, 0, "", purchased=True
    ),
    CosmeticItem(
        "bs_double", "Double Frame", CosmeticType.BORDER_STYLE, 1000, "border-double border-8"
    ),
    CosmeticItem(
        "bs_neon",
        "Neon Glow",
        CosmeticType.BORDER_STYLE,
        2500,
        "shadow-[0_0_10px_rgba(255,255,255,0.7)] border-dashed",
    ),
    CosmeticItem("bs_rounded", "Super Round", CosmeticType.BORDER_STYLE, 500, "rounded-3xl"),
)


def default_config() -> GameConfig:
    """A fresh config built from the shipped catalog."""
    return GameConfig(
        cards=list(DEFAULT_CARDS),
        packs=list(DEFAULT_PACKS),
        cosmetics=list(DEFAULT_COSMETICS),
    )


def merge_new_cards(
    saved: Sequence[CardDefinition],
    defaults: Sequence[CardDefinition],
) -> list[CardDefinition]:
    """
    Append default definitions whose id is missing from the saved catalog.

    Saved entries keep their position and content. Defaults are appended in
    their own order.
    """
    known_ids = {card.id for card in saved}
    added = [card for card in defaults if card.id not in known_ids]

    if added:
        logger.info(
            "catalog_reconciled",
            extra={
                "added_count": len(added),
                "added_ids": [card.id for card in added][:10],
                "saved_count": len(saved),
            },
        )

    return [*saved, *added]
