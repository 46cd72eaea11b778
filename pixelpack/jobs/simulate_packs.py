"""
Simulate pack openings to check drop rates.

Opens packs from the shipped catalog with a seeded random source and reports
the rarity and variant distribution and the average resale value per pack.
Nothing is persisted.
"""

import argparse
import logging
import random
from collections import Counter
from dataclasses import dataclass, field

from pixelpack.models.rarity import CardVariant, Rarity
from pixelpack.services.card_factory import CardFactory
from pixelpack.services.catalog import DEFAULT_CARDS, DEFAULT_PACKS

logger = logging.getLogger(__name__)

DEFAULT_PACK_COUNT = 1000


@dataclass
class SimulationReport:
    """Aggregated outcome of a simulation run."""

    pack_id: str
    packs_opened: int = 0
    rarities: Counter[Rarity] = field(default_factory=Counter)
    variants: Counter[CardVariant] = field(default_factory=Counter)
    total_value: int = 0
    price: int = 0

    @property
    def average_value(self) -> float:
        """Mean resale value of one pack's cards."""
        if not self.packs_opened:
            return 0.0
        return self.total_value / self.packs_opened

    @property
    def return_ratio(self) -> float:
        """Average resale value over purchase price. Free packs report 0."""
        if not self.price:
            return 0.0
        return self.average_value / self.price


def simulate(pack_id: str, count: int, seed: int | None = None) -> SimulationReport:
    """
    Open `count` packs of `pack_id` against the default catalog.

    Raises:
        KeyError: If `pack_id` is not a shipped pack
    """
    pack = next((p for p in DEFAULT_PACKS if p.id == pack_id), None)
    if pack is None:
        raise KeyError(pack_id)

    factory = CardFactory(random.Random(seed))
    report = SimulationReport(pack_id=pack.id, price=pack.price)

    for _ in range(count):
        cards = factory.open_pack(pack, DEFAULT_CARDS)
        report.packs_opened += 1
        report.rarities.update(card.rarity for card in cards)
        report.variants.update(card.variant for card in cards)
        report.total_value += sum(card.value for card in cards)

    logger.info(
        "Simulated %d %s packs: average value %.1f (price %d)",
        report.packs_opened,
        pack.id,
        report.average_value,
        pack.price,
    )
    return report


def main() -> None:
    """CLI entrypoint for pack simulation."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Simulate pack openings")
    parser.add_argument(
        "--pack",
        default=DEFAULT_PACKS[0].id,
        choices=[p.id for p in DEFAULT_PACKS],
        help=f"Pack to open (default: {DEFAULT_PACKS[0].id})",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=DEFAULT_PACK_COUNT,
        help=f"Number of packs to open (default: {DEFAULT_PACK_COUNT})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()
    report = simulate(args.pack, args.count, seed=args.seed)

    cards = sum(report.rarities.values())
    print(f"{report.pack_id}: {report.packs_opened} packs, {cards} cards")
    for rarity in Rarity:
        share = report.rarities[rarity] / cards if cards else 0.0
        print(f"  {rarity.value:<10} {report.rarities[rarity]:>7}  {share:6.2%}")
    for variant, seen in report.variants.most_common():
        print(f"  {variant.value:<12} {seen:>7}")
    print(f"Average value {report.average_value:.1f}, return {report.return_ratio:.2f}x")


if __name__ == "__main__":
    main()
