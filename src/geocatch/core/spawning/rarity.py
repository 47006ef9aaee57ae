"""Weighted creature selection by rarity tier."""

import random
from collections.abc import Mapping, Sequence
from typing import Protocol

from geocatch.core.constants import (
    BASE_RARITY_WEIGHTS,
    PARK_RARITY_WEIGHTS,
    RARITY_ORDER,
)


class HasRarity(Protocol):
    rarity: str


class RaritySelector:
    """Pick a creature from a candidate list using a rarity weight table.

    One uniform draw is compared against the cumulative weights, walked in
    table order. The first tier whose cumulative weight reaches the draw and
    that has at least one candidate wins; tiers with no candidates are
    skipped without redistributing their weight. If the walk ends without a
    winner the pick falls back to a uniform choice over all candidates.
    """

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        boosted_weights: Mapping[str, float] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.weights = dict(weights if weights is not None else BASE_RARITY_WEIGHTS)
        self.boosted_weights = dict(
            boosted_weights if boosted_weights is not None else PARK_RARITY_WEIGHTS
        )
        self.rng = rng or random.Random()

    def table(self, boosted: bool = False) -> dict[str, float]:
        """Get the weight table in effect for the boost flag."""
        return self.boosted_weights if boosted else self.weights

    @staticmethod
    def group_by_rarity(candidates: Sequence[HasRarity]) -> dict[str, list]:
        """Group candidates into rarity buckets, keeping catalog order."""
        buckets: dict[str, list] = {rarity: [] for rarity in RARITY_ORDER}
        for candidate in candidates:
            buckets.setdefault(candidate.rarity, []).append(candidate)
        return buckets

    def select(self, candidates: Sequence[HasRarity], boosted: bool = False):
        """Select one candidate, or None if there are no candidates."""
        if not candidates:
            return None

        buckets = self.group_by_rarity(candidates)
        roll = self.rng.random()
        cumulative = 0.0

        for rarity, weight in self.table(boosted).items():
            cumulative += weight
            bucket = buckets.get(rarity)
            if roll <= cumulative and bucket:
                return self.rng.choice(bucket)

        return self.rng.choice(list(candidates))
