"""
Placement Generator - Scatter gems over the play field without piling them up.

Coordinates are percentages of the play field (0-100 on both axes). The
minimum separation is a soft packing heuristic: once the attempt budget is
spent the last candidate is accepted, so placement never fails and never
loops unboundedly.

Usage:
    from fugazzi.services.placement import PlacementGenerator

    placer = PlacementGenerator(rng=random.Random(7))
    positions = []
    for _ in range(7):
        positions.append(placer.place(positions))
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """A point on the play field, in percent."""
    x: float
    y: float

    def distance_to(self, other: "Position") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)


class PlacementGenerator:
    """Sample positions that keep a minimum distance from earlier ones."""

    EDGE_PADDING = 15.0
    MIN_SEPARATION = 25.0
    MAX_ATTEMPTS = 100

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        edge_padding: float = EDGE_PADDING,
        min_separation: float = MIN_SEPARATION,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.rng = rng or random.Random()
        self.edge_padding = edge_padding
        self.min_separation = min_separation
        self.max_attempts = max(1, max_attempts)
        # Attempts spent by the most recent place() call
        self.last_attempts = 0

    def place(self, existing: Sequence[Position]) -> Position:
        """
        Pick a position at least min_separation away from every existing one.

        Args:
            existing: Positions already occupied on the play field

        Returns:
            The first candidate that satisfies the separation, or the last
            candidate sampled once max_attempts is exhausted
        """
        candidate = None
        for attempt in range(1, self.max_attempts + 1):
            candidate = self._sample()
            if all(candidate.distance_to(pos) >= self.min_separation for pos in existing):
                self.last_attempts = attempt
                return candidate

        self.last_attempts = self.max_attempts
        logger.debug(
            f"Placement exhausted after {self.max_attempts} attempts "
            f"with {len(existing)} gems placed, accepting ({candidate.x:.1f}, {candidate.y:.1f})"
        )
        return candidate

    def _sample(self) -> Position:
        low = self.edge_padding
        high = 100.0 - self.edge_padding
        return Position(x=self.rng.uniform(low, high), y=self.rng.uniform(low, high))
