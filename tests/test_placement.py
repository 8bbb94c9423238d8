"""Tests for placement.py"""

import pytest
import random
import sys
import os
from itertools import combinations

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fugazzi.services.placement import PlacementGenerator, Position


class TestPlacement:
    """Tests for single placements."""

    def test_first_candidate_accepted_on_empty_field(self):
        """Test an empty field accepts the first sample."""
        placer = PlacementGenerator(rng=random.Random(1))
        placer.place([])
        assert placer.last_attempts == 1

    def test_positions_respect_edge_padding(self):
        """Test samples stay inside the padded square."""
        placer = PlacementGenerator(rng=random.Random(2))
        for _ in range(500):
            pos = placer.place([])
            assert 15 <= pos.x <= 85
            assert 15 <= pos.y <= 85

    def test_custom_edge_padding(self):
        """Test a custom edge padding narrows the field."""
        placer = PlacementGenerator(rng=random.Random(3), edge_padding=40)
        for _ in range(200):
            pos = placer.place([])
            assert 40 <= pos.x <= 60
            assert 40 <= pos.y <= 60

    def test_accepted_position_is_far_enough(self):
        """Test an accepted candidate keeps the minimum separation."""
        placer = PlacementGenerator(rng=random.Random(4))
        existing = [Position(50.0, 50.0)]
        pos = placer.place(existing)
        if placer.last_attempts < placer.max_attempts:
            assert pos.distance_to(existing[0]) >= 25


class TestPlacementExhaustion:
    """Tests for the soft fallback when no candidate fits."""

    def test_impossible_constraint_terminates(self):
        """Test placement returns after the attempt budget when nothing fits."""
        placer = PlacementGenerator(rng=random.Random(5), min_separation=1000)
        pos = placer.place([Position(50.0, 50.0)])
        assert placer.last_attempts == 100
        assert 15 <= pos.x <= 85
        assert 15 <= pos.y <= 85

    def test_crowded_field_terminates(self):
        """Test placing far more gems than fit still finishes."""
        placer = PlacementGenerator(rng=random.Random(6), max_attempts=10)
        positions = []
        for _ in range(60):
            positions.append(placer.place(positions))
        assert len(positions) == 60

    def test_pairwise_separation_or_exhausted(self):
        """Test every pair is 25 apart unless the later one used every attempt."""
        for seed in range(30):
            placer = PlacementGenerator(rng=random.Random(seed))
            positions, attempts = [], []
            for _ in range(7):
                positions.append(placer.place(positions))
                attempts.append(placer.last_attempts)

            for i, j in combinations(range(len(positions)), 2):
                distance = positions[i].distance_to(positions[j])
                assert distance >= 25 or attempts[j] == 100


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
