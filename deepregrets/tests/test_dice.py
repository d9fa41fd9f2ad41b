"""
Tests for dice helpers and catch probability.
"""

import random

import pytest

from ..engine_core.dice import (
    D6_FACES,
    catch_succeeds,
    descend_dice,
    effective_difficulty,
    lowest_die_index,
    reroll_success_probability,
    roll_dice,
    split_dice,
    success_probability,
    sum_distribution,
)


class TestCatchResolution:
    """Sum against difficulty."""

    def test_exact_sum_is_success(self):
        assert catch_succeeds(9, 9)

    def test_one_short_fails(self):
        assert not catch_succeeds(8, 9)

    def test_effective_difficulty_never_negative(self):
        assert effective_difficulty(3, modifier=1, discount=2) == 0
        assert effective_difficulty(2, modifier=1, discount=2) == 0
        assert effective_difficulty(5, modifier=1) == 4


class TestDistributions:
    """Sum distributions and success chances."""

    def test_two_d6(self):
        dist = sum_distribution([D6_FACES, D6_FACES])
        assert sum(dist.values()) == pytest.approx(1.0)
        assert dist[7] == pytest.approx(6 / 36)
        assert min(dist) == 2 and max(dist) == 12

    def test_no_random_dice(self):
        assert sum_distribution([]) == {0: 1.0}
        assert success_probability(5, 5) == 1.0
        assert success_probability(4, 5) == 0.0

    def test_one_random_die(self):
        # 5 fixed against 7 needs a 2 or better
        assert success_probability(5, 7, [D6_FACES]) == pytest.approx(5 / 6)

    def test_tackle_faces(self):
        # Green tackle die: 0,0,1,2,1,2
        assert success_probability(3, 5, [(0, 0, 1, 2, 1, 2)]) == pytest.approx(2 / 6)

    def test_reroll_probability(self):
        assert reroll_success_probability(1, 0, 6) == pytest.approx(1 / 6)
        assert reroll_success_probability(2, 0, 2) == pytest.approx(1.0)


class TestDescendSelection:
    """First qualifying dice in pool order."""

    def test_two_levels_from_mixed_pool(self):
        assert descend_dice([3, 1, 5], 2, 3) == [0, 2]

    def test_not_enough_high_dice(self):
        assert descend_dice([2, 2, 6], 2, 3) is None

    def test_zero_levels(self):
        assert descend_dice([1], 0, 3) == []


class TestPoolHelpers:

    def test_lowest_die_first_on_ties(self):
        assert lowest_die_index([3, 1, 1]) == 1
        assert lowest_die_index([]) is None

    def test_split_keeps_pool_order(self):
        used, remaining = split_dice((4, 2, 6, 1), (2, 0))
        assert used == (6, 4)
        assert remaining == (2, 1)

    def test_roll_is_reproducible(self):
        first = roll_dice(random.Random("7:0"), 5)
        second = roll_dice(random.Random("7:0"), 5)
        assert first == second
        assert len(first) == 5
        assert all(1 <= d <= 6 for d in first)
