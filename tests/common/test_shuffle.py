"""
Unit tests for shuffle() and pick_n().
"""

import random

from shsat_toolkit.common.shuffle import pick_n, shuffle


class TestShuffle:

    def test_shuffle_when_called_then_returns_permutation(self):
        # Arrange
        items = list(range(50))

        # Act
        result = shuffle(items, random.Random(1))

        # Assert
        assert sorted(result) == items
        assert len(result) == len(items)

    def test_shuffle_when_called_then_input_unchanged(self):
        items = [1, 2, 3, 4, 5]
        shuffle(items, random.Random(3))
        assert items == [1, 2, 3, 4, 5]

    def test_shuffle_when_same_seed_then_same_order(self):
        items = list(range(30))
        assert shuffle(items, random.Random(42)) == shuffle(items, random.Random(42))

    def test_shuffle_when_different_seeds_then_order_differs(self):
        items = list(range(30))
        assert shuffle(items, random.Random(1)) != shuffle(items, random.Random(2))

    def test_shuffle_when_empty_or_single_then_copy(self):
        assert shuffle([]) == []
        single = ["a"]
        result = shuffle(single)
        assert result == ["a"]
        assert result is not single

    def test_shuffle_when_tuple_then_returns_list(self):
        assert sorted(shuffle((3, 1, 2), random.Random(0))) == [1, 2, 3]

    def test_shuffle_when_many_runs_then_every_position_reached(self):
        """Each item lands in each position at least once over many runs."""
        # Arrange
        rng = random.Random(123)
        seen = {i: set() for i in range(4)}

        # Act
        for _ in range(400):
            for position, item in enumerate(shuffle([0, 1, 2, 3], rng)):
                seen[item].add(position)

        # Assert
        assert all(positions == {0, 1, 2, 3} for positions in seen.values())


class TestPickN:

    def test_pick_n_when_n_smaller_than_pool_then_splits(self):
        # Act
        picked, rest = pick_n(list(range(10)), 4, random.Random(5))

        # Assert
        assert len(picked) == 4
        assert len(rest) == 6
        assert sorted(picked + rest) == list(range(10))

    def test_pick_n_when_n_exceeds_pool_then_all_picked(self):
        picked, rest = pick_n([1, 2, 3], 10, random.Random(5))
        assert sorted(picked) == [1, 2, 3]
        assert rest == []

    def test_pick_n_when_negative_then_nothing_picked(self):
        picked, rest = pick_n([1, 2, 3], -2, random.Random(5))
        assert picked == []
        assert sorted(rest) == [1, 2, 3]
