"""Tests for the Food module."""

import numpy as np

from prism_snake.food import Food


class TestFoodInit:
    def test_default(self):
        food = Food()
        assert food.position is None
        assert isinstance(food.rng, np.random.Generator)

    def test_explicit_position(self):
        assert Food((3, 4)).position == (3, 4)


class TestRandomPosition:
    def test_within_bounds(self):
        food = Food(rng=np.random.default_rng(0))
        for _ in range(200):
            x, y = food.random_position(7, 3)
            assert 0 <= x < 7
            assert 0 <= y < 3

    def test_returns_plain_ints(self):
        x, y = Food(rng=np.random.default_rng(0)).random_position(7, 3)
        assert type(x) is int
        assert type(y) is int

    def test_does_not_move_food(self):
        food = Food((1, 1), rng=np.random.default_rng(0))
        food.random_position(10, 10)
        assert food.position == (1, 1)

    def test_covers_whole_grid(self):
        food = Food(rng=np.random.default_rng(3))
        seen = {food.random_position(3, 2) for _ in range(300)}
        assert len(seen) == 6

    def test_deterministic(self):
        """Same seed produces the same sequence of positions."""
        positions_a = self._draw_with_seed(42)
        positions_b = self._draw_with_seed(42)
        assert positions_a == positions_b

    def test_different_seeds(self):
        assert self._draw_with_seed(1) != self._draw_with_seed(2)

    @staticmethod
    def _draw_with_seed(seed: int) -> list[tuple[int, int]]:
        food = Food(rng=np.random.default_rng(seed))
        return [food.random_position(20, 20) for _ in range(5)]


class TestFoodCopy:
    def test_copy_shares_rng(self):
        food = Food((2, 2), rng=np.random.default_rng(0))
        clone = food.copy()
        clone.position = (5, 5)
        assert food.position == (2, 2)
        assert clone.rng is food.rng


class TestFoodSerialization:
    def test_to_dict(self):
        assert Food((3, 4)).to_dict() == {"position": [3, 4]}

    def test_to_dict_without_position(self):
        assert Food().to_dict() == {"position": None}
