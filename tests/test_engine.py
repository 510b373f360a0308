"""Tests for the session state machine and simulation step."""

import json

import numpy as np

from prism_snake.config import GameConfig
from prism_snake.engine import (
    GameSession,
    GameStatus,
    new_session,
    place_food,
    restart,
    session_from_config,
    step,
)
from prism_snake.food import Food
from prism_snake.grid import Grid
from prism_snake.snake import Direction, Snake


def _session(body, direction=Direction.RIGHT, food=(0, 0), width=10, height=10,
             grow_pending=False, seed=0):
    return GameSession(
        grid=Grid(width, height),
        snake=Snake(body, direction, grow_pending=grow_pending),
        food=Food(food, rng=np.random.default_rng(seed)),
    )


class TestNewSession:
    def test_fresh_state(self):
        session = new_session(20, 10, seed=0)
        assert session.status == GameStatus.RUNNING
        assert not session.game_over
        assert session.tick == 0
        assert list(session.snake.body) == [(10, 5)]
        assert session.snake.direction == Direction.RIGHT

    def test_food_not_on_snake(self):
        for seed in range(20):
            session = new_session(4, 4, seed=seed)
            assert session.food.position is not None
            assert not session.snake.occupies(session.food.position)

    def test_rng_reused(self):
        rng = np.random.default_rng(5)
        assert new_session(10, 10, rng=rng).rng is rng

    def test_from_config(self):
        config = GameConfig(grid_width=12, grid_height=8, max_spawn_attempts=5, seed=4)
        session = session_from_config(config)
        assert (session.grid.width, session.grid.height) == (12, 8)
        assert session.max_spawn_attempts == 5
        assert session.food.position == session_from_config(config).food.position


class TestStepMovement:
    def test_basic_step(self):
        session = _session([(5, 5)], food=(0, 0))
        nxt = step(session)
        assert nxt.snake.head == (6, 5)
        assert nxt.tick == 1
        assert len(nxt.snake) == 1

    def test_step_does_not_mutate_input(self):
        session = _session([(5, 5), (4, 5)], food=(6, 5))
        before = session.to_dict()
        nxt = step(session)
        assert nxt is not session
        assert session.to_dict() == before

    def test_wraps_at_edge(self):
        session = _session([(9, 0)], food=(5, 5))
        assert step(session).snake.head == (0, 0)
        session = _session([(0, 0)], Direction.UP, food=(5, 5))
        assert step(session).snake.head == (0, 9)


class TestStepFood:
    def test_eating_schedules_growth_for_next_tick(self):
        session = _session([(5, 5)], food=(6, 5))
        after_eat = step(session)
        assert after_eat.snake.grow_pending
        assert len(after_eat.snake) == 1
        assert after_eat.last_growth is None

        after_eat.food.position = (0, 0)
        after_grow = step(after_eat)
        assert len(after_grow.snake) == 2
        assert not after_grow.snake.grow_pending
        assert after_grow.last_growth == after_grow.snake.head

    def test_food_respawned_off_snake(self):
        session = _session([(5, 5), (4, 5), (3, 5)], food=(6, 5))
        nxt = step(session)
        assert nxt.food.position is not None
        assert not nxt.snake.occupies(nxt.food.position)

    def test_food_never_overlaps_snake(self):
        session = new_session(6, 6, seed=11)
        rng = np.random.default_rng(11)
        directions = list(Direction)
        for _ in range(500):
            if session.game_over:
                session = restart(session)
            session.snake.set_direction(directions[int(rng.integers(4))])
            session = step(session)
            if session.food.position is not None:
                assert not session.snake.occupies(session.food.position)

    def test_length_changes_only_with_growth(self):
        session = new_session(8, 8, seed=3)
        rng = np.random.default_rng(3)
        directions = list(Direction)
        for _ in range(300):
            if session.game_over:
                break
            pending = session.snake.grow_pending
            length = len(session.snake)
            session.snake.set_direction(directions[int(rng.integers(4))])
            session = step(session)
            assert len(session.snake) == length + (1 if pending else 0)


class TestStepCollision:
    def test_collision_at_exact_tick(self):
        session = _session([(5, 5), (6, 5), (6, 6), (5, 6)], Direction.RIGHT)
        nxt = step(session)
        assert nxt.status == GameStatus.GAME_OVER
        assert nxt.game_over
        assert nxt.tick == 1

    def test_terminal_session_is_frozen(self):
        session = step(_session([(5, 5), (6, 5), (6, 6), (5, 6)], Direction.RIGHT))
        snapshot = session.to_dict()
        for _ in range(5):
            later = step(session)
            assert later is session
        assert session.to_dict() == snapshot

    def test_no_collision_when_clear(self):
        session = _session([(5, 5), (4, 5), (3, 5)], Direction.DOWN)
        assert step(session).status == GameStatus.RUNNING

    def test_food_check_precedes_collision(self):
        # Food deliberately placed on the cell the head will collide with.
        session = _session(
            [(5, 5), (6, 5), (6, 6), (5, 6)], Direction.RIGHT, food=(6, 5),
        )
        nxt = step(session)
        assert nxt.snake.grow_pending
        assert nxt.status == GameStatus.GAME_OVER


class TestFoodPlacement:
    def test_fallback_scan_finds_last_free_cell(self):
        session = _session([(0, 0), (1, 0), (1, 1)], width=2, height=2)
        session.max_spawn_attempts = 1
        assert place_food(session)
        assert session.food.position == (0, 1)

    def test_fallback_when_sampling_keeps_missing(self, monkeypatch):
        session = _session([(0, 0), (1, 0)], width=4, height=4)
        monkeypatch.setattr(session.food, "random_position", lambda w, h: (0, 0))
        assert place_food(session)
        assert session.food.position is not None
        assert not session.snake.occupies(session.food.position)

    def test_board_full_is_terminal(self):
        session = _session(
            [(1, 0), (1, 1), (0, 1)], Direction.LEFT, food=(0, 0),
            width=2, height=2, grow_pending=True,
        )
        nxt = step(session)
        assert len(nxt.snake) == 4
        assert nxt.status == GameStatus.BOARD_FULL
        assert nxt.game_over
        assert nxt.food.position is None
        assert step(nxt) is nxt


class TestRestart:
    def test_restart_after_game_over(self):
        over = step(_session([(5, 5), (6, 5), (6, 6), (5, 6)], Direction.RIGHT))
        assert over.game_over
        fresh = restart(over)
        assert fresh.status == GameStatus.RUNNING
        assert fresh.tick == 0
        assert list(fresh.snake.body) == [(5, 5)]
        assert fresh.snake.direction == Direction.RIGHT
        assert not fresh.snake.occupies(fresh.food.position)
        assert fresh.rng is over.rng
        assert (fresh.grid.width, fresh.grid.height) == (10, 10)


class TestSessionSerialization:
    def test_state_is_json_serializable(self):
        session = step(new_session(10, 10, seed=42))
        assert isinstance(json.dumps(session.to_dict()), str)

    def test_state_structure(self):
        state = new_session(10, 10, seed=0).to_dict()
        assert state["tick"] == 0
        assert state["status"] == "running"
        assert state["game_over"] is False
        assert state["length"] == 1
        assert state["grid"] == {"width": 10, "height": 10}
        assert "snake" in state
        assert "food" in state


class TestDeterminism:
    def test_same_seed_same_outcome(self):
        actions = [
            Direction.RIGHT, Direction.DOWN, Direction.DOWN,
            Direction.LEFT, Direction.UP,
        ] * 4
        assert self._run_game(123, actions) == self._run_game(123, actions)

    def test_different_seeds_differ(self):
        a = new_session(20, 20, seed=1).food.position
        b = new_session(20, 20, seed=2).food.position
        c = new_session(20, 20, seed=3).food.position
        assert len({a, b, c}) > 1

    @staticmethod
    def _run_game(seed: int, actions: list[Direction]) -> dict:
        session = new_session(12, 12, seed=seed)
        for action in actions:
            session.snake.set_direction(action)
            session = step(session)
        return session.to_dict()
