"""Tests for the headless throughput benchmark."""

import pytest

from prism_snake.benchmark import BenchmarkResult, benchmark_throughput


class TestBenchmarkResult:
    def test_summary_format(self):
        result = BenchmarkResult(
            total_games=10,
            total_ticks=500,
            total_frames=3000,
            wall_time_seconds=1.5,
            games_per_second=6.67,
            ticks_per_second=333.3,
        )
        summary = result.summary()
        assert "10 games" in summary
        assert "500 ticks" in summary
        assert "games/s" in summary
        assert "ticks/s" in summary


class TestBenchmarkThroughput:
    def test_basic_benchmark(self):
        result = benchmark_throughput(
            num_games=5, grid_width=10, grid_height=10, max_ticks=30,
        )
        assert result.total_games == 5
        assert result.total_ticks > 0
        assert result.total_frames >= result.total_ticks
        assert result.wall_time_seconds > 0
        assert result.ticks_per_second > 0

    def test_ticks_bounded_by_frames(self):
        # 60 fps frames at 100 ms per tick: roughly one tick per six frames.
        result = benchmark_throughput(
            num_games=2, grid_width=30, grid_height=30, max_ticks=10,
        )
        assert result.total_frames > result.total_ticks * 5

    def test_invalid_game_count(self):
        with pytest.raises(ValueError, match="at least 1"):
            benchmark_throughput(num_games=0)
