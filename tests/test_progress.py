"""Tests for progress rounding, clamping and status counting."""
from canvas_core.progress import (
    clamp_progress,
    completion_percentage,
    count_project_statuses,
    count_task_statuses,
    round_half_up,
)


class TestRounding:
    """Progress rounds halves up, unlike the built-in round()."""

    def test_halves_round_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(0.5) == 1
        assert round_half_up(62.5) == 63

    def test_other_values_round_to_nearest(self):
        assert round_half_up(33.333) == 33
        assert round_half_up(66.667) == 67
        assert round_half_up(12.4) == 12


class TestClampProgress:

    def test_below_zero_clamps_to_zero(self):
        assert clamp_progress(-10) == 0

    def test_above_hundred_clamps_to_hundred(self):
        assert clamp_progress(150) == 100

    def test_in_range_is_unchanged(self):
        assert clamp_progress(50) == 50
        assert clamp_progress(0) == 0
        assert clamp_progress(100) == 100

    def test_fractions_are_rounded(self):
        assert clamp_progress(49.5) == 50
        assert clamp_progress(99.6) == 100


class TestCompletionPercentage:

    def test_no_tasks_is_zero(self):
        assert completion_percentage([]) == 0

    def test_one_of_three_done(self):
        assert completion_percentage(["done", "in-progress", "todo"]) == 33

    def test_one_of_eight_done_rounds_up(self):
        assert completion_percentage(["done"] + ["todo"] * 7) == 13

    def test_all_done(self):
        assert completion_percentage(["done", "done"]) == 100


class TestStatusCounts:

    def test_task_counts_use_status_values(self):
        counts = count_task_statuses([
            {"status": "done"},
            {"status": "in-progress"},
            {"status": "in-progress"},
            {"status": "todo"},
        ])
        assert counts == {
            "total": 4,
            "backlog": 0,
            "todo": 1,
            "in-progress": 2,
            "review": 0,
            "done": 1,
        }

    def test_task_counts_snake_case(self):
        counts = count_task_statuses([{"status": "in-progress"}], snake_case=True)
        assert counts["in_progress"] == 1
        assert "in-progress" not in counts

    def test_project_counts(self):
        counts = count_project_statuses([
            {"status": "active"},
            {"status": "on-hold"},
            {"status": "active"},
        ])
        assert counts == {
            "total": 3,
            "active": 2,
            "completed": 0,
            "on_hold": 1,
            "planning": 0,
        }
