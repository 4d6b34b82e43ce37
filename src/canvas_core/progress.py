"""Project progress rules.

A project's ``progress`` is the share of its tasks in the ``done`` column,
as a whole percentage. Direct writes are clamped to 0..100.
"""
import math
from collections import Counter
from typing import Iterable

from .models import TaskStatus, TASK_STATUSES, PROJECT_STATUSES


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    ``round()`` uses banker's rounding (12.5 -> 12); progress rounds 12.5 up.
    """
    return int(math.floor(value + 0.5))


def clamp_progress(progress: float) -> int:
    return min(100, max(0, round_half_up(progress)))


def completion_percentage(statuses: Iterable[str]) -> int:
    """Percentage of ``done`` statuses, 0 when there are none at all."""
    statuses = list(statuses)
    if not statuses:
        return 0
    done = sum(1 for status in statuses if status == TaskStatus.DONE.value)
    return round_half_up(done * 100 / len(statuses))


def count_task_statuses(tasks: Iterable[dict], snake_case: bool = False) -> dict[str, int]:
    """Count tasks per kanban column, plus ``total``.

    Keys are the status values (``in-progress``) unless ``snake_case`` is set.
    """
    counts = Counter(task.get("status") for task in tasks)
    result = {"total": sum(counts.values())}
    for status in TASK_STATUSES:
        key = status.replace("-", "_") if snake_case else status
        result[key] = counts.get(status, 0)
    return result


def count_project_statuses(projects: Iterable[dict]) -> dict[str, int]:
    """Count projects per status, plus ``total``. Keys use underscores (``on_hold``)."""
    counts = Counter(project.get("status") for project in projects)
    result = {"total": sum(counts.values())}
    for status in PROJECT_STATUSES:
        result[status.replace("-", "_")] = counts.get(status, 0)
    return result
