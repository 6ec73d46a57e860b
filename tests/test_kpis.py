"""Tests for the project summary figures."""

from datetime import date

from conftest import edge, make_task
from projectplan.kpis import blocked_tasks, compute_kpis
from projectplan.model import TaskStatus
from projectplan.schedule import schedule_forward


def test_summary_for_diamond(diamond_tasks, diamond_deps, start) -> None:
    res = schedule_forward(diamond_tasks, diamond_deps, start)
    k = compute_kpis(res.scheduled_tasks, diamond_deps, start)
    assert k["estimated_completion"] == "2024-01-08"
    assert k["total_lead_time_days"] == 7
    assert k["tasks"] == 4
    assert k["by_status"] == {"not_started": 4, "in_progress": 0, "completed": 0}
    assert k["completion_pct"] == 0


def test_unscheduled_tasks() -> None:
    k = compute_kpis([make_task("A", 1)], [], date(2024, 3, 1))
    assert k["estimated_completion"] is None
    assert k["total_lead_time_days"] == 0


def test_empty_project() -> None:
    k = compute_kpis([], [], date(2024, 3, 1))
    assert k["completion_pct"] == 0
    assert k["blocked_tasks"] == []


def test_completion_and_blocked() -> None:
    tasks = [
        make_task("A", 1, TaskStatus.COMPLETED),
        make_task("B", 1, TaskStatus.IN_PROGRESS),
        make_task("C", 1),
        make_task("D", 1),
    ]
    deps = [edge("B", "A"), edge("C", "B"), edge("D", "A")]
    assert blocked_tasks(tasks, deps) == ["C"]
    k = compute_kpis(tasks, deps, date(2024, 3, 1))
    assert k["completion_pct"] == 25
    assert k["by_status"]["in_progress"] == 1
