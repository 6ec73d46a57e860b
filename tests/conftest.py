"""Shared fixtures: the diamond project and a three-task cycle."""

from datetime import date

import pytest

from projectplan.model import Task, TaskDependency, TaskStatus


def make_task(tid: str, days: int, status: TaskStatus = TaskStatus.NOT_STARTED) -> Task:
    return Task(id=tid, project_id="p1", name=f"Task {tid}", duration_days=days, status=status)


def edge(task_id: str, depends_on: str) -> TaskDependency:
    return TaskDependency(id=f"{task_id}->{depends_on}", task_id=task_id, depends_on_task_id=depends_on)


@pytest.fixture
def start() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def diamond_tasks() -> list[Task]:
    return [make_task("T1", 2), make_task("T2", 3), make_task("T3", 1), make_task("T4", 2)]


@pytest.fixture
def diamond_deps() -> list[TaskDependency]:
    return [edge("T2", "T1"), edge("T3", "T1"), edge("T4", "T2"), edge("T4", "T3")]


@pytest.fixture
def cycle_tasks() -> list[Task]:
    return [make_task("A", 1), make_task("B", 1), make_task("C", 1)]


@pytest.fixture
def cycle_deps() -> list[TaskDependency]:
    return [edge("A", "B"), edge("B", "C"), edge("C", "A")]
