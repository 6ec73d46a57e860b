from collections import deque
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

import structlog

from .graph import DependencyGraph, build_graph, find_cycle
from .model import SchedulingResult, Task, TaskDependency

log = structlog.get_logger()

CYCLE_ERROR = "Circular dependency detected in task graph"


class CycleError(Exception):
    def __init__(self, message: str = CYCLE_ERROR, cycle: Sequence[str] = ()):
        super().__init__(message)
        self.cycle = list(cycle)


class DependencyError(ValueError):
    pass


def _has_cycle(graph: DependencyGraph) -> bool:
    visited = set()
    on_stack = set()
    for root in graph.forward:
        if root in visited:
            continue
        visited.add(root); on_stack.add(root)
        stack = [(root, iter(graph.forward[root]))]
        while stack:
            node, neighbours = stack[-1]
            for nb in neighbours:
                if nb in on_stack:
                    return True
                if nb not in visited:
                    visited.add(nb); on_stack.add(nb)
                    stack.append((nb, iter(graph.forward[nb])))
                    break
            else:
                on_stack.discard(node)
                stack.pop()
    return False


def _kahn(graph: DependencyGraph) -> List[str]:
    indeg = {tid: len(prereqs) for tid, prereqs in graph.forward.items()}
    q = deque(tid for tid, n in indeg.items() if n == 0)
    order = []
    while q:
        n = q.popleft(); order.append(n)
        for dependent in graph.reverse[n]:
            indeg[dependent] -= 1
            if indeg[dependent] == 0:
                q.append(dependent)
    return order


def detect_cycles(tasks: Iterable[Task], dependencies: Iterable[TaskDependency]) -> bool:
    """True if following prerequisite edges can lead back to a task already on the path."""
    return _has_cycle(build_graph(tasks, dependencies))


def topo_order(tasks: Iterable[Task], dependencies: Iterable[TaskDependency]) -> List[str]:
    """Kahn's algorithm; equally-ready tasks come out in input order.

    Tasks caught in a cycle are left out of the result instead of raising.
    """
    return _kahn(build_graph(tasks, dependencies))


def would_create_cycle(tasks: Sequence[Task], dependencies: Sequence[TaskDependency],
                       task_id: str, depends_on_task_id: str) -> bool:
    probe = list(dependencies) + [TaskDependency(id="temp", task_id=task_id, depends_on_task_id=depends_on_task_id)]
    return detect_cycles(tasks, probe)


def validate_new_dependency(tasks: Sequence[Task], dependencies: Sequence[TaskDependency],
                            task_id: str, depends_on_task_id: str, dep_id: str = "") -> TaskDependency:
    """Check a candidate edge against the current snapshot before it gets stored.

    Raises DependencyError with a user-facing message when the edge is rejected.
    """
    if not task_id or not depends_on_task_id:
        raise DependencyError("taskId and dependsOnTaskId are required")
    if task_id == depends_on_task_id:
        raise DependencyError("A task cannot depend on itself")
    ids = {t.id for t in tasks}
    if task_id not in ids or depends_on_task_id not in ids:
        raise DependencyError("Task not found")
    if any(d.task_id == task_id and d.depends_on_task_id == depends_on_task_id for d in dependencies):
        raise DependencyError("This dependency already exists")
    if would_create_cycle(tasks, dependencies, task_id, depends_on_task_id):
        raise DependencyError("This dependency would create a circular dependency")
    return TaskDependency(id=dep_id or f"{task_id}->{depends_on_task_id}",
                          task_id=task_id, depends_on_task_id=depends_on_task_id)


def _to_date(d) -> date:
    return d.date() if isinstance(d, datetime) else d


def forward_pass(graph: DependencyGraph, by_id: Dict[str, Task], order: List[str],
                 project_start: date) -> Dict[str, Tuple[date, date]]:
    dates: Dict[str, Tuple[date, date]] = {}
    for tid in order:
        t = by_id[tid]
        start = project_start
        for pr in graph.forward[tid]:
            if pr not in dates:
                continue
            if dates[pr][1] > start:
                start = dates[pr][1]
        duration = t.effective_duration()
        if duration != t.duration_days:
            log.warning("duration_coerced", task_id=tid, duration_days=t.duration_days, used=duration)
        dates[tid] = (start, start + timedelta(days=duration))
    return dates


def schedule_forward(tasks: Sequence[Task], dependencies: Sequence[TaskDependency],
                     project_start_date) -> SchedulingResult:
    """Earliest-start, finish-to-start schedule from a single project start date.

    On a cycle no dates are computed: the input tasks come back untouched with
    ``has_cycle`` set. Otherwise every task is returned as a copy carrying its
    computed ``start_date``/``end_date``, in topological order. Tasks the sort
    could not place go last, pinned to the project start.
    """
    tasks, dependencies = list(tasks), list(dependencies)
    project_start = _to_date(project_start_date)
    graph = build_graph(tasks, dependencies)
    if _has_cycle(graph):
        log.warning("cycle_detected", tasks=len(tasks), cycle=find_cycle(tasks, dependencies))
        return SchedulingResult(scheduled_tasks=tasks, has_cycle=True, cycle_error=CYCLE_ERROR)

    by_id = {t.id: t for t in tasks}
    order = _kahn(graph)
    dates = forward_pass(graph, by_id, order, project_start)

    scheduled = [replace(by_id[tid], start_date=dates[tid][0], end_date=dates[tid][1]) for tid in order]
    for t in tasks:
        if t.id not in dates:
            log.warning("task_missing_from_order", task_id=t.id)
            scheduled.append(replace(t, start_date=project_start,
                                     end_date=project_start + timedelta(days=t.effective_duration())))
    log.debug("schedule_computed", tasks=len(scheduled),
              project_end=max((t.end_date for t in scheduled), default=project_start).isoformat())
    return SchedulingResult(scheduled_tasks=scheduled)
