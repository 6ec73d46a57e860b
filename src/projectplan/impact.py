from dataclasses import replace
from typing import Sequence

import structlog

from .graph import find_cycle
from .model import ImpactReport, Task, TaskDependency, TaskImpact
from .schedule import CycleError, schedule_forward

log = structlog.get_logger()


def apply_duration_change(tasks: Sequence[Task], task_id: str, duration_days: int):
    return [replace(t, duration_days=duration_days) if t.id == task_id else t for t in tasks]


def analyze_impact(tasks: Sequence[Task], dependencies: Sequence[TaskDependency], task_id: str,
                   proposed_duration_days: int, project_start_date) -> ImpactReport:
    """What-if report for changing one task's duration, without touching the inputs.

    Both the current and the proposed timeline are recomputed from the same
    snapshot and compared by task id. The edited task itself is never listed.

    Raises:
        ValueError: proposed duration is below one day.
        KeyError: ``task_id`` is not in ``tasks``.
        CycleError: the proposed schedule cannot be computed.
    """
    tasks, dependencies = list(tasks), list(dependencies)
    if proposed_duration_days is None or int(proposed_duration_days) < 1:
        raise ValueError("Valid durationDays is required")
    if not any(t.id == task_id for t in tasks):
        raise KeyError(task_id)

    proposed = schedule_forward(apply_duration_change(tasks, task_id, int(proposed_duration_days)),
                                dependencies, project_start_date)
    if proposed.has_cycle:
        raise CycleError("This change would create a dependency cycle", find_cycle(tasks, dependencies))
    current = {t.id: t for t in schedule_forward(tasks, dependencies, project_start_date).scheduled_tasks}

    report = ImpactReport(task_id=task_id, proposed_duration_days=int(proposed_duration_days))
    for p in proposed.scheduled_tasks:
        c = current.get(p.id)
        if c is None or p.id == task_id or not c.start_date or not p.start_date:
            continue
        shift = (p.start_date - c.start_date).days
        if shift != 0:
            report.impacts.append(TaskImpact(task_id=p.id, task_name=p.name, current_start_date=c.start_date,
                                             proposed_start_date=p.start_date, shift_days=shift))
    log.info("impact_computed", task_id=task_id, affected=report.total_affected, max_shift=report.max_shift)
    return report
