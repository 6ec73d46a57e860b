from .graph import build_graph
from .model import TaskStatus


def blocked_tasks(tasks, dependencies):
    """Ids of unfinished tasks still waiting on a prerequisite that is not completed."""
    status = {t.id: TaskStatus(t.status) for t in tasks}
    g = build_graph(tasks, dependencies)
    return [tid for tid, prereqs in g.forward.items()
            if status[tid] != TaskStatus.COMPLETED and any(status[p] != TaskStatus.COMPLETED for p in prereqs)]


def compute_kpis(tasks, dependencies, project_start):
    ends = [t.end_date for t in tasks if t.end_date]
    finish = max(ends) if ends else None
    by_status = {s.value: 0 for s in TaskStatus}
    for t in tasks:
        by_status[TaskStatus(t.status).value] += 1
    return {
        'project_start': project_start.isoformat(),
        'estimated_completion': finish.isoformat() if finish else None,
        'total_lead_time_days': (finish - project_start).days if finish else 0,
        'tasks': len(tasks),
        'by_status': by_status,
        'completion_pct': round(by_status[TaskStatus.COMPLETED.value] * 100 / len(tasks)) if tasks else 0,
        'blocked_tasks': blocked_tasks(tasks, dependencies),
    }
