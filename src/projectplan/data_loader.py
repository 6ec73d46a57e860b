"""Read task, dependency and project sheets into engine objects.

Workbook layout:

* ``Tasks``: ID, Name, Duration, optional Status, Description, Project, DependsOn
  (comma separated prerequisite ids)
* ``Dependencies`` (optional): TaskID, DependsOnID, optional ID
* ``Project`` (optional): Param/Value rows, e.g. ``StartDate``
"""
from datetime import date
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .model import Task, TaskDependency, TaskStatus

TASK_COLUMNS = ('ID', 'Name', 'Duration')
DEPENDENCY_COLUMNS = ('TaskID', 'DependsOnID')


def _text(v, default=''):
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return default
    # excel hands back 1.0 for integer cells in a column that also has blanks
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return str(v).strip()


def _require(df: pd.DataFrame, columns, sheet: str):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Sheet {sheet!r} is missing column(s): {', '.join(missing)}")


def tasks_from_frame(df: pd.DataFrame, project_id: str = '') -> Tuple[List[Task], List[TaskDependency]]:
    _require(df, TASK_COLUMNS, 'Tasks')
    tasks, deps = [], []
    for _, row in df.iterrows():
        tid = _text(row['ID'])
        if not tid:
            continue
        raw = row['Duration']
        if pd.isna(raw):
            raise ValueError(f"Task {tid} has no Duration")
        if float(raw) != int(float(raw)):
            raise ValueError(f"Task {tid} has a fractional Duration: {raw}")
        status = _text(row.get('Status'), TaskStatus.NOT_STARTED.value).lower().replace(' ', '_')
        tasks.append(Task(
            id=tid,
            project_id=_text(row.get('Project'), project_id),
            name=_text(row['Name'], tid),
            duration_days=int(float(raw)),
            description=_text(row.get('Description')) or None,
            status=TaskStatus(status),
        ))
        for d in _text(row.get('DependsOn')).split(','):
            d = d.strip()
            if d:
                deps.append(TaskDependency(id=f"{tid}->{d}", task_id=tid, depends_on_task_id=d))
    return tasks, deps


def dependencies_from_frame(df: pd.DataFrame) -> List[TaskDependency]:
    _require(df, DEPENDENCY_COLUMNS, 'Dependencies')
    deps = []
    for _, row in df.iterrows():
        tid, on = _text(row['TaskID']), _text(row['DependsOnID'])
        if not tid or not on:
            continue
        deps.append(TaskDependency(id=_text(row.get('ID')) or f"{tid}->{on}", task_id=tid, depends_on_task_id=on))
    return deps


def parse_project(df: Optional[pd.DataFrame]) -> Dict[str, str]:
    if df is None or df.empty:
        return {}
    _require(df, ('Param', 'Value'), 'Project')
    return {_text(r['Param']): _text(r['Value']) for _, r in df.iterrows() if _text(r['Param'])}


def start_date_from(params: Dict[str, str]) -> Optional[date]:
    v = params.get('StartDate')
    return pd.Timestamp(v).date() if v else None


def load_frames(sheets: Dict[str, pd.DataFrame]):
    if 'Tasks' not in sheets:
        raise KeyError("Workbook has no 'Tasks' sheet")
    params = parse_project(sheets.get('Project'))
    tasks, deps = tasks_from_frame(sheets['Tasks'], params.get('ProjectID', ''))
    if sheets.get('Dependencies') is not None:
        deps += dependencies_from_frame(sheets['Dependencies'])
    return {'tasks': tasks, 'dependencies': deps, 'project': params}


def load_excel(path: str):
    return load_frames(pd.read_excel(path, sheet_name=None))
