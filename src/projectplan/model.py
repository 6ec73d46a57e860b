from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Task:
    id: str
    project_id: str
    name: str
    duration_days: int
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    # derived, overwritten by every successful schedule run
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def effective_duration(self) -> int:
        """Duration used for date arithmetic; non-positive values count as one day."""
        try:
            days = int(self.duration_days)
        except (TypeError, ValueError):
            return 1
        return days if days >= 1 else 1


@dataclass
class TaskDependency:
    """Finish-to-start edge: ``task_id`` cannot start before ``depends_on_task_id`` ends."""
    id: str
    task_id: str
    depends_on_task_id: str


@dataclass
class SchedulingResult:
    scheduled_tasks: List[Task]
    has_cycle: bool = False
    cycle_error: Optional[str] = None


@dataclass
class TaskImpact:
    task_id: str
    task_name: str
    current_start_date: Optional[date]
    proposed_start_date: Optional[date]
    shift_days: int


@dataclass
class ImpactReport:
    task_id: str
    proposed_duration_days: int
    impacts: List[TaskImpact] = field(default_factory=list)

    @property
    def total_affected(self) -> int:
        return len(self.impacts)

    @property
    def max_shift(self) -> int:
        return max((abs(i.shift_days) for i in self.impacts), default=0)
