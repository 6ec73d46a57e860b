"""Tests for what-if duration impact analysis."""

from datetime import date

import pytest

from conftest import edge, make_task
from projectplan.impact import analyze_impact, apply_duration_change
from projectplan.schedule import CycleError


class TestAnalyzeImpact:
    def test_diamond_lengthening_root(self, diamond_tasks, diamond_deps, start) -> None:
        rep = analyze_impact(diamond_tasks, diamond_deps, "T1", 5, start)
        shifts = {i.task_id: i.shift_days for i in rep.impacts}
        # T1 is the edited task and is never listed
        assert shifts == {"T2": 3, "T3": 3, "T4": 3}
        assert rep.total_affected == 3
        assert rep.max_shift == 3

    def test_entries_carry_names_and_dates(self, diamond_tasks, diamond_deps, start) -> None:
        rep = analyze_impact(diamond_tasks, diamond_deps, "T1", 5, start)
        t4 = next(i for i in rep.impacts if i.task_id == "T4")
        assert t4.task_name == "Task T4"
        assert t4.current_start_date == date(2024, 1, 6)
        assert t4.proposed_start_date == date(2024, 1, 9)

    def test_shortening_gives_negative_shift(self, diamond_tasks, diamond_deps, start) -> None:
        rep = analyze_impact(diamond_tasks, diamond_deps, "T2", 2, start)
        assert [(i.task_id, i.shift_days) for i in rep.impacts] == [("T4", -1)]
        assert rep.max_shift == 1

    def test_slack_absorbs_change(self, diamond_tasks, diamond_deps, start) -> None:
        # T3 ends before T2, so growing it by one day does not move T4
        rep = analyze_impact(diamond_tasks, diamond_deps, "T3", 2, start)
        assert rep.impacts == []
        assert rep.total_affected == 0
        assert rep.max_shift == 0

    def test_inputs_untouched(self, diamond_tasks, diamond_deps, start) -> None:
        analyze_impact(diamond_tasks, diamond_deps, "T1", 5, start)
        assert diamond_tasks[0].duration_days == 2
        assert all(t.start_date is None for t in diamond_tasks)

    def test_cycle_aborts(self, cycle_tasks, cycle_deps, start) -> None:
        with pytest.raises(CycleError) as exc:
            analyze_impact(cycle_tasks, cycle_deps, "A", 4, start)
        assert sorted(exc.value.cycle[:-1]) == ["A", "B", "C"]

    def test_unknown_task(self, diamond_tasks, diamond_deps, start) -> None:
        with pytest.raises(KeyError):
            analyze_impact(diamond_tasks, diamond_deps, "nope", 4, start)

    @pytest.mark.parametrize("days", [0, -2])
    def test_invalid_duration(self, diamond_tasks, diamond_deps, start, days: int) -> None:
        with pytest.raises(ValueError):
            analyze_impact(diamond_tasks, diamond_deps, "T1", days, start)


def test_apply_duration_change_copies_only_target() -> None:
    tasks = [make_task("A", 1), make_task("B", 2)]
    changed = apply_duration_change(tasks, "B", 7)
    assert changed[0] is tasks[0]
    assert changed[1] is not tasks[1]
    assert (changed[1].duration_days, tasks[1].duration_days) == (7, 2)


def test_isolated_task_change_affects_nothing(start) -> None:
    tasks = [make_task("A", 1), make_task("B", 2)]
    rep = analyze_impact(tasks, [edge("B", "A")], "B", 9, start)
    assert rep.impacts == []
