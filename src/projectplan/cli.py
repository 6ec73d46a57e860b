import argparse, json, sys
from datetime import date

import pandas as pd
import structlog

from .data_loader import load_excel, start_date_from
from .graph import find_cycle
from .impact import analyze_impact
from .kpis import compute_kpis
from .logconfig import configure_logging
from .report import gantt_figure, schedule_frame
from .schedule import CycleError, DependencyError, schedule_forward, validate_new_dependency

log = structlog.get_logger()


def _iso(d): return d.isoformat() if d else None


def task_json(t):
    return {'id': t.id, 'name': t.name, 'status': getattr(t.status, 'value', t.status),
            'duration_days': t.duration_days, 'start_date': _iso(t.start_date), 'end_date': _iso(t.end_date)}


def resolve_start(args, params) -> date:
    if args.start:
        return pd.Timestamp(args.start).date()
    return start_date_from(params) or date.today()


def cmd_schedule(args, data):
    start = resolve_start(args, data['project'])
    res = schedule_forward(data['tasks'], data['dependencies'], start)
    if res.has_cycle:
        return 1, {'error': res.cycle_error, 'cycle': find_cycle(data['tasks'], data['dependencies'])}
    if args.gantt:
        gantt_figure(schedule_frame(res)).write_html(args.gantt)
        log.info('gantt_written', path=args.gantt)
    return 0, {'tasks': [task_json(t) for t in res.scheduled_tasks],
               'summary': compute_kpis(res.scheduled_tasks, data['dependencies'], start)}


def cmd_impact(args, data):
    start = resolve_start(args, data['project'])
    try:
        rep = analyze_impact(data['tasks'], data['dependencies'], args.task, args.days, start)
    except CycleError as e:
        return 1, {'error': str(e), 'cycle': e.cycle}
    except KeyError:
        return 1, {'error': 'Task not found'}
    except ValueError as e:
        return 1, {'error': str(e)}
    return 0, {'impacts': [{'task_id': i.task_id, 'task_name': i.task_name,
                            'current_start_date': _iso(i.current_start_date),
                            'proposed_start_date': _iso(i.proposed_start_date),
                            'shift_days': i.shift_days} for i in rep.impacts],
               'total_affected': rep.total_affected, 'max_shift': rep.max_shift}


def cmd_check_edge(args, data):
    try:
        dep = validate_new_dependency(data['tasks'], data['dependencies'], args.task, args.depends_on)
    except DependencyError as e:
        return 1, {'error': str(e)}
    return 0, {'dependency': {'id': dep.id, 'task_id': dep.task_id, 'depends_on_task_id': dep.depends_on_task_id}}


def build_parser():
    ap = argparse.ArgumentParser(prog='projectplan', description='Project timeline scheduler')
    ap.add_argument('--log-level', default='WARNING')
    sub = ap.add_subparsers(dest='command', required=True)
    s = sub.add_parser('schedule', help='compute earliest start/end dates')
    s.add_argument('--gantt', help='write a Gantt chart to this HTML file')
    s.set_defaults(func=cmd_schedule)
    i = sub.add_parser('impact', help='preview the effect of changing one task duration')
    i.add_argument('--task', required=True); i.add_argument('--days', type=int, required=True)
    i.set_defaults(func=cmd_impact)
    c = sub.add_parser('check-edge', help='validate a new dependency before adding it')
    c.add_argument('--task', required=True); c.add_argument('--depends-on', required=True)
    c.set_defaults(func=cmd_check_edge)
    for p in (s, i, c):
        p.add_argument('--data', default='data/project.xlsx')
        p.add_argument('--start', help='project start date (YYYY-MM-DD)')
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    data = load_excel(args.data)
    code, payload = args.func(args, data)
    print(json.dumps(payload, indent=2))
    return code


if __name__ == '__main__': sys.exit(main())
