import pandas as pd
import plotly.express as px

from .model import ImpactReport, SchedulingResult, TaskStatus

SCHEDULE_COLUMNS = ['ID', 'Task', 'Status', 'Duration', 'Start_Date', 'End_Date']
IMPACT_COLUMNS = ['ID', 'Task', 'Current_Start', 'Proposed_Start', 'Shift_Days']


def schedule_frame(result: SchedulingResult) -> pd.DataFrame:
    rows = [{
        'ID': t.id,
        'Task': t.name,
        'Status': TaskStatus(t.status).value,
        'Duration': t.duration_days,
        'Start_Date': t.start_date,
        'End_Date': t.end_date,
    } for t in result.scheduled_tasks]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def impact_frame(report: ImpactReport) -> pd.DataFrame:
    rows = [{
        'ID': i.task_id,
        'Task': i.task_name,
        'Current_Start': i.current_start_date,
        'Proposed_Start': i.proposed_start_date,
        'Shift_Days': i.shift_days,
    } for i in report.impacts]
    return pd.DataFrame(rows, columns=IMPACT_COLUMNS)


def gantt_figure(frame: pd.DataFrame, title: str = 'Project Timeline'):
    """Plotly timeline of a schedule frame, one bar per task coloured by status."""
    df = frame.dropna(subset=['Start_Date', 'End_Date']).copy()
    df['Start_Date'] = pd.to_datetime(df['Start_Date'])
    df['End_Date'] = pd.to_datetime(df['End_Date'])
    fig = px.timeline(df, x_start='Start_Date', x_end='End_Date', y='Task', color='Status',
                      title=title, text='Task')
    fig.update_yaxes(autorange='reversed')
    fig.update_layout(
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return fig
