from datetime import datetime

from ttimetracker.models import TaskRecord
from ttimetracker.report import build_report, render_report_text

NOW = datetime(2012, 5, 16, 15, 8, 0)

def _task(h1, m1, h2, m2, desc):
    return TaskRecord(datetime(2012, 5, 16, h1, m1), datetime(2012, 5, 16, h2, m2), desc)

def test_build_report_groups_by_description():
    tasks = [
        _task(9, 0, 9, 30, "standup"),
        _task(10, 0, 11, 35, "coding"),
        _task(13, 0, 13, 15, "standup"),
    ]
    rep = build_report(tasks, title="Today", now=NOW)
    assert rep.total_minutes == 140
    assert rep.task_count == 3
    assert rep.by_description == [("coding", 95, 1), ("standup", 45, 2)]

def test_build_report_counts_open_task_until_now():
    rep = build_report([TaskRecord(datetime(2012, 5, 16, 14, 32), None, "homework")], title="t", now=NOW)
    assert rep.total_minutes == 36

def test_render_report_text():
    rep = build_report([_task(10, 0, 11, 35, "coding")], title="Today", now=NOW)
    text = render_report_text(rep)
    assert text.splitlines()[0] == "Today"
    assert "Total tracked: 1:35 across 1 tasks" in text
    assert "coding" in text and "1:35" in text

def test_render_empty_report():
    text = render_report_text(build_report([], title="Nothing", now=NOW))
    assert "(no data)" in text
