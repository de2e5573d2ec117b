from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .models import TaskRecord
from .utils import format_minutes


@dataclass(frozen=True)
class Report:
    title: str
    total_minutes: int
    task_count: int
    by_description: list[tuple[str, int, int]]  # description, minutes, tasks


def _bar(value: float, max_value: float, width: int = 18) -> str:
    if max_value <= 0:
        return ""
    filled = int(round((value / max_value) * width))
    filled = max(0, min(width, filled))
    return "█" * filled + " " * (width - filled)


def build_report(tasks: Iterable[TaskRecord], title: str, now: datetime) -> Report:
    total = 0
    count = 0
    minutes: dict[str, int] = {}
    runs: dict[str, int] = {}

    for t in tasks:
        m = max(0, t.elapsed(now))
        key = t.description or "(no description)"
        total += m
        count += 1
        minutes[key] = minutes.get(key, 0) + m
        runs[key] = runs.get(key, 0) + 1

    by_description = [
        (name, mins, runs[name])
        for name, mins in sorted(minutes.items(), key=lambda x: x[1], reverse=True)
    ]
    return Report(title=title, total_minutes=total, task_count=count, by_description=by_description)


def render_report_text(rep: Report) -> str:
    lines: list[str] = []
    lines.append(rep.title)
    lines.append("")
    lines.append(f"Total tracked: {format_minutes(rep.total_minutes)} across {rep.task_count} tasks")
    lines.append("")

    if not rep.by_description:
        lines.append("By task: (no data)")
        return "\n".join(lines)

    maxv = max(v for _, v, _ in rep.by_description)
    width = max(len(name) for name, _, _ in rep.by_description)
    lines.append("By task:")
    for name, mins, n in rep.by_description:
        bar = _bar(mins, maxv)
        lines.append(f"  {name:<{width}} {format_minutes(mins):>7}  {bar}  ({n}x)")
    return "\n".join(lines)
