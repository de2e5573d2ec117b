from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timedelta

from .models import ParseError, TaskRecord
from .report import build_report, render_report_text
from .tasklog import TaskLog, parse_time
from .utils import format_minutes, local_day_bounds


def _add_window_args(p: argparse.ArgumentParser) -> None:
    g = p.add_mutually_exclusive_group()
    g.add_argument("--today", action="store_true", help="Tasks started today (default).")
    g.add_argument("--yesterday", action="store_true", help="Tasks started yesterday.")
    g.add_argument("--last", type=int, default=None, metavar="DAYS", help="Tasks started in the last N days.")
    p.add_argument("--from", dest="start", default=None, metavar="TIME", help="Range start (YYYY-MM-DD HH:MM or HH:MM).")
    p.add_argument("--to", dest="end", default=None, metavar="TIME", help="Range end (YYYY-MM-DD HH:MM or HH:MM).")


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ttimetracker",
        description="Log what you work on into plain CSV files, one per day.",
    )
    p.add_argument("--dir", default=None, help="Log directory (default: $TTIMETRACKER_DIR or ~/.ttimetracker).")
    p.add_argument("-v", "--verbose", action="store_true", help="Log file operations to stderr.")
    p.add_argument("--version", action="store_true", help="Print version and exit.")

    sub = p.add_subparsers(dest="cmd", required=False)

    ps = sub.add_parser("start", help="Start a task, finishing the running one first.")
    ps.add_argument("description", nargs="+", help="What you are working on.")
    ps.add_argument("--at", default=None, metavar="TIME", help="Start time (default: now).")

    pst = sub.add_parser("stop", help="Finish the running task.")
    pst.add_argument("--at", default=None, metavar="TIME", help="Finish time (default: now).")

    pa = sub.add_parser("add", help="Log a finished task directly.")
    pa.add_argument("description", nargs="+", help="What you worked on.")
    pa.add_argument("--from", dest="start", required=True, metavar="TIME", help="Start time.")
    pa.add_argument("--to", dest="end", required=True, metavar="TIME", help="Finish time.")

    pr = sub.add_parser("resume", help="Start the last finished task again.")
    pr.add_argument("--at", default=None, metavar="TIME", help="Start time (default: now).")

    sub.add_parser("status", help="Show the running task.")

    pl = sub.add_parser("list", help="List logged tasks for a time window.")
    _add_window_args(pl)

    prp = sub.add_parser("report", help="Summarize logged tasks for a time window.")
    _add_window_args(prp)
    return p


def main(argv: list[str] | None = None) -> int:
    from . import __version__
    argv = argv if argv is not None else sys.argv[1:]
    p = _parser()
    args = p.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.cmd is None:
        p.print_help()
        return 0

    try:
        tlog = TaskLog(now=datetime.now().replace(microsecond=0), directory=args.dir)

        if args.cmd == "start":
            return _cmd_start(tlog, args)
        if args.cmd == "stop":
            return _cmd_stop(tlog, args)
        if args.cmd == "add":
            return _cmd_add(tlog, args)
        if args.cmd == "resume":
            return _cmd_resume(tlog, args)
        if args.cmd == "status":
            return _cmd_status(tlog)
        if args.cmd == "list":
            return _cmd_list(tlog, args)
        if args.cmd == "report":
            return _cmd_report(tlog, args)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    p.print_help()
    return 2


def _when(tlog: TaskLog, text: str | None) -> datetime | None:
    if text is None:
        return None
    return parse_time(text, tlog.now)


def _describe(r: TaskRecord) -> str:
    if r.finish is None:
        return f"{r.description} (started {r.start:%H:%M})"
    return f"{r.description} ({r.start:%H:%M}-{r.finish:%H:%M}, {format_minutes(r.duration)})"


def _window(tlog: TaskLog, args) -> tuple[datetime, datetime, str]:
    today = tlog.now.date()
    if args.start is not None or args.end is not None:
        start = _when(tlog, args.start) or local_day_bounds(today)[0]
        end = _when(tlog, args.end) or local_day_bounds(today)[1]
        title = f"Tasks {start:%Y-%m-%d %H:%M} to {end:%Y-%m-%d %H:%M}"
    elif args.yesterday:
        start, end = local_day_bounds(today - timedelta(days=1))
        title = f"Tasks {start:%b %d, %Y} (yesterday)"
    elif args.last is not None:
        days = max(1, int(args.last))
        start = local_day_bounds(today - timedelta(days=days - 1))[0]
        end = local_day_bounds(today)[1]
        title = f"Tasks for the last {days} days"
    else:
        start, end = local_day_bounds(today)
        title = f"Tasks {start:%b %d, %Y} (today)"
    return start, end, title


def _cmd_start(tlog: TaskLog, args) -> int:
    at = _when(tlog, args.at)
    finished = tlog.finish_current(at)
    if finished is not None:
        print(f"Finished {_describe(finished)}")
    started = tlog.start_task(" ".join(args.description), at)
    print(f"Started {_describe(started)}")
    return 0


def _cmd_stop(tlog: TaskLog, args) -> int:
    finished = tlog.finish_current(_when(tlog, args.at))
    if finished is None:
        print("No task running.", file=sys.stderr)
        return 2
    print(f"Finished {_describe(finished)}")
    return 0


def _cmd_add(tlog: TaskLog, args) -> int:
    record = tlog.save(
        start=_when(tlog, args.start),
        finish=_when(tlog, args.end),
        description=" ".join(args.description),
    )
    print(f"Logged {_describe(record)}")
    return 0


def _cmd_resume(tlog: TaskLog, args) -> int:
    record = tlog.resume_last(_when(tlog, args.at))
    if record is None:
        print("Nothing to resume.", file=sys.stderr)
        return 2
    print(f"Resumed {_describe(record)}")
    return 0


def _cmd_status(tlog: TaskLog) -> int:
    current = tlog.current_task()
    if current is None:
        print("No task running.")
        return 0
    print(f"{current.description}  since {current.start:%Y-%m-%d %H:%M}  ({format_minutes(current.elapsed(tlog.now))})")
    return 0


def _cmd_list(tlog: TaskLog, args) -> int:
    start, end, title = _window(tlog, args)
    tasks = tlog.query_range(start, end)
    if not tasks:
        print(f"{title}: nothing logged.")
        return 0

    print(f"{title}:")
    total = 0
    for t in tasks:
        mins = t.elapsed(tlog.now)
        total += mins
        print(f"  {t.start:%Y-%m-%d %H:%M}  {t.finish:%H:%M}  {format_minutes(mins):>6}  {t.description}")
    print(f"  total {format_minutes(total)}")
    return 0


def _cmd_report(tlog: TaskLog, args) -> int:
    start, end, title = _window(tlog, args)
    tasks = tlog.query_range(start, end)
    rep = build_report(tasks, title=title, now=tlog.now)
    print(render_report_text(rep))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
