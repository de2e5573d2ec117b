from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from .config import PathLike, TaskLogConfig, resolve_config
from .models import ParseError, TaskRecord
from .utils import day_filename, ensure_dir, iter_days, local_day_bounds

log = logging.getLogger(__name__)

POINTER_NAMES = ("current", "last")

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_FULL_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")
_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%I:%M%p", "%I:%M %p", "%I%p", "%I %p")


def _as_date(day: Union[date, datetime]) -> date:
    return day.date() if isinstance(day, datetime) else day


def _naive_local(dt: datetime) -> datetime:
    # Offsets are never written, but accept them on input by folding into local time.
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def parse_time(text: str, default_day: Union[date, datetime]) -> datetime:
    """Parse a stored or typed time.

    Text containing a ``YYYY-MM-DD`` date is read as a full timestamp. Anything
    else is a bare time of day (``14:32``, ``09:00:00``, ``2pm``) placed on
    *default_day*.
    """
    s = text.strip()
    if not s:
        raise ParseError("empty time", text)

    if _DATE_RE.search(s):
        try:
            return _naive_local(datetime.fromisoformat(s))
        except ValueError:
            pass
        for fmt in _FULL_FORMATS:
            try:
                return datetime.strptime(s, fmt)
            except ValueError:
                continue
        raise ParseError(f"unrecognized timestamp: {s!r}", text)

    for fmt in _TIME_FORMATS:
        try:
            t = datetime.strptime(s.upper(), fmt).time()
        except ValueError:
            continue
        return datetime.combine(_as_date(default_day), t)
    raise ParseError(f"unrecognized time: {s!r}", text)


def _try_parse_time(text: str, default_day: Union[date, datetime]) -> Optional[datetime]:
    try:
        return parse_time(text, default_day)
    except ParseError:
        return None


def parse_line(line: str, default_day: Union[date, datetime], now: datetime) -> TaskRecord:
    """Parse one ``start[, finish], description`` line.

    Without a finish field the task is still running and *now* stands in as its
    provisional finish.
    """
    if not line.strip():
        raise ParseError("empty task line", line)

    fields = [f.strip() for f in line.split(",")]
    start = parse_time(fields[0], default_day)
    rest = fields[1:]

    finish = None
    if len(rest) >= 2:
        finish = _try_parse_time(rest[0], default_day)
    if finish is not None:
        description = ", ".join(rest[1:])
    else:
        finish = now
        description = ", ".join(rest)

    return TaskRecord(start=start, finish=finish, description=description)


class TaskLog:
    """Task storage rooted at one directory.

    Layout::

        <directory>/current                     start, description
        <directory>/last                        start, finish, description
        <directory>/YYYY/MM_Mon/YYYY-MM-DD.csv  start, finish, description per line
    """

    def __init__(
        self,
        now: Optional[datetime] = None,
        directory: Optional[PathLike] = None,
        subdirectory: Optional[PathLike] = None,
        filename: Optional[PathLike] = None,
        *,
        config: Optional[TaskLogConfig] = None,
    ) -> None:
        if config is None:
            config = resolve_config(now=now, directory=directory, subdirectory=subdirectory, filename=filename)
        self._config = config
        ensure_dir(config.directory)
        ensure_dir(config.subdirectory)

    @classmethod
    def from_config(cls, config: TaskLogConfig) -> "TaskLog":
        return cls(config=config)

    @property
    def config(self) -> TaskLogConfig:
        return self._config

    @property
    def now(self) -> datetime:
        return self._config.now

    @property
    def directory(self) -> Path:
        return self._config.directory

    @property
    def subdirectory(self) -> Path:
        return self._config.subdirectory

    @property
    def filename(self) -> Path:
        return self._config.filename

    def _pointer_path(self, name: str) -> Path:
        if name not in POINTER_NAMES:
            raise ValueError(f"unknown pointer {name!r}, expected one of {POINTER_NAMES}")
        return self.directory / name

    # ---- reading ----------------------------------------------------------

    def read_pointer(self, name: str) -> Optional[TaskRecord]:
        path = self._pointer_path(name)
        if not path.is_file():
            return None
        with path.open("r", encoding="utf-8") as f:
            line = f.readline()
        if not line.strip():
            return None
        return parse_line(line, self.now, now=self.now)

    def current_task(self) -> Optional[TaskRecord]:
        return self.read_pointer("current")

    def last_task(self) -> Optional[TaskRecord]:
        return self.read_pointer("last")

    def _read_day(self, path: Path, day: date) -> list[TaskRecord]:
        out: list[TaskRecord] = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                out.append(parse_line(line, day, now=self.now))
        return out

    def query_range(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> list[TaskRecord]:
        """Tasks whose start lies in [start, end], defaulting to today.

        Ordered by day, then by position in the day file.
        """
        day_start, day_end = local_day_bounds(self.now.date())
        lo = start if start is not None else day_start
        hi = end if end is not None else day_end
        if lo > hi:
            lo, hi = hi, lo

        tasks: list[TaskRecord] = []
        for day in iter_days(lo.date(), hi.date()):
            path = day_filename(self.directory, day)
            if not path.is_file():
                continue
            tasks.extend(self._read_day(path, day))

        return [t for t in tasks if lo <= t.start <= hi]

    # ---- writing ----------------------------------------------------------

    def _forget_last(self) -> None:
        last = self._pointer_path("last")
        if last.exists():
            last.unlink()
            log.debug("removed %s", last)

    def save(
        self,
        start: Optional[datetime] = None,
        finish: Optional[datetime] = None,
        description: str = "",
    ) -> TaskRecord:
        """Store a task.

        Without *finish* it becomes the open ``current`` task, replacing any
        previous one. With *finish* it is appended to this log's day file and
        ``current`` (if any) is moved to ``last``. Saving anything forgets the
        previous ``last``.
        """
        self._forget_last()

        record = TaskRecord(
            start=start if start is not None else self.now,
            finish=finish,
            description=(description or "").strip(),
        )

        if record.finish is None:
            current = self._pointer_path("current")
            with current.open("w", encoding="utf-8") as f:
                f.write(record.to_line() + "\n")
            log.debug("wrote %s: %s", current, record.to_line())
            return record

        with self.filename.open("a", encoding="utf-8") as f:
            f.write(record.to_line() + "\n")
        log.debug("appended to %s: %s", self.filename, record.to_line())

        current = self._pointer_path("current")
        if current.exists():
            current.replace(self._pointer_path("last"))
            log.debug("moved %s to last", current)
        return record

    def save_record(self, record: TaskRecord) -> TaskRecord:
        return self.save(start=record.start, finish=record.finish, description=record.description)

    # ---- state transitions ------------------------------------------------

    def start_task(self, description: str, at: Optional[datetime] = None) -> TaskRecord:
        return self.save(start=at, description=description)

    def finish_current(self, at: Optional[datetime] = None) -> Optional[TaskRecord]:
        current = self.current_task()
        if current is None:
            return None
        return self.save(
            start=current.start,
            finish=at if at is not None else self.now,
            description=current.description,
        )

    def resume_last(self, at: Optional[datetime] = None) -> Optional[TaskRecord]:
        last = self.last_task()
        if last is None:
            return None
        return self.save(start=at, description=last.description)
