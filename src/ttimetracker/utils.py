from __future__ import annotations

import os
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Iterator

DEFAULT_APP_DIRNAME = ".ttimetracker"
DIR_ENV_VAR = "TTIMETRACKER_DIR"
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_directory() -> Path:
    """Return the directory the logs live in.

    - $TTIMETRACKER_DIR when set
    - otherwise ~/.ttimetracker
    """
    override = os.environ.get(DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_APP_DIRNAME


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def day_subdirectory(directory: Path, day: date) -> Path:
    # e.g. 2012/05_May
    return directory / f"{day.year}" / day.strftime("%m_%b")


def day_filename(directory: Path, day: date) -> Path:
    return day_subdirectory(directory, day) / (day.strftime("%Y-%m-%d") + ".csv")


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    return start, end


def iter_days(first: date, last: date) -> Iterator[date]:
    d = first
    while d <= last:
        yield d
        d += timedelta(days=1)


def format_time(dt: datetime) -> str:
    return dt.strftime(TIME_FORMAT)


def format_minutes(minutes: int) -> str:
    """Render a number of minutes as H:MM, e.g. 95 -> "1:15", 5 -> "0:05"."""
    minutes = int(minutes)
    return f"{minutes // 60}:{minutes % 60:02d}"
