from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .utils import day_filename, day_subdirectory, default_directory

PathLike = Union[str, Path]


@dataclass(frozen=True)
class TaskLogConfig:
    """Every option a TaskLog understands, fully resolved.

    now          the moment that picks which day file this log writes to
    directory    root holding the ``current``/``last`` pointers and the year folders
    subdirectory folder of the day file, ``directory/YYYY/MM_Mon``
    filename     the day file, ``subdirectory/YYYY-MM-DD.csv``
    """

    now: datetime
    directory: Path
    subdirectory: Path
    filename: Path


def _as_path(p: PathLike) -> Path:
    return Path(p).expanduser()


def resolve_config(
    now: Optional[datetime] = None,
    directory: Optional[PathLike] = None,
    subdirectory: Optional[PathLike] = None,
    filename: Optional[PathLike] = None,
) -> TaskLogConfig:
    now = now if now is not None else datetime.now()
    root = _as_path(directory) if directory is not None else default_directory()

    sub = _as_path(subdirectory) if subdirectory is not None else day_subdirectory(root, now.date())
    if filename is not None:
        fname = _as_path(filename)
    elif subdirectory is not None:
        fname = sub / (now.strftime("%Y-%m-%d") + ".csv")
    else:
        fname = day_filename(root, now.date())

    return TaskLogConfig(now=now, directory=root, subdirectory=sub, filename=fname)
