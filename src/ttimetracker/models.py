from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .utils import format_time


class ParseError(ValueError):
    """A stored task line or a time string could not be parsed."""

    def __init__(self, message: str, text: str = "") -> None:
        super().__init__(message)
        self.text = text


def minutes_between(start: datetime, finish: datetime) -> int:
    return math.ceil((finish - start).total_seconds() / 60)


@dataclass(frozen=True)
class TaskRecord:
    start: datetime
    finish: Optional[datetime]
    description: str

    @property
    def duration(self) -> Optional[int]:
        if self.finish is None:
            return None
        return minutes_between(self.start, self.finish)

    @property
    def is_open(self) -> bool:
        return self.finish is None

    def elapsed(self, now: datetime) -> int:
        """Minutes spent so far, using *now* as the finish of an open task."""
        return minutes_between(self.start, self.finish if self.finish is not None else now)

    def to_line(self) -> str:
        fields = [format_time(self.start)]
        if self.finish is not None:
            fields.append(format_time(self.finish))
        fields.append(self.description.strip())
        return ", ".join(fields)
