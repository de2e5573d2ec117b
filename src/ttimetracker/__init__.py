from .config import TaskLogConfig, resolve_config
from .models import ParseError, TaskRecord
from .tasklog import TaskLog, parse_line, parse_time
from .utils import format_minutes, format_time

__version__ = "0.1.0"

__all__ = [
    "ParseError",
    "TaskLog",
    "TaskLogConfig",
    "TaskRecord",
    "format_minutes",
    "format_time",
    "parse_line",
    "parse_time",
    "resolve_config",
]
