"""Run logging: console output, buffered task output and the diagnostic trace."""

from dotkit.log.buffered import BufferedLog
from dotkit.log.diagnostic import DiagEvent, DiagnosticLog
from dotkit.log.logger import Logger
from dotkit.log.types import Log, TaskEntry, TaskStatus

__all__ = [
    "BufferedLog",
    "DiagEvent",
    "DiagnosticLog",
    "Log",
    "Logger",
    "TaskEntry",
    "TaskStatus",
]
