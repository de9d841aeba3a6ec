"""Tasks, the reconciliation loop and the per-task executor wrapper."""

from dotkit.tasks.base import Task, TaskDryRun, TaskId, TaskOk, TaskResult, TaskSkipped
from dotkit.tasks.context import Context
from dotkit.tasks.executor import execute
from dotkit.tasks.graph import has_cycle, present_dependencies
from dotkit.tasks.processing import (
    ProcessOpts,
    process_resource_states,
    process_resources,
    process_resources_remove,
)
from dotkit.tasks.stats import TaskStats

__all__ = [
    "Context",
    "ProcessOpts",
    "Task",
    "TaskDryRun",
    "TaskId",
    "TaskOk",
    "TaskResult",
    "TaskSkipped",
    "TaskStats",
    "execute",
    "has_cycle",
    "present_dependencies",
    "process_resource_states",
    "process_resources",
    "process_resources_remove",
]
