"""Error types shared across dotkit."""

from __future__ import annotations

CONFIG_REASON_MISSING = "CONFIG_MISSING"
CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class DotkitError(RuntimeError):
    """Base class for errors surfaced to the command line."""


class ResourceError(DotkitError):
    """A resource could not be inspected or changed."""


class ExecutionFailedError(ResourceError):
    """An external program exited unsuccessfully."""

    def __init__(self, program: str, exit_code: int | None, stderr: str, *, message: str | None = None) -> None:
        code = "unknown" if exit_code is None else str(exit_code)
        super().__init__(message or f"{program} failed (exit {code}): {stderr.strip()}")
        self.program = program
        self.exit_code = exit_code
        self.stderr = stderr


class ResourceNotFoundError(ResourceError):
    def __init__(self, resource: str) -> None:
        super().__init__(f"resource not found: {resource}")
        self.resource = resource


class PermissionDeniedError(ResourceError):
    def __init__(self, path: str) -> None:
        super().__init__(f"permission denied: {path}")
        self.path = path


class InvalidStateError(ResourceError):
    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"invalid state for {resource}: {reason}")
        self.resource = resource
        self.reason = reason


class UnsupportedOperationError(ResourceError):
    """Raised by resources that do not implement an optional operation."""

    def __init__(self, operation: str, resource: str) -> None:
        super().__init__(f"operation '{operation}' is not supported for resource '{resource}'")
        self.operation = operation
        self.resource = resource


class ConfigurationError(DotkitError):
    """Declaration file could not be loaded or validated."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


class TaskFailuresError(DotkitError):
    """Raised after a run in which at least one task failed."""

    def __init__(self, count: int) -> None:
        super().__init__(f"{count} task(s) failed")
        self.count = count
