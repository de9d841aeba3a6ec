"""Resource contract: describe, inspect, converge and optionally remove."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from dotkit.errors import UnsupportedOperationError


@dataclass(frozen=True)
class Missing:
    """The resource does not exist yet."""


@dataclass(frozen=True)
class Correct:
    """The resource already matches its declaration."""


@dataclass(frozen=True)
class Incorrect:
    """The resource exists in some other state."""

    current: str


@dataclass(frozen=True)
class Invalid:
    """The declaration cannot be acted upon."""

    reason: str


ResourceState = Missing | Correct | Incorrect | Invalid


@dataclass(frozen=True)
class Applied:
    pass


@dataclass(frozen=True)
class AlreadyCorrect:
    pass


@dataclass(frozen=True)
class Skipped:
    reason: str


ResourceChange = Applied | AlreadyCorrect | Skipped


class Resource(ABC):
    """A single declared unit of system state."""

    @abstractmethod
    def description(self) -> str:
        """Human-readable identity used in log lines."""

    @abstractmethod
    def current_state(self) -> ResourceState:
        """Inspect the live system; may raise ``ResourceError``."""

    @abstractmethod
    def apply(self) -> ResourceChange:
        """Converge the live system toward the declaration."""

    def remove(self) -> ResourceChange:
        raise UnsupportedOperationError("remove", self.description())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description()!r})"


def describe_state(state: ResourceState) -> str:
    """Short label for diagnostic output."""
    if isinstance(state, Incorrect):
        return f"incorrect ({state.current})"
    if isinstance(state, Invalid):
        return f"invalid ({state.reason})"
    return type(state).__name__.lower()
