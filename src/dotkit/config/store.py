"""Reader/writer guarded holder for the active configuration snapshot."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from dotkit.config.types import Config


class ConfigStore:
    """Shared ``Config`` that many tasks read and a reload task may replace.

    Readers hold the lock only while they look at the snapshot; ``replace``
    waits for them to drain and swaps the whole value. Pending writers block
    new readers so a reload cannot starve.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._cond = threading.Condition()
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[Config]:
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield self._config
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    def snapshot(self) -> Config:
        with self.read() as config:
            return config

    def replace(self, config: Config) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            self._config = config
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()
