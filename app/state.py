from __future__ import annotations

import threading
from typing import Callable, Iterable, Tuple

from .models import Row


class RowTable:
    """Holds the latest normalized rows. Each pass replaces the whole sequence."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rows: Tuple[Row, ...] = ()
        self._loaded = False

    @property
    def rows(self) -> Tuple[Row, ...]:
        with self._lock:
            return self._rows

    def replace(self, rows: Iterable[Row]) -> Tuple[Row, ...]:
        snapshot = tuple(rows)
        with self._lock:
            self._rows = snapshot
            self._loaded = True
        return snapshot

    def ensure_loaded(self, load: Callable[[], Iterable[Row]]) -> Tuple[Row, ...]:
        """Run `load` once if nothing has been stored yet; a concurrent `replace` waits for it."""
        with self._lock:
            if not self._loaded:
                self._rows = tuple(load())
                self._loaded = True
            return self._rows
