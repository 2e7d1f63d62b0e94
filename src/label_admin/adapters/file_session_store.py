"""JSON-file session store shared between dashboard processes."""

import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from label_admin.services.session_gate import SessionStore, StoreListener

logger = logging.getLogger(__name__)


@dataclass
class FileSessionStore(SessionStore):
    """Persists values to a JSON file.

    Local writes notify subscribers straight away. Writes made by another
    process become visible to ``get`` immediately but only notify this
    process's subscribers when ``poll`` is called.
    """

    path: Path
    _listeners: list[StoreListener] = field(
        default_factory=list, init=False, repr=False
    )
    _snapshot: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._snapshot = self._read()

    def get(self, key: str) -> str | None:
        """Return the stored value, if any."""
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        """Persist a value and notify subscribers."""
        values = self._read()
        values[key] = value
        self._write(values)
        self._notify(key)

    def clear(self, key: str) -> None:
        """Remove a value and notify subscribers."""
        values = self._read()
        values.pop(key, None)
        self._write(values)
        self._notify(key)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def poll(self) -> list[str]:
        """Notify subscribers of keys changed by other processes since last seen."""
        current = self._read()
        changed = sorted(
            key
            for key in current.keys() | self._snapshot.keys()
            if current.get(key) != self._snapshot.get(key)
        )
        self._snapshot = current
        for key in changed:
            self._notify(key)
        return changed

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(
                "Ignoring malformed session file", extra={"path": str(self.path)}
            )
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _write(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values), encoding="utf-8")
        os.replace(tmp_path, self.path)
        self._snapshot = values

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)
