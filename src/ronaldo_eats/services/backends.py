from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol, Union


class KeyValueBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def multi_remove(self, keys: Iterable[str]) -> None: ...


class MemoryBackend:
    """Simple in-memory key-value backend."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def multi_remove(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileBackend:
    """Key-value backend persisted as a single JSON object on disk.

    Every write rewrites the whole document through a temp file and
    ``os.replace`` so a crash never leaves a half-written file behind.
    I/O and decode errors propagate to the caller.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def multi_remove(self, keys: Iterable[str]) -> None:
        items = self._read()
        removed = False
        for key in keys:
            if items.pop(key, None) is not None:
                removed = True
        if removed:
            self._write(items)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"storage file {self.path} does not hold a JSON object")
        return data

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(items, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
