"""String-to-string stores that StorageItem can sit on.

Any collections.abc.MutableMapping works as a backend. The two here cover
the common cases: a throwaway in-memory store, and a store persisted as a
single JSON object on disk (the local equivalent of a browser's
localStorage).
"""

import json
import os
from collections.abc import MutableMapping
from pathlib import Path


class StorageError(Exception):
    pass


def _check_str(name: str, value) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")


class MemoryStorage(MutableMapping):
    """Dict-backed store. Contents are lost with the object."""

    def __init__(self, items=None):
        self._items: dict[str, str] = {}
        if items:
            self.update(items)

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __setitem__(self, key: str, value: str) -> None:
        _check_str("key", key)
        _check_str("value", value)
        self._items[key] = value

    def __delitem__(self, key: str) -> None:
        del self._items[key]

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self):
        return f"MemoryStorage({self._items!r})"


class FileStorage(MutableMapping):
    """Store persisted as one JSON object in a UTF-8 file.

    The file is re-read on every access and rewritten on every change, so
    separate instances pointing at the same path see each other's writes.
    A missing file is an empty store. There is no locking.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"corrupt store file {self.path}: {e}") from e
        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise StorageError(f"store file {self.path} is not a string-to-string object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # readers only ever see a complete file
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self.path)

    def __getitem__(self, key: str) -> str:
        return self._load()[key]

    def __setitem__(self, key: str, value: str) -> None:
        _check_str("key", key)
        _check_str("value", value)
        data = self._load()
        data[key] = value
        self._save(data)

    def __delitem__(self, key: str) -> None:
        data = self._load()
        del data[key]
        self._save(data)

    def __iter__(self):
        return iter(self._load())

    def __len__(self) -> int:
        return len(self._load())

    def clear(self) -> None:
        if self.path.exists():
            self._save({})

    def __repr__(self):
        return f"FileStorage({str(self.path)!r})"
