# flashread/storage.py
"""
Key-value storage port used by the SessionManager.

Values are JSON strings. `MemoryStorage` is for tests and throwaway sessions,
`FileStorage` keeps one file per key under a directory.
"""
import os
import re
import logging
from typing import Dict, Optional, Protocol

from . import config

logger = logging.getLogger(__name__)

HISTORY_KEY = "flashread_history"
DOCUMENTS_KEY = "flashread_documents"
CREDENTIALS_KEY = "flashread_credentials"

_SAFE_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data.keys())


class FileStorage:
    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or config.FLASHREAD_STORAGE_DIR
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, key: str) -> str:
        if not _SAFE_KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        try:
            with open(self._path(key), "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp, path)

    def remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
