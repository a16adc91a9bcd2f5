import json
import os
import tempfile
import logging
from typing import Dict, Optional

logger = logging.getLogger("census.adapters.storage")

# Storage keys
PATIENTS_KEY = "patients"
LAST_VISIT_KEY = "lastVisitDate"
TODAY_COUNT_KEY = "todayPatients"


class StoragePort:
    """Minimal key/value port the ledger persists through. Values are strings."""

    def load(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def save(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryStorage(StoragePort):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.entries: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def save(self, key: str, value: str) -> None:
        self.entries[key] = value


class JsonFileStorage(StoragePort):
    """
    Flat-file storage: one JSON object mapping keys to string values.
    Every save rewrites the whole document through a temp file + os.replace.
    """
    def __init__(self, path: str):
        self.path = path
        self._ensure_storage()

    def _ensure_storage(self):
        """Creates the parent directory and an empty document if missing."""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.path):
            self._write({})

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.warning(f"Storage file {self.path} is corrupt, starting empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, starting empty")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".storage-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def load(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def save(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
