"""Local key-value storage backing the saved draft.

``DraftStorage`` is the small string-keyed interface the draft manager talks
to. ``JsonFileStorage`` keeps every key in one JSON document on disk and
rewrites it atomically; ``MemoryStorage`` is an in-process stand-in.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ..utils.errors import StorageUnavailableError, StorageWriteError
from ..utils.logging import get_logger

logger = get_logger(__name__)

PROBE_KEY_PREFIX = "__dailyword_probe__"


@runtime_checkable
class DraftStorage(Protocol):
    """String key-value storage.

    Implementations raise ``StorageError`` subclasses on failure.
    """

    def probe(self) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dictionary-backed storage that lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def probe(self) -> bool:
        return True

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStorage:
    """Key-value storage persisted as a single JSON object on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def probe(self) -> bool:
        """Check the storage file can be created, written and read back."""

        key = f"{PROBE_KEY_PREFIX}{uuid.uuid4().hex[:8]}"

        try:
            self.set(key, "1")
            ok = self.get(key) == "1"
            self.remove(key)
            return ok
        except (StorageUnavailableError, StorageWriteError) as e:
            logger.warning(f"Storage probe failed for {self.path}: {e.message}")
            return False

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Storage file {self.path} is not valid JSON, starting empty")
            return {}
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read storage file: {str(e)}") from e

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self.path} does not hold an object, starting empty")
            return {}

        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        """Write the whole store through a temp file and an atomic rename."""

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Failed to write storage file: {str(e)}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None or isinstance(value, str):
            return value
        # Hand-edited files may hold a nested object instead of a string
        return json.dumps(value)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        self._write_all(data)
