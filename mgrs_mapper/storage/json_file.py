"""File-backed store: every key lives in one JSON object on disk.

The file maps store keys to string values::

    {
      "mgrs-map-aois": "[{\"id\": ...}]",
      "mgrs-map-project-name": "Recon North"
    }

Writes replace the file atomically (temporary file + ``os.replace``) so
a crash mid-write never leaves a truncated document behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile

from mgrs_mapper.storage.base import KeyValueStore, StorageError, StorageWriteError

logger = logging.getLogger("mgrs_mapper.storage.json_file")


class JsonFileStore(KeyValueStore):
    """``KeyValueStore`` persisted to a single JSON file.

    Args:
        path: File to read and write.  Parent directories are created on
            first use.
    """

    name = "json_file"

    def __init__(self, path: str) -> None:
        self._path = os.path.expanduser(path)

    @property
    def path(self) -> str:
        """Absolute or user-relative path of the backing file."""
        return self._path

    @property
    def available(self) -> bool:
        """Whether the file (or the directory it would be created in) is writable.

        Nothing is created on disk; missing parents are made on first write.
        """
        if os.path.exists(self._path):
            return os.access(self._path, os.R_OK | os.W_OK)
        # Nearest existing ancestor decides whether the parents can be created
        directory = os.path.dirname(os.path.abspath(self._path))
        while not os.path.exists(directory):
            parent = os.path.dirname(directory)
            if parent == directory:
                break
            directory = parent
        if not os.path.isdir(directory):
            logger.warning("Store directory unusable | path=%s", directory)
            return False
        return os.access(directory, os.W_OK)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            msg = f"Store values must be strings, got {type(value).__name__} for {key!r}"
            raise StorageWriteError(msg, store=self.name)
        items = self._read_for_update()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read_for_update()
        if items.pop(key, None) is not None:
            self._write(items)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, str]:
        """Load the whole document; a missing file is an empty store.

        Raises:
            StorageError: If the file cannot be read or is not a JSON object.
        """
        try:
            with open(self._path, encoding="utf-8") as fh:
                raw = fh.read()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            msg = f"Cannot read store file {self._path}: {exc}"
            raise StorageError(msg, store=self.name) from exc

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Store file {self._path} is not valid JSON: {exc}"
            raise StorageError(msg, store=self.name) from exc
        if not isinstance(data, dict):
            msg = f"Store file {self._path} must hold a JSON object, got {type(data).__name__}"
            raise StorageError(msg, store=self.name)
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _read_for_update(self) -> dict[str, str]:
        """Load the document before a write, starting over if it is corrupt."""
        try:
            return self._read()
        except StorageError as exc:
            logger.warning("Discarding unreadable store file | path=%s | error=%s", self._path, exc)
            return {}

    def _write(self, items: dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".store-", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(items, fh, ensure_ascii=False)
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as exc:
            msg = f"Cannot write store file {self._path}: {exc}"
            raise StorageWriteError(msg, store=self.name) from exc
