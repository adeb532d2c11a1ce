"""
Key-value stores used to persist game sessions.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Durable mapping from string keys to string documents."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """
        Read a document.

        Parameters
        ----------
        key : str
            Document key.

        Returns
        -------
        str | None
            The stored document, or None if the key is absent.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a document, replacing any previous one.

        Parameters
        ----------
        key : str
            Document key.
        value : str
            Document to store.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a document. Removing an absent key is not an error.

        Parameters
        ----------
        key : str
            Document key.
        """


class MemoryStore(KeyValueStore):
    """In-process store, lost when the interpreter exits."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore(KeyValueStore):
    """
    Store keeping one JSON file per key in a directory.

    Parameters
    ----------
    directory : str | Path
        Directory holding the documents, created on first write.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not key or os.sep in key or key.startswith('.'):
            raise ValueError(f'Invalid storage key: {key!r}')
        return self.directory / f'{key}.json'

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)

        # ##: Write aside then rename, so a reader never sees a partial document.
        tmp_path = path.with_suffix('.json.tmp')
        tmp_path.write_text(value, encoding='utf-8')
        os.replace(tmp_path, path)
        logger.debug('Stored %s (%d bytes)', path, len(value))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
