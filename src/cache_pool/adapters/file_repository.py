"""Filesystem cache repository storing one pickled file per item."""

import glob
import logging
import os
import pickle
from dataclasses import dataclass
from pathlib import Path

from cache_pool.adapters.simple_repository_adapter import SimpleRepository
from cache_pool.domain.items import Item
from cache_pool.errors import InvalidArgumentError

_TIMESTAMP_GLOB = "[0-9]" * 14

_logger = logging.getLogger(__name__)


@dataclass
class FileRepository(SimpleRepository):
    """Stores items as ``<expiration>.<key>.<extension>`` files.

    The expiration is the item's UTC expiration formatted as
    ``YYYYmmddHHMMSS``. Bodies are pickled, so only point the repository at
    directories written by trusted processes.
    """

    directory: Path
    extension: str

    def __init__(self, directory: str | Path, extension: str = "cache") -> None:
        if not isinstance(directory, str | Path) or not Path(directory).is_dir():
            raise InvalidArgumentError("Directory must be an existing directory")
        if not isinstance(extension, str):
            raise InvalidArgumentError(
                f"Extension must be a string, got {type(extension).__name__}"
            )
        if not os.access(directory, os.W_OK):
            raise InvalidArgumentError(f"Directory {directory} must be writable")
        self.directory = Path(directory).resolve()
        # A wildcard extension would let clear() match unrelated files.
        self.extension = "." + extension.replace("*", "")

    def file_path(self, filename: str) -> Path:
        """Return the full path for a file name without extension."""
        return self.directory / f"{filename}{self.extension}"

    def file_name(self, item: Item) -> str:
        """Return the file name, without extension, for an item."""
        expiration = item.expiration
        # %Y is not zero-padded below year 1000 on every platform.
        return f"{expiration.year:04d}{expiration:%m%d%H%M%S}.{item.key}"

    def find_files(self, key: str) -> list[Path]:
        """Return the files stored for a key."""
        pattern = glob.escape(str(self.directory)) + os.sep
        pattern += f"{_TIMESTAMP_GLOB}.{glob.escape(key)}{glob.escape(self.extension)}"
        return [Path(path) for path in sorted(glob.glob(pattern))]

    def find_file(self, key: str) -> Path | None:
        files = self.find_files(key)
        return files[0] if files else None

    def contains(self, key: str) -> bool:
        return self.find_file(key) is not None

    def fetch(self, key: str) -> Item | None:
        """Load the item stored for a key, if present and readable."""
        path = self.find_file(key)
        if path is None:
            return None
        try:
            with path.open("rb") as handle:
                item = pickle.load(handle)  # noqa: S301
        except (OSError, pickle.UnpicklingError, EOFError) as exc:
            _logger.warning("Failed to read cache file %s: %s", path.name, exc)
            return None
        if not isinstance(item, Item):
            _logger.warning("Cache file %s does not contain an item", path.name)
            return None
        return item.mark_cached()

    def store(self, item: Item) -> bool:
        """Write an item, replacing any file previously stored for its key."""
        self.delete(item.key)
        path = self.file_path(self.file_name(item))
        try:
            with path.open("wb") as handle:
                pickle.dump(item, handle)
        except (OSError, pickle.PicklingError, TypeError, AttributeError) as exc:
            _logger.warning("Failed to write cache file %s: %s", path.name, exc)
            self._unlink(path)
            return False
        return True

    def delete(self, key: str) -> bool:
        deleted = True
        for path in self.find_files(key):
            deleted = self._unlink(path) and deleted
        return deleted

    def clear(self) -> bool:
        pattern = glob.escape(str(self.directory)) + os.sep
        pattern += f"{_TIMESTAMP_GLOB}.*{glob.escape(self.extension)}"
        cleared = True
        for path in glob.glob(pattern):
            cleared = self._unlink(Path(path)) and cleared
        return cleared

    def _unlink(self, path: Path) -> bool:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            _logger.warning("Failed to delete cache file %s: %s", path.name, exc)
            return False
        return True
