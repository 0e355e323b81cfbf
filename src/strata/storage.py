"""Storage capability consumed by the config store.

The store never touches the filesystem itself; it is handed a ``FileStore``.
Implementations raise ``OSError`` on failure and the store turns that into
an error result.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from strata.types import ConfigLocation

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    """Async read/write/exists over text at a config location."""

    async def exists(self, location: ConfigLocation) -> bool:
        pass

    async def read_text(self, location: ConfigLocation) -> str:
        pass

    async def write_text(self, location: ConfigLocation, content: str) -> None:
        pass


class LocalFileStore:
    """FileStore backed by the local filesystem.

    Blocking file calls run in a worker thread.
    """

    async def exists(self, location: ConfigLocation) -> bool:
        return await asyncio.to_thread(location.path.is_file)

    async def read_text(self, location: ConfigLocation) -> str:
        return await asyncio.to_thread(location.path.read_text, encoding="utf-8")

    async def write_text(self, location: ConfigLocation, content: str) -> None:
        def _write() -> None:
            location.path.parent.mkdir(parents=True, exist_ok=True)
            location.path.write_text(content, encoding="utf-8")

        await asyncio.to_thread(_write)
        logger.debug(f"Wrote {len(content)} chars to {location}")

    def __repr__(self) -> str:
        return "LocalFileStore()"


class MemoryFileStore:
    """FileStore holding files in a dict, keyed by path."""

    def __init__(self, files: dict[Path | str, str] | None = None):
        self.files: dict[Path, str] = {
            Path(path): content for path, content in (files or {}).items()
        }

    async def exists(self, location: ConfigLocation) -> bool:
        return location.path in self.files

    async def read_text(self, location: ConfigLocation) -> str:
        try:
            return self.files[location.path]
        except KeyError:
            raise FileNotFoundError(f"No such file: {location}") from None

    async def write_text(self, location: ConfigLocation, content: str) -> None:
        self.files[location.path] = content

    def remove(self, location: ConfigLocation) -> None:
        """Delete a file. Missing files are ignored."""
        self.files.pop(location.path, None)

    def __repr__(self) -> str:
        return f"MemoryFileStore({len(self.files)} files)"
