"""In-memory cache of resolved configs, one slot per read mode."""

import logging
from copy import deepcopy

from strata.types import ReadMode, ResolvedConfig

logger = logging.getLogger(__name__)


class ConfigCache:
    """Holds the last resolved config for each read mode.

    Entries never expire. They are replaced by the next fresh read of the
    same mode, so a cached value may be stale with respect to storage.
    Snapshots are copied in and out; callers can mutate what they get.
    """

    def __init__(self):
        self._entries: dict[ReadMode, ResolvedConfig] = {}

    def get(self, mode: ReadMode) -> ResolvedConfig | None:
        entry = self._entries.get(mode)
        if entry is None:
            return None
        logger.debug(f"Cache hit for {mode.value} config")
        return deepcopy(entry)

    def put(self, mode: ReadMode, config: ResolvedConfig) -> None:
        self._entries[mode] = deepcopy(config)

    def invalidate(self, mode: ReadMode | None = None) -> None:
        """Drop one entry, or all of them when ``mode`` is None."""
        if mode is None:
            self._entries.clear()
        else:
            self._entries.pop(mode, None)
