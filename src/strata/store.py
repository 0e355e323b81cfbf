"""ConfigStore - reads and writes the layered workspace config.

Layers, highest precedence first:
1. workspace override (``<ws_root>/stratarc.yml``)
2. home override (``<home_dir>/stratarc.yml``)
3. base config (``<ws_root>/strata.yml``)
4. schema defaults

Every public method returns ``Ok``/``Err`` instead of raising. Calls on one
store must not overlap: await each before issuing the next.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from strata import codec
from strata.cache import ConfigCache
from strata.config import CONFIG_FILE, OVERRIDE_FILE
from strata.errors import (
    ConfigError,
    ConfigMissingError,
    ParseError,
    PersistError,
    ReadError,
    SchemaError,
)
from strata.merge import Policies, merge_defaults, merge_override, subtract_override
from strata.overrides import OverrideResolver
from strata.result import Err, Ok, Result
from strata.schema import MERGE_POLICIES, generate_default, validate_shape
from strata.storage import FileStore
from strata.types import (
    ConfigLocation,
    MergePolicy,
    PartialConfig,
    ReadMode,
    ResolvedConfig,
)

logger = logging.getLogger(__name__)


class ConfigStore:
    """Orchestrates create/read/write of a workspace's config.

    Example:
        store = ConfigStore(LocalFileStore(), "~/notes", Path.home())
        match await store.read(mode=ReadMode.OVERRIDE):
            case Ok(config):
                vaults = config["workspace"]["vaults"]
            case Err(error):
                print(error.message)
    """

    def __init__(
        self,
        file_store: FileStore,
        ws_root: Path | str,
        home_dir: Path | str,
        *,
        policies: Policies | None = None,
        config_file: str = CONFIG_FILE,
        override_file: str = OVERRIDE_FILE,
    ):
        """Initialize the store.

        Args:
            file_store: Storage capability used for every file access.
            ws_root: Workspace root holding the base config and the
                workspace override.
            home_dir: Directory holding the home override.
            policies: Per-path merge policies. Defaults to the schema's
                table, which unions ``workspace.vaults``.
        """
        self.file_store = file_store
        self.ws_root = Path(ws_root).expanduser()
        self.home_dir = Path(home_dir).expanduser()
        self.location = ConfigLocation(self.ws_root, config_file)
        self.overrides = OverrideResolver(
            file_store, self.ws_root, self.home_dir, override_file
        )
        self.policies: dict[str, MergePolicy] = dict(
            MERGE_POLICIES if policies is None else policies
        )
        self._cache = ConfigCache()

    # --- public API ---

    async def create(self) -> Result[ResolvedConfig, PersistError]:
        """Write the default config to the base location and return it.

        An existing base file is overwritten.
        """
        config = generate_default()
        if await self._base_exists():
            logger.warning(f"Replacing existing config at {self.location}")

        persisted = await self._persist(config)
        if isinstance(persisted, Err):
            return persisted

        self._cache.put(ReadMode.DEFAULT, config)
        self._cache.invalidate(ReadMode.OVERRIDE)
        return Ok(config)

    async def read_raw(self) -> Result[PartialConfig, ConfigError]:
        """Read the base config exactly as persisted.

        No defaults are filled in and no overrides are applied.
        """
        try:
            if not await self.file_store.exists(self.location):
                logger.error(f"No config file at {self.location}")
                return Err(ConfigMissingError(self.location))
            text = await self.file_store.read_text(self.location)
        except OSError as e:
            logger.error(f"Failed to read {self.location}: {e}")
            error = ReadError(self.location, str(e))
            error.__cause__ = e
            return Err(error)
        except UnicodeDecodeError as e:
            logger.error(f"Config at {self.location} is not valid UTF-8: {e}")
            error = ParseError(self.location, f"not valid UTF-8: {e}")
            error.__cause__ = e
            return Err(error)

        return codec.decode(text, self.location)

    async def read(
        self,
        mode: ReadMode | str = ReadMode.DEFAULT,
        use_cache: bool = False,
    ) -> Result[ResolvedConfig, ConfigError]:
        """Resolve the config.

        Args:
            mode: ``default`` fills absent fields from the schema defaults;
                ``override`` also applies the override files first.
            use_cache: Return the last resolved config for ``mode`` without
                touching storage when there is one. It may be stale.
        """
        try:
            mode = ReadMode(mode)
        except ValueError:
            logger.error(f"Unknown read mode {mode!r}")
            return Err(ConfigError(f"Unknown read mode: {mode!r}", self.location))

        if use_cache:
            cached = self._cache.get(mode)
            if cached is not None:
                return Ok(cached)

        raw = await self.read_raw()
        if isinstance(raw, Err):
            return raw

        layered = raw.value
        if mode is ReadMode.OVERRIDE:
            override = await self.overrides.resolve()
            if isinstance(override, Err):
                return override
            layered = merge_override(layered, override.value, self.policies)

        resolved = merge_defaults(layered, generate_default())
        try:
            validate_shape(resolved)
        except ValidationError as e:
            logger.error(f"Config at {self.location} failed schema check: {e}")
            error = SchemaError(self.location, _summarize(e))
            error.__cause__ = e
            return Err(error)

        self._cache.put(mode, resolved)
        logger.debug(f"Resolved {mode.value} config from {self.location}")
        return Ok(resolved)

    async def write(self, config: Mapping[str, Any]) -> Result[PartialConfig, ConfigError]:
        """Persist ``config`` minus the fields the override files own.

        Returns the residual that was written.
        """
        override = await self.overrides.resolve()
        if isinstance(override, Err):
            return override

        residual = subtract_override(config, override.value, self.policies)
        persisted = await self._persist(residual)
        if isinstance(persisted, Err):
            return persisted

        defaults = generate_default()
        self._refresh(ReadMode.DEFAULT, merge_defaults(residual, defaults))
        self._refresh(
            ReadMode.OVERRIDE,
            merge_defaults(
                merge_override(residual, override.value, self.policies), defaults
            ),
        )
        return Ok(residual)

    # --- helpers ---

    def _refresh(self, mode: ReadMode, resolved: ResolvedConfig) -> None:
        """Cache a config resolved after a write, dropping it when malformed."""
        try:
            validate_shape(resolved)
        except ValidationError as e:
            logger.warning(f"Not caching {mode.value} config for {self.location}: {e}")
            self._cache.invalidate(mode)
            return
        self._cache.put(mode, resolved)

    async def _base_exists(self) -> bool:
        try:
            return await self.file_store.exists(self.location)
        except OSError:
            return False

    async def _persist(self, config: Mapping[str, Any]) -> Result[None, PersistError]:
        try:
            content = codec.encode(config)
            await self.file_store.write_text(self.location, content)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to write {self.location}: {e}")
            error = PersistError(self.location, str(e))
            error.__cause__ = e
            return Err(error)

        logger.info(f"Saved config to {self.location}")
        return Ok(None)

    def __repr__(self) -> str:
        return f"ConfigStore({self.ws_root}, home={self.home_dir})"


def _summarize(error: ValidationError) -> str:
    """First validation problem as ``path: message``."""
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    path = ".".join(str(part) for part in first["loc"])
    more = f" (+{len(details) - 1} more)" if len(details) > 1 else ""
    return f"{path}: {first['msg']}{more}"
