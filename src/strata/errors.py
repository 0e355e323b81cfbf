"""Error types returned (not raised) by the config store."""

from __future__ import annotations

from strata.types import ConfigLocation


class ConfigError(Exception):
    """Base class for config failures. Carries the location involved."""

    def __init__(self, message: str, location: ConfigLocation | None = None):
        super().__init__(message)
        self.location = location

    @property
    def message(self) -> str:
        return str(self)


class ReadError(ConfigError):
    """A config file could not be read."""

    def __init__(self, location: ConfigLocation, detail: str = ""):
        message = f"Failed to read from {location}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, location)


class ConfigMissingError(ReadError):
    """The base config file does not exist."""

    def __init__(self, location: ConfigLocation):
        super().__init__(location, "file does not exist")


class ParseError(ConfigError):
    """A config file holds malformed YAML or a non-mapping document."""

    def __init__(self, location: ConfigLocation | None, detail: str):
        where = location if location is not None else "<string>"
        super().__init__(f"Invalid config in {where}: {detail}", location)


class PersistError(ConfigError):
    """Writing a config file failed."""

    def __init__(self, location: ConfigLocation, detail: str = ""):
        message = f"Failed to write to {location}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, location)


class SchemaError(ConfigError):
    """A resolved config does not match the schema shape."""

    def __init__(self, location: ConfigLocation, detail: str):
        super().__init__(f"Config at {location} does not match schema: {detail}", location)
