"""strata - layered workspace configuration."""

from strata.errors import (
    ConfigError,
    ConfigMissingError,
    ParseError,
    PersistError,
    ReadError,
    SchemaError,
)
from strata.result import Err, Ok, Result
from strata.schema import generate_default
from strata.storage import FileStore, LocalFileStore, MemoryFileStore
from strata.store import ConfigStore
from strata.types import (
    MISSING,
    ConfigLocation,
    MergePolicy,
    PartialConfig,
    PrecedenceLayer,
    ReadMode,
    ResolvedConfig,
)

__all__ = [
    # Store
    "ConfigStore",
    "generate_default",
    # Storage
    "FileStore",
    "LocalFileStore",
    "MemoryFileStore",
    # Results
    "Err",
    "Ok",
    "Result",
    # Errors
    "ConfigError",
    "ConfigMissingError",
    "ParseError",
    "PersistError",
    "ReadError",
    "SchemaError",
    # Types
    "MISSING",
    "ConfigLocation",
    "MergePolicy",
    "PartialConfig",
    "PrecedenceLayer",
    "ReadMode",
    "ResolvedConfig",
]
