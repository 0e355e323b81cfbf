"""Shared types and data structures for strata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from pathlib import Path
from typing import Any, Final

PartialConfig = dict[str, Any]
"""Config tree where any field, at any depth, may be absent."""

ResolvedConfig = dict[str, Any]
"""Config tree where every field the schema recognizes has a value."""


class _Missing:
    """Marker for a key that is absent, as opposed to present with a falsy value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


class ReadMode(StrEnum):
    """How `ConfigStore.read` resolves the persisted config."""

    DEFAULT = "default"
    OVERRIDE = "override"


class PrecedenceLayer(Enum):
    """Override layers, declared highest precedence first."""

    WORKSPACE = "workspace"
    HOME = "home"


class MergePolicy(Enum):
    """How a field combines across layers.

    REPLACE: the higher layer's value wins whole; on write the field is
    dropped when it equals the override value.
    UNION: list field; override entries are appended to the base entries
    they are missing from, and subtracted again on write.
    """

    REPLACE = "replace"
    UNION = "union"


@dataclass(frozen=True)
class ConfigLocation:
    """Where one layer's bytes live."""

    root: Path
    file_name: str

    def __post_init__(self) -> None:
        if not isinstance(self.root, Path):
            object.__setattr__(self, "root", Path(self.root))

    @property
    def path(self) -> Path:
        return self.root / self.file_name

    def __str__(self) -> str:
        return str(self.path)
