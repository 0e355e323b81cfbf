"""YAML codec for config documents.

Decoding keeps exactly what the document holds: no defaults are injected
and no keys are renamed.
"""

import logging
from collections.abc import Mapping
from typing import Any

import yaml

from strata.errors import ParseError
from strata.result import Err, Ok, Result
from strata.types import ConfigLocation, PartialConfig

logger = logging.getLogger(__name__)


def decode(
    text: str, location: ConfigLocation | None = None
) -> Result[PartialConfig, ParseError]:
    """Parse a YAML document into a partial config.

    An empty or ``null`` document decodes to an empty config.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {location}: {e}")
        error = ParseError(location, f"invalid YAML: {e}")
        error.__cause__ = e
        return Err(error)

    if raw is None:
        return Ok({})

    if not isinstance(raw, dict):
        logger.error(f"Config must be a mapping, got {type(raw).__name__}")
        return Err(
            ParseError(location, f"config must be a mapping, got {type(raw).__name__}")
        )

    return Ok(raw)


def encode(config: Mapping[str, Any]) -> str:
    """Serialize a config tree to YAML, keeping key order."""
    return yaml.safe_dump(
        _plain(config),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def _plain(value: Any) -> Any:
    # safe_dump refuses Mapping subclasses and tuples it does not know.
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
