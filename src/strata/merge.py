"""Deep merge and override subtraction for config trees.

A key that is present always counts, whatever its value: ``False``, ``""``,
``[]`` and ``None`` win over a lower layer. Only an absent key falls
through. Inputs are never mutated; results share no containers with them.

Lists are atomic unless the policy table maps their dotted path to
``MergePolicy.UNION``.
"""

import logging
from collections.abc import Mapping, Sequence
from copy import deepcopy
from typing import Any

from strata.types import MISSING, MergePolicy, PartialConfig, ResolvedConfig

logger = logging.getLogger(__name__)

Policies = Mapping[str, MergePolicy]


# --- field paths ---


def split_path(path: str | Sequence[str]) -> list[str]:
    """Split ``"a.b.c"`` into ``["a", "b", "c"]``. Sequences pass through."""
    if isinstance(path, str):
        parts = path.split(".")
    else:
        parts = list(path)
    if not parts or any(part == "" for part in parts):
        raise ValueError(f"Invalid field path: {path!r}")
    return parts


def _join(prefix: str, key: Any) -> str:
    return f"{prefix}.{key}" if prefix else str(key)


def get_path(config: Mapping[str, Any], path: str | Sequence[str]) -> Any:
    """Value at ``path``, or ``MISSING`` when any segment is absent."""
    node: Any = config
    for part in split_path(path):
        if not isinstance(node, Mapping) or part not in node:
            return MISSING
        node = node[part]
    return node


def set_path(config: dict[str, Any], path: str | Sequence[str], value: Any) -> None:
    """Set ``path`` to ``value``, creating intermediate mappings.

    Raises:
        ValueError: If an intermediate segment holds a non-mapping value.
    """
    parts = split_path(path)
    node = config
    for i, part in enumerate(parts[:-1]):
        child = node.get(part, MISSING)
        if child is MISSING:
            child = node[part] = {}
        elif not isinstance(child, dict):
            raise ValueError(f"{'.'.join(parts[: i + 1])} is not a mapping")
        node = child
    node[parts[-1]] = value


def unset_path(config: dict[str, Any], path: str | Sequence[str]) -> bool:
    """Remove ``path``. Returns False when it was already absent."""
    parts = split_path(path)
    parent = get_path(config, parts[:-1]) if len(parts) > 1 else config
    if not isinstance(parent, dict) or parts[-1] not in parent:
        return False
    del parent[parts[-1]]
    return True


# --- merging ---


def merge_defaults(base: Mapping[str, Any], fallback: Mapping[str, Any]) -> ResolvedConfig:
    """Fill every field absent from ``base`` with the ``fallback`` value.

    The result holds every field of ``fallback`` plus whatever else ``base``
    defines.
    """
    return _merge(fallback, base, {}, "")


def merge_override(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
    policies: Policies | None = None,
) -> PartialConfig:
    """Layer ``override`` on top of ``base``; override fields win."""
    return _merge(base, override, policies or {}, "")


def _merge(
    lower: Mapping[str, Any],
    upper: Mapping[str, Any],
    policies: Policies,
    prefix: str,
) -> dict[str, Any]:
    result = deepcopy(dict(lower))
    for key, value in upper.items():
        path = _join(prefix, key)
        current = result.get(key, MISSING)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            result[key] = _merge(current, value, policies, path)
        elif (
            policies.get(path) is MergePolicy.UNION
            and isinstance(value, list)
            and isinstance(current, list)
        ):
            merged = list(current)
            for entry in value:
                if entry not in merged:
                    merged.append(deepcopy(entry))
            result[key] = merged
        else:
            result[key] = deepcopy(value)
    return result


# --- write-side filtering ---


def subtract_override(
    config: Mapping[str, Any],
    override: Mapping[str, Any],
    policies: Policies | None = None,
) -> PartialConfig:
    """Remove override-owned fields from ``config``.

    A REPLACE field is dropped when its value equals the override's value
    for that path; a UNION list loses the entries the override supplies.
    Mappings emptied by the subtraction are dropped, siblings are kept.
    """
    return _subtract(config, override, policies or {}, "")


def _subtract(
    config: Mapping[str, Any],
    override: Mapping[str, Any],
    policies: Policies,
    prefix: str,
) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in config.items():
        owned = override.get(key, MISSING)
        if owned is MISSING:
            result[key] = deepcopy(value)
            continue

        path = _join(prefix, key)
        if isinstance(value, Mapping) and isinstance(owned, Mapping) and owned:
            residual = _subtract(value, owned, policies, path)
            if residual:
                result[key] = residual
            else:
                logger.debug(f"Dropping {path}: every field is owned by an override")
        elif (
            policies.get(path) is MergePolicy.UNION
            and isinstance(value, list)
            and isinstance(owned, list)
        ):
            remaining = [deepcopy(v) for v in value if v not in owned]
            if remaining:
                result[key] = remaining
            else:
                logger.debug(f"Dropping {path}: all entries come from an override")
        elif value == owned:
            logger.debug(f"Dropping {path}: value comes from an override")
        else:
            result[key] = deepcopy(value)
    return result
