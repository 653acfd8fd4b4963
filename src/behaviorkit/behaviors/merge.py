"""
Configuration merging for behaviors.

``merge_config`` is the default strategy used when a behavior is bound:
caller-supplied keys win, keys only present in the defaults are carried
through. ``deep_merge`` is available for behaviors whose configuration holds
nested mappings or lists and that override ``Behavior.merge_config``.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional

from behaviorkit.errors import MisconfigurationError


def _require_mapping(value: Any, label: str) -> Mapping:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MisconfigurationError(
            f"Behavior {label} must be a mapping, got {type(value).__name__}"
        )
    return value


def merge_config(
    supplied: Optional[Mapping[str, Any]], defaults: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """
    Shallow merge of ``supplied`` over ``defaults``.

    Neither input is modified, and the result shares no nested lists or
    mappings with them. ``None`` is treated as an empty mapping.

    Raises:
        MisconfigurationError: if either side is not a mapping.
    """
    supplied = _require_mapping(supplied, "configuration")
    defaults = _require_mapping(defaults, "defaults")
    merged = copy.deepcopy(dict(defaults))
    merged.update(copy.deepcopy(dict(supplied)))
    return merged


def deep_merge(
    supplied: Optional[Mapping[str, Any]], defaults: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """
    Recursive merge of ``supplied`` over ``defaults``.

    Nested mappings are merged key by key. Nested lists are concatenated,
    defaults first, without repeating items already present. Any other value
    from ``supplied`` replaces the default.
    """
    supplied = _require_mapping(supplied, "configuration")
    defaults = _require_mapping(defaults, "defaults")

    merged: Dict[str, Any] = copy.deepcopy(dict(defaults))
    for key, value in supplied.items():
        base = merged.get(key)
        if isinstance(base, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(value, base)
        elif isinstance(base, list) and isinstance(value, list):
            merged[key] = base + [copy.deepcopy(v) for v in value if v not in base]
        else:
            merged[key] = copy.deepcopy(value)
    return merged
