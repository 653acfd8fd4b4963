"""
Normalization of a model's ``acts_as`` declaration list.

Accepted shapes::

    acts_as = ["Sluggable", "SoftDeletable"]
    acts_as = [("Sluggable", {"fields": ["title"]}), "SoftDeletable"]
    acts_as = {"Sluggable": {"fields": ["title"]}, "SoftDeletable": True}

A bare name, ``True`` or ``None`` means "no configuration".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .base import Behavior
from behaviorkit.errors import MisconfigurationError


class BehaviorDeclaration(BaseModel):
    """One declared behavior: a name (or Behavior class) and its configuration."""

    name: Any = Field(..., description="Behavior name, import path or Behavior subclass")
    config: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: Any) -> Any:
        if isinstance(v, type) and issubclass(v, Behavior):
            return v
        if isinstance(v, str) and v.strip():
            return v.strip()
        raise ValueError("behavior name must be a non-empty string or a Behavior subclass")

    @field_validator("config", mode="before")
    @classmethod
    def _shorthand_config(cls, v: Any) -> Any:
        if v is None or v is True:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError(f"behavior config must be a mapping, got {type(v).__name__}")
        return dict(v)


def _entry_pairs(acts_as: Any) -> List[tuple]:
    if isinstance(acts_as, Mapping):
        return list(acts_as.items())
    if isinstance(acts_as, (str, bytes)) or not isinstance(acts_as, (list, tuple)):
        raise MisconfigurationError(
            f"acts_as must be a list or mapping, got {type(acts_as).__name__}"
        )
    pairs = []
    for entry in acts_as:
        if isinstance(entry, tuple):
            if len(entry) != 2:
                raise MisconfigurationError(
                    f"acts_as tuple entries must be (name, config), got {entry!r}"
                )
            pairs.append(entry)
        else:
            pairs.append((entry, None))
    return pairs


def normalize_declarations(acts_as: Any) -> List[BehaviorDeclaration]:
    """
    Normalize ``acts_as`` into validated declarations, in declaration order.

    Raises:
        MisconfigurationError: on any malformed entry.
    """
    if not acts_as:
        return []
    declarations = []
    for name, config in _entry_pairs(acts_as):
        try:
            declarations.append(BehaviorDeclaration(name=name, config=config))
        except ValidationError as e:
            raise MisconfigurationError(f"Invalid behavior declaration {name!r}: {e}") from e
    return declarations
