"""
Sluggable: builds URL slugs from entity fields.

Configuration:
    fields: Field name or list of field names joined into the slug (default: ["title"])
    field: Entity field the slug is stored in (default: "slug")
    separator: Word separator (default: "-")
    lowercase: Lowercase the slug (default: True)

Installs ``slugify()`` on the model's entities.
"""

from __future__ import annotations

import copy
import logging
import re
import unicodedata
from typing import Any, Callable, Dict, List

from ..base import Behavior, model_method
from ..merge import deep_merge

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s-]")
_SPACES = re.compile(r"[\s_-]+")


class Sluggable(Behavior):
    defaults = {
        "fields": ["title"],
        "field": "slug",
        "separator": "-",
        "lowercase": True,
    }

    @classmethod
    def merge_config(cls, model, behavior, supplied, defaults) -> Dict[str, Any]:
        supplied = dict(supplied or {})
        # "fields" given by the caller replaces the default list instead of extending it
        fields = supplied.pop("fields", None)
        merged = deep_merge(supplied, defaults)
        if fields is not None:
            merged["fields"] = copy.deepcopy(fields)
        if isinstance(merged.get("fields"), str):
            merged["fields"] = [merged["fields"]]
        return merged

    def _slug(self, text: str) -> str:
        separator = self.config_value("separator", "-")
        text = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
        text = _NON_WORD.sub("", text).strip()
        if self.config_value("lowercase", True):
            text = text.lower()
        return _SPACES.sub(separator, text).strip(separator)

    @model_method
    def slug_for(self, model: Any, text: str) -> str:
        """Slug for an arbitrary string, using this model's configuration."""
        return self._slug(text)

    def entity_members(self) -> Dict[str, Callable[..., Any]]:
        fields: List[str] = list(self.config_value("fields", []))
        target = self.config_value("field", "slug")

        def slugify(entity) -> str:
            parts = [str(entity.get(f)) for f in fields if entity.get(f) not in (None, "")]
            slug = self._slug(" ".join(parts))
            entity[target] = slug
            return slug

        slugify.__doc__ = f"Build the slug from {fields} and store it in '{target}'."
        return {"slugify": slugify}
