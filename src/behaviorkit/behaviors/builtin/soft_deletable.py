"""
SoftDeletable: marks entities as deleted instead of removing them.

Configuration:
    field: Entity field holding the deleted marker (default: "deleted")
    flag: Value stored when deleted (default: True)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from ..base import Behavior, entity_method, model_method

logger = logging.getLogger(__name__)


class SoftDeletable(Behavior):
    defaults = {"field": "deleted", "flag": True}

    @entity_method
    def soft_delete(self, model: Any, entity: Any) -> Any:
        entity[self.config_value("field")] = self.config_value("flag")
        logger.debug(f"Soft-deleted {model.__name__} entity {entity!r}")
        return entity

    @entity_method
    def restore(self, model: Any, entity: Any) -> Any:
        entity.data.pop(self.config_value("field"), None)
        return entity

    @entity_method
    def is_deleted(self, model: Any, entity: Any) -> bool:
        field = self.config_value("field")
        return field in entity and entity[field] == self.config_value("flag")

    @model_method
    def without_deleted(self, model: Any, entities: Iterable[Any]) -> List[Any]:
        """Filter out soft-deleted entities."""
        return [e for e in entities if not self.is_deleted(model, e)]
