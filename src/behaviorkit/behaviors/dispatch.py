"""
Forwarding of unresolved model and entity calls to bound behaviors.

The host model calls into these functions from its own attribute-miss path.
Behaviors are searched in binding order; the first one exposing the
capability answers. ``DispatchMiss`` signals that none did, so the host can
apply its own default.
"""

from __future__ import annotations

import functools
from typing import Any, Callable

from .base import ENTITY_SCOPE, MODEL_SCOPE
from .registry import ModelBindingTable
from behaviorkit.errors import DispatchMiss


def _find(table: ModelBindingTable, scope: str, method: str):
    for behavior in table.behaviors():
        attr = type(behavior).capability(scope, method)
        if attr is not None:
            return behavior, getattr(behavior, attr)
    raise DispatchMiss(table.model, method, scope=scope)


def resolve_static(table: ModelBindingTable, method: str) -> Callable[..., Any]:
    """
    Return a callable for model capability ``method``, with the model bound.

    Raises:
        DispatchMiss: if no bound behavior exposes it.
    """
    _, capability = _find(table, MODEL_SCOPE, method)
    return functools.partial(capability, table.model)


def resolve_instance(table: ModelBindingTable, entity: Any, method: str) -> Callable[..., Any]:
    """
    Return a callable for entity capability ``method``, with model and entity bound.

    Raises:
        DispatchMiss: if no bound behavior exposes it.
    """
    _, capability = _find(table, ENTITY_SCOPE, method)
    return functools.partial(capability, table.model, entity)


def dispatch_static(table: ModelBindingTable, method: str, *args, **kwargs) -> Any:
    """Invoke model capability ``method`` on the first behavior exposing it."""
    return resolve_static(table, method)(*args, **kwargs)


def dispatch_instance(table: ModelBindingTable, entity: Any, method: str, *args, **kwargs) -> Any:
    """Invoke entity capability ``method`` on the first behavior exposing it."""
    return resolve_instance(table, entity, method)(*args, **kwargs)
