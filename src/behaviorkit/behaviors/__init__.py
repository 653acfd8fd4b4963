# behaviorkit/behaviors/__init__.py
"""
Behavior binding and dispatch.

Behaviors are reusable capabilities bound to model classes with their own
configuration. They can be declared on a model (``acts_as``) or bound at
runtime (``Model.bind_behavior``). Unresolved calls on the model or its
entities are forwarded to the first bound behavior that exposes them.
"""

from .base import Behavior, entity_method, model_method
from .builtin import Sluggable, SoftDeletable
from .declarations import BehaviorDeclaration, normalize_declarations
from .dispatch import dispatch_instance, dispatch_static, resolve_instance, resolve_static
from .locator import (
    BehaviorDescriptor,
    BehaviorLocator,
    Locator,
    get_default_locator,
    reset_default_locator,
)
from .merge import deep_merge, merge_config
from .registry import ModelBindingTable

__all__ = [
    # Base
    "Behavior",
    "model_method",
    "entity_method",
    # Config
    "merge_config",
    "deep_merge",
    "BehaviorDeclaration",
    "normalize_declarations",
    # Lookup
    "Locator",
    "BehaviorLocator",
    "BehaviorDescriptor",
    "get_default_locator",
    "reset_default_locator",
    # Binding & dispatch
    "ModelBindingTable",
    "dispatch_static",
    "dispatch_instance",
    "resolve_static",
    "resolve_instance",
    # Behaviors
    "Sluggable",
    "SoftDeletable",
]
