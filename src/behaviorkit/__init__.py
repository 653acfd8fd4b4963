# src/behaviorkit/__init__.py
"""
behaviorkit
===========
Reusable, configurable behaviors for model classes, without subclassing.

A model declares the behaviors it uses (``acts_as``) or binds them at
runtime. Calls the model does not define itself are forwarded to the first
bound behavior that implements them.

Import Guide:
-------------
Models:
    from behaviorkit import Model, Entity

Behaviors:
    from behaviorkit import Behavior, model_method, entity_method

Errors:
    from behaviorkit.errors import NotBoundError, BehaviorNotFoundError
"""

from behaviorkit.behaviors import (
    Behavior,
    BehaviorLocator,
    ModelBindingTable,
    entity_method,
    get_default_locator,
    model_method,
)
from behaviorkit.errors import (
    BehaviorError,
    BehaviorNotFoundError,
    CapabilityConflictError,
    DispatchMiss,
    MisconfigurationError,
    NotBoundError,
)
from behaviorkit.models import Entity, Model

__version__ = "0.1.0"

__all__ = [
    "Behavior",
    "BehaviorLocator",
    "ModelBindingTable",
    "model_method",
    "entity_method",
    "get_default_locator",
    "Model",
    "Entity",
    "BehaviorError",
    "BehaviorNotFoundError",
    "CapabilityConflictError",
    "DispatchMiss",
    "MisconfigurationError",
    "NotBoundError",
]
