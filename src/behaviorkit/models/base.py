"""
Host model layer for behaviors.

``Model`` subclasses declare behaviors in ``acts_as`` and manage them through
classmethods. Each model class owns its own ``ModelBindingTable`` and its own
entity class (a subclass of ``entity_class``) so installed entity members
never leak between models.

Unknown attributes on a model class are forwarded to model capabilities of
its bound behaviors; unknown attributes on an entity are looked up in the
entity's fields first, then forwarded to entity capabilities. When nothing
answers, ``AttributeError`` is raised as usual.

Example::

    class Posts(Model):
        acts_as = [("Sluggable", {"fields": ["title"]}), "SoftDeletable"]

    post = Posts.create(title="Hello World")
    post.slugify()          # installed by Sluggable -> "hello-world"
    post.soft_delete()      # forwarded to SoftDeletable
    Posts.behavior_config("Sluggable", "fields")   # ["title"]
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

from behaviorkit.behaviors.base import Behavior
from behaviorkit.behaviors.dispatch import resolve_instance, resolve_static
from behaviorkit.behaviors.registry import BehaviorRef, ModelBindingTable
from behaviorkit.errors import DispatchMiss

logger = logging.getLogger(__name__)


class Entity:
    """A single record of a model: field data plus the owning model class."""

    def __init__(self, model: Any, data: Optional[Mapping[str, Any]] = None, **fields: Any):
        self._model = model
        self._data: Dict[str, Any] = dict(data or {})
        self._data.update(fields)

    @property
    def model(self) -> Any:
        return self._model

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        data = self.__dict__.get("_data", {})
        if name in data:
            return data[name]
        model = self.__dict__.get("_model")
        if model is None:
            raise AttributeError(name)
        try:
            return resolve_instance(model.behavior_table(), self, name)
        except DispatchMiss as miss:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{name}'"
            ) from miss

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class ModelMeta(type):
    """Gives each model class its own binding table and entity class."""

    def __init__(cls, name, bases, namespace, **kwargs):
        super().__init__(name, bases, namespace, **kwargs)
        entity_base = namespace.get("entity_class")
        if entity_base is None:
            entity_base = next(
                (b.__dict__["_entity_base"] for b in cls.__mro__[1:] if "_entity_base" in b.__dict__),
                Entity,
            )
        if not (isinstance(entity_base, type) and issubclass(entity_base, Entity)):
            raise TypeError(f"{name}.entity_class must subclass Entity, got {entity_base!r}")
        cls._entity_base = entity_base
        cls.entity_class = type(
            f"{name}Entity",
            (entity_base,),
            {"__module__": cls.__module__, "__qualname__": f"{cls.__qualname__}.Entity"},
        )
        cls._binding_table = ModelBindingTable(cls)

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        table = cls.__dict__.get("_binding_table")
        if table is None:
            raise AttributeError(name)
        try:
            return resolve_static(table, name)
        except DispatchMiss as miss:
            raise AttributeError(
                f"type object '{cls.__name__}' has no attribute '{name}'"
            ) from miss


class Model(metaclass=ModelMeta):
    """
    Base class for models that use behaviors.

    Class attributes:
        acts_as: Declared behaviors, bound on first use.
        behavior_init: Set to False to skip binding ``acts_as`` on first use
            (None follows BEHAVIORKIT_AUTO_INIT).
        behavior_locator: Locator used to resolve names (None = default locator).
        entity_class: Base class of this model's entities.
    """

    acts_as: Any = []
    behavior_init: Optional[bool] = None
    behavior_locator: Any = None
    entity_class: type = Entity

    @classmethod
    def behavior_table(cls) -> ModelBindingTable:
        return cls.__dict__["_binding_table"]

    @classmethod
    def bind_behavior(cls, behavior: BehaviorRef, config: Optional[Mapping[str, Any]] = None) -> Behavior:
        """Bind a behavior with ``config``, or reconfigure it if already bound."""
        return cls.behavior_table().bind(behavior, config)

    @classmethod
    def unbind_behavior(cls, behavior: BehaviorRef) -> None:
        cls.behavior_table().unbind(behavior)

    @classmethod
    def has_behavior(cls, behavior: BehaviorRef) -> bool:
        return cls.behavior_table().has(behavior)

    @classmethod
    def behavior(cls, behavior: BehaviorRef) -> Behavior:
        """Return the bound behavior instance (raises NotBoundError)."""
        return cls.behavior_table().get(behavior)

    @classmethod
    def behavior_config(cls, behavior: BehaviorRef, key: Optional[str] = None) -> Any:
        """
        Configuration of a bound behavior.

        Returns a deep copy of the value for ``key`` (None when missing), or
        of the whole configuration when ``key`` is None.
        """
        instance = cls.behavior_table().get(behavior)
        if key is None:
            return copy.deepcopy(instance.config)
        return copy.deepcopy(instance.config_value(key))

    @classmethod
    def behaviors(cls) -> List[Behavior]:
        return cls.behavior_table().behaviors()

    @classmethod
    def create(cls, data: Optional[Mapping[str, Any]] = None, **fields: Any) -> Entity:
        """Create an entity of this model. Nothing is persisted."""
        cls.behavior_table().ensure_initialized()
        return cls.entity_class(cls, data, **fields)

    @classmethod
    def reset(cls) -> None:
        """Drop all bindings; ``acts_as`` is bound again on next use."""
        cls.behavior_table().reset()
        logger.debug(f"Reset behaviors of {cls.__name__}")
