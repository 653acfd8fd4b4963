"""
Base class for model behaviors.

Behaviors are reusable capabilities bound to a model class with their own
configuration. A bound behavior instance belongs to exactly one model class,
and each behavior class is bound at most once per model. Configuration is
built from the class-level ``defaults`` merged with the configuration given
at bind time (or in the model's ``acts_as`` declaration).

Behaviors expose capabilities to the model they are bound to:

- ``@model_method``: answers calls made on the model class. Invoked as
  ``method(self, model, *args)``.
- ``@entity_method``: answers calls made on an entity of the model. Invoked as
  ``method(self, model, entity, *args)``.
- ``entity_members()``: functions installed directly onto the model's entity
  class when the behavior is first bound.

Example::

    class Fly(Behavior):
        defaults = {"speed_label": "1h54"}

        @model_method
        def fly(self, model, target):
            return f"{target} reached in {self.config_value('speed_label')}."
"""

from __future__ import annotations

import weakref
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from .merge import merge_config as _merge_config
from behaviorkit.errors import MisconfigurationError

MODEL_SCOPE = "model"
ENTITY_SCOPE = "entity"

_MARKER = "__behavior_capability__"


def _mark(scope: str, func: Optional[Callable] = None, *, name: Optional[str] = None):
    def decorator(fn: Callable) -> Callable:
        markers = dict(getattr(fn, _MARKER, {}))
        markers[scope] = name or fn.__name__
        setattr(fn, _MARKER, markers)
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def model_method(func: Optional[Callable] = None, *, name: Optional[str] = None):
    """Expose a behavior method as a model-level (static) capability."""
    return _mark(MODEL_SCOPE, func, name=name)


def entity_method(func: Optional[Callable] = None, *, name: Optional[str] = None):
    """Expose a behavior method as an entity-level (instance) capability."""
    return _mark(ENTITY_SCOPE, func, name=name)


class Behavior:
    """
    Base class for all behaviors.

    Subclasses set ``defaults`` and decorate capabilities. ``merge_config``
    can be overridden to change how bind-time configuration is combined with
    the defaults (deep merge, shorthand normalization, ...).
    """

    #: Default configuration, merged under bind-time configuration.
    defaults: Dict[str, Any] = {}

    #: Name used in logs and error messages; the class name when unset.
    behavior_name: Optional[str] = None

    # exposed capability name -> attribute name, filled per subclass
    _capabilities: Dict[str, Dict[str, str]] = {MODEL_SCOPE: {}, ENTITY_SCOPE: {}}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        capabilities: Dict[str, Dict[str, str]] = {MODEL_SCOPE: {}, ENTITY_SCOPE: {}}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                markers = getattr(value, _MARKER, None)
                if not markers:
                    continue
                for scope, exposed in markers.items():
                    capabilities[scope][exposed] = attr
        cls._capabilities = capabilities
        if not isinstance(cls.defaults, Mapping):
            raise MisconfigurationError(
                f"{cls.__name__}.defaults must be a mapping, got {type(cls.defaults).__name__}"
            )

    def __init__(self, config: Optional[Mapping[str, Any]] = None, model: Any = None):
        if config is not None and not isinstance(config, Mapping):
            raise MisconfigurationError(
                f"Behavior configuration must be a mapping, got {type(config).__name__}"
            )
        self._config: Dict[str, Any] = dict(config or {})
        self._model_ref: Optional[weakref.ReferenceType] = None
        if model is not None:
            self.attach(model)

    @property
    def name(self) -> str:
        """Behavior name."""
        return self.behavior_name or type(self).__name__

    @property
    def model(self) -> Any:
        """The model class this instance is bound to, or None."""
        return self._model_ref() if self._model_ref is not None else None

    @property
    def config(self) -> Dict[str, Any]:
        """The merged configuration."""
        return self._config

    def _set_config(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """Replace the configuration; returns the previous one."""
        previous, self._config = self._config, dict(config)
        return previous

    def attach(self, model: Any) -> None:
        self._model_ref = weakref.ref(model)

    def detach(self) -> None:
        self._model_ref = None

    def configure(self, config: Any = None) -> Any:
        """
        Set or get the configuration.

        Args:
            config: A mapping merged over the current configuration (its keys
                win), a key whose value is returned, or None for the whole
                configuration.

        Returns:
            The configuration dict, or the value for ``config`` when it is a key.
        """
        if config:
            if not isinstance(config, Mapping):
                return self._config.get(config)
            self._config = _merge_config(config, self._config)
        return self._config

    def config_value(self, key: str, default: Any = None) -> Any:
        """Get configuration value with optional default."""
        return self._config.get(key, default)

    @classmethod
    def merge_config(
        cls,
        model: Any,
        behavior: "Behavior",
        supplied: Optional[Mapping[str, Any]],
        defaults: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """
        Build the final configuration of ``behavior`` for ``model``.

        Called on first bind with the class defaults and on rebind with the
        instance's current configuration. The default is a shallow merge.
        """
        return _merge_config(supplied, defaults)

    def entity_members(self) -> Dict[str, Callable[..., Any]]:
        """
        Functions to install on the model's entity class when first bound.

        Each function receives the entity as its first argument. Override to
        contribute members; the merged configuration is available.
        """
        return {}

    @classmethod
    def capability(cls, scope: str, method: str) -> Optional[str]:
        """Attribute name implementing ``method`` in ``scope``, or None."""
        return cls._capabilities.get(scope, {}).get(method)

    @classmethod
    def capabilities(cls, scope: str) -> Dict[str, str]:
        return dict(cls._capabilities.get(scope, {}))

    def __repr__(self) -> str:
        model = self.model
        model_name = getattr(model, "__name__", None)
        return f"{self.__class__.__name__}(model={model_name!r}, config={self._config!r})"
