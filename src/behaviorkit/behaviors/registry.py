"""
Per-model binding table for behaviors.

Every model class owns one ``ModelBindingTable`` (created by its metaclass).
The table maps a behavior implementation to the behavior instance bound to
that model. Insertion order is dispatch order. The table also tracks the
entity members installed by each behavior, and runs the model's ``acts_as``
declarations exactly once, on first use.
"""

from __future__ import annotations

import functools
import logging
import threading
import weakref
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from .base import Behavior
from .declarations import normalize_declarations
from .locator import BEHAVIOR_KIND, Locator, get_default_locator
from .merge import merge_config
from behaviorkit.config import get_settings
from behaviorkit.errors import (
    BehaviorError,
    BehaviorNotFoundError,
    CapabilityConflictError,
    MisconfigurationError,
    NotBoundError,
)

logger = logging.getLogger(__name__)

BehaviorRef = Union[str, Type[Behavior], Behavior]


def _as_entity_method(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def member(entity, *args, **kwargs):
        return func(entity, *args, **kwargs)

    member.__name__ = name
    member.__qualname__ = name
    return member


class ModelBindingTable:
    """
    Ordered behavior bindings of one model class.

    bind/unbind/reset and the one-time initialization hold ``_lock``;
    readers take a snapshot under it.
    """

    def __init__(self, model: Any, locator: Optional[Locator] = None):
        self._model_ref = weakref.ref(model)
        self._locator = locator
        self._entries: Dict[Type[Behavior], Behavior] = {}
        # member name -> (owner, installed function), last entry is live
        self._installed: Dict[str, List[Tuple[Type[Behavior], Callable]]] = {}
        self._lock = threading.RLock()
        self._initialized = False
        self._initializing = False

    # ------------------------------------------------------------------ #
    # context
    # ------------------------------------------------------------------ #

    @property
    def model(self) -> Any:
        model = self._model_ref()
        if model is None:
            raise BehaviorError("Model class of this binding table no longer exists")
        return model

    @property
    def locator(self) -> Locator:
        if self._locator is not None:
            return self._locator
        return getattr(self.model, "behavior_locator", None) or get_default_locator()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _entity_class(self) -> Optional[type]:
        return getattr(self.model, "entity_class", None)

    def _resolve(self, behavior: BehaviorRef) -> Tuple[Type[Behavior], Optional[Behavior]]:
        if isinstance(behavior, Behavior):
            return type(behavior), behavior
        descriptor = self.locator.resolve(BEHAVIOR_KIND, behavior)
        return descriptor.implementation, None

    def _bound_implementation(self, behavior: BehaviorRef) -> Type[Behavior]:
        try:
            implementation, _ = self._resolve(behavior)
        except BehaviorNotFoundError as e:
            raise NotBoundError(self.model, str(behavior)) from e
        if implementation not in self._entries:
            raise NotBoundError(self.model, getattr(behavior, "__name__", str(behavior)))
        return implementation

    # ------------------------------------------------------------------ #
    # initialization
    # ------------------------------------------------------------------ #

    def _auto_init(self) -> bool:
        flag = getattr(self.model, "behavior_init", None)
        if flag is None:
            return get_settings().auto_init
        return bool(flag)

    def ensure_initialized(self) -> None:
        """
        Bind the model's declared ``acts_as`` behaviors, once.

        Safe to call before every operation. Concurrent first callers wait
        for the one running initialization; nested calls from the thread
        running it return immediately.
        """
        if self._initialized:
            return
        with self._lock:
            if self._initialized or self._initializing:
                return
            self._initializing = True
            try:
                if self._auto_init():
                    declarations = normalize_declarations(getattr(self.model, "acts_as", None))
                    for declaration in declarations:
                        self._bind(declaration.name, declaration.config)
                    if declarations:
                        logger.info(
                            f"Initialized {len(declarations)} declared behavior(s) "
                            f"for {self.model.__name__}"
                        )
                self._initialized = True
            except Exception:
                self._clear()
                raise
            finally:
                self._initializing = False

    # ------------------------------------------------------------------ #
    # binding
    # ------------------------------------------------------------------ #

    def bind(self, behavior: BehaviorRef, config: Optional[Mapping[str, Any]] = None) -> Behavior:
        """
        Bind a behavior to the model, or reconfigure it if already bound.

        Args:
            behavior: Behavior name, import path, Behavior subclass or instance.
            config: Configuration merged over the behavior's defaults (first
                bind) or over its current configuration (rebind).

        Returns:
            The bound behavior instance.

        Raises:
            BehaviorNotFoundError: if the name cannot be resolved.
            MisconfigurationError: if ``config`` is not a mapping.
            CapabilityConflictError: if an entity member collides.
        """
        self.ensure_initialized()
        with self._lock:
            return self._bind(behavior, config)

    def _bind(self, behavior: BehaviorRef, config: Optional[Mapping[str, Any]]) -> Behavior:
        if config is not None and not isinstance(config, Mapping):
            raise MisconfigurationError(
                f"Behavior configuration must be a mapping, got {type(config).__name__}"
            )
        model = self.model
        implementation, instance = self._resolve(behavior)

        existing = self._entries.get(implementation)
        if existing is not None:
            supplied = config
            if instance is not None and instance is not existing:
                supplied = merge_config(config, instance.config)
            existing._set_config(implementation.merge_config(model, existing, supplied, existing.config))
            logger.debug(f"Reconfigured behavior {existing.name} on {model.__name__}")
            return existing

        if instance is None:
            instance = implementation()
            supplied = config
        else:
            owner = instance.model
            if owner is not None and owner is not model:
                raise MisconfigurationError(
                    f"Behavior instance {instance!r} is already bound to {owner.__name__}"
                )
            supplied = merge_config(config, instance.config)

        previous_config = instance._set_config(
            implementation.merge_config(model, instance, supplied, implementation.defaults)
        )
        instance.attach(model)
        try:
            members = dict(instance.entity_members() or {})
            self._check_members(implementation, members)
        except Exception:
            instance._set_config(previous_config)
            instance.detach()
            raise

        self._install_members(implementation, members)
        self._entries[implementation] = instance
        logger.debug(f"Bound behavior {instance.name} to {model.__name__} with config {instance.config}")
        return instance

    def _check_members(self, implementation: Type[Behavior], members: Dict[str, Callable]) -> None:
        if not members:
            return
        entity_class = self._entity_class()
        if entity_class is None:
            raise MisconfigurationError(
                f"{implementation.__name__} installs entity members but "
                f"{self.model.__name__} has no entity_class"
            )
        policy = get_settings().collision_policy
        for name, func in members.items():
            if not callable(func):
                raise MisconfigurationError(
                    f"Entity member '{name}' from {implementation.__name__} is not callable"
                )
            owner = self._owner(name)
            if owner is None:
                if hasattr(entity_class, name):
                    raise CapabilityConflictError(
                        self.model, name, f"entity class {entity_class.__name__}"
                    )
            elif owner is not implementation and policy == "reject":
                raise CapabilityConflictError(self.model, name, owner.__name__)

    def _install_members(self, implementation: Type[Behavior], members: Dict[str, Callable]) -> None:
        entity_class = self._entity_class()
        for name, func in members.items():
            owner = self._owner(name)
            if owner is not None and owner is not implementation:
                logger.warning(
                    f"Entity member '{name}' on {self.model.__name__} from {owner.__name__} "
                    f"is replaced by {implementation.__name__}"
                )
            member = _as_entity_method(name, func)
            setattr(entity_class, name, member)
            self._installed.setdefault(name, []).append((implementation, member))

    def _owner(self, name: str) -> Optional[Type[Behavior]]:
        stack = self._installed.get(name)
        return stack[-1][0] if stack else None

    def _remove_members(self, implementation: Type[Behavior]) -> None:
        """Remove members of ``implementation``; a replaced earlier owner's member comes back."""
        entity_class = self._entity_class()
        for name in list(self._installed):
            stack = self._installed[name]
            remaining = [entry for entry in stack if entry[0] is not implementation]
            if len(remaining) == len(stack):
                continue
            if remaining:
                self._installed[name] = remaining
                if entity_class is not None and stack[-1][0] is implementation:
                    owner, member = remaining[-1]
                    setattr(entity_class, name, member)
                    logger.debug(
                        f"Entity member '{name}' on {self.model.__name__} restored from {owner.__name__}"
                    )
            else:
                del self._installed[name]
                if entity_class is not None and name in vars(entity_class):
                    delattr(entity_class, name)

    def unbind(self, behavior: BehaviorRef) -> None:
        """
        Unbind a behavior and remove the entity members it installed.

        Raises:
            NotBoundError: if the behavior is not bound.
        """
        self.ensure_initialized()
        with self._lock:
            implementation = self._bound_implementation(behavior)
            self._remove_members(implementation)
            instance = self._entries.pop(implementation)
            instance.detach()
        logger.debug(f"Unbound behavior {instance.name} from {self.model.__name__}")

    def has(self, behavior: BehaviorRef) -> bool:
        """
        Whether the behavior is bound. Never raises.

        False for names that cannot be resolved, and while the model's
        declarations fail to initialize; the next bind, get or dispatch
        raises that error.
        """
        try:
            self.ensure_initialized()
            implementation, _ = self._resolve(behavior)
        except BehaviorError:
            return False
        with self._lock:
            return implementation in self._entries

    def get(self, behavior: BehaviorRef) -> Behavior:
        """
        Get the bound behavior instance.

        Raises:
            NotBoundError: if the behavior is not bound.
        """
        self.ensure_initialized()
        with self._lock:
            return self._entries[self._bound_implementation(behavior)]

    def behaviors(self) -> List[Behavior]:
        """Bound behavior instances in dispatch order."""
        self.ensure_initialized()
        with self._lock:
            return list(self._entries.values())

    def installed_members(self) -> Dict[str, str]:
        with self._lock:
            return {name: stack[-1][0].__name__ for name, stack in self._installed.items()}

    def reset(self) -> None:
        """Drop all bindings; declarations run again on next use."""
        with self._lock:
            self._clear()

    def _clear(self) -> None:
        for implementation in list(self._entries):
            self._remove_members(implementation)
        for instance in self._entries.values():
            instance.detach()
        self._entries.clear()
        self._installed.clear()
        self._initialized = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        model = self._model_ref()
        names = [instance.name for instance in self._entries.values()]
        return f"ModelBindingTable(model={getattr(model, '__name__', None)!r}, behaviors={names})"
