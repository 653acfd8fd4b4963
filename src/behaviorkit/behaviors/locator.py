"""
Behavior locator: resolves behavior names to implementation classes.

Names are resolved, in order, as:
  1. a registered name (built-ins are pre-registered),
  2. a dotted import path ``package.module.ClassName``,
  3. each configured search path template, e.g. ``myapp.behaviors.{name}``.
"""

from __future__ import annotations

import importlib
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Type, Union

from .base import Behavior
from behaviorkit.config import get_settings
from behaviorkit.errors import BehaviorNotFoundError

logger = logging.getLogger(__name__)

BEHAVIOR_KIND = "behavior"


@dataclass(frozen=True)
class BehaviorDescriptor:
    name: str
    implementation: Type[Behavior]


class Locator(Protocol):
    """
    Minimal contract the registry needs from a locator.
    ``resolve`` must raise BehaviorNotFoundError for unknown names.
    """

    def resolve(self, kind: str, name: Union[str, Type[Behavior]]) -> BehaviorDescriptor:
        ...


class BehaviorLocator:
    """
    Registry of behavior classes by name, with import-path fallback.
    """

    def __init__(self, search_paths: Optional[Sequence[str]] = None, register_builtin: bool = True):
        self._classes: Dict[str, Type[Behavior]] = {}
        self._lock = threading.Lock()
        if search_paths is None:
            search_paths = get_settings().search_paths
        self.search_paths: List[str] = list(search_paths)
        if register_builtin:
            _register_builtin_behaviors(self)

    def register(self, name: str, behavior_class: Type[Behavior]) -> None:
        """
        Register a behavior class under ``name``.

        Raises:
            TypeError: if ``behavior_class`` is not a Behavior subclass.
        """
        if not (isinstance(behavior_class, type) and issubclass(behavior_class, Behavior)):
            raise TypeError(f"Behavior class must subclass Behavior, got {behavior_class!r}")
        with self._lock:
            if name in self._classes and self._classes[name] is not behavior_class:
                logger.warning(f"Behavior '{name}' already registered, replacing it")
            self._classes[name] = behavior_class
        logger.debug(f"Registered behavior: {name} -> {behavior_class.__name__}")

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._classes.pop(name, None) is not None

    def list_available(self) -> List[str]:
        """List all registered behavior names."""
        with self._lock:
            return list(self._classes.keys())

    def resolve(self, kind: str, name: Union[str, Type[Behavior]]) -> BehaviorDescriptor:
        if kind != BEHAVIOR_KIND:
            raise BehaviorNotFoundError(str(name), kind=kind)

        if isinstance(name, type) and issubclass(name, Behavior):
            return BehaviorDescriptor(name=name.__name__, implementation=name)
        if not isinstance(name, str) or not name:
            raise BehaviorNotFoundError(repr(name), kind=kind)

        with self._lock:
            registered = self._classes.get(name)
        if registered is not None:
            return BehaviorDescriptor(name=name, implementation=registered)

        candidates = []
        if "." in name:
            candidates.append(name)
        candidates.extend(template.format(name=name) for template in self.search_paths)

        for path in candidates:
            implementation = self._import(path)
            if implementation is not None:
                return BehaviorDescriptor(name=name, implementation=implementation)

        raise BehaviorNotFoundError(name, kind=kind, searched=candidates)

    def _import(self, path: str) -> Optional[Type[Behavior]]:
        module_name, _, attr = path.rpartition(".")
        if not module_name:
            return None
        try:
            module = importlib.import_module(module_name)
        except (ImportError, TypeError, ValueError) as e:
            # relative names like "..Fly" raise TypeError
            logger.debug(f"Cannot import '{module_name}' for '{path}': {e}")
            return None
        obj = getattr(module, attr, None)
        if isinstance(obj, type) and issubclass(obj, Behavior):
            return obj
        if obj is not None:
            logger.debug(f"'{path}' is not a Behavior subclass, skipping")
        return None


def _register_builtin_behaviors(locator: BehaviorLocator) -> None:
    """Register built-in behaviors."""
    from .builtin import SoftDeletable, Sluggable

    locator.register("Sluggable", Sluggable)
    locator.register("SoftDeletable", SoftDeletable)


# Global locator instance
_default_locator: Optional[BehaviorLocator] = None
_locator_lock = threading.Lock()


def get_default_locator() -> BehaviorLocator:
    """Get or create the default behavior locator (singleton)."""
    global _default_locator
    if _default_locator is None:
        with _locator_lock:
            if _default_locator is None:
                _default_locator = BehaviorLocator()
    return _default_locator


def reset_default_locator() -> None:
    """Drop the default locator (for tests)."""
    global _default_locator
    with _locator_lock:
        _default_locator = None
