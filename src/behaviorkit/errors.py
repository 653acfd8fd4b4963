"""
Exceptions raised by the behavior binding registry and dispatcher.

Every error derives from ``BehaviorError`` so hosts can catch the whole
family at once. ``DispatchMiss`` is not a failure of the registry itself:
it tells the host model that no bound behavior answered a forwarded call,
so the host can fall back to its own handling (usually ``AttributeError``).
"""

from __future__ import annotations

from typing import Any, Optional


class BehaviorError(Exception):
    """Base class for all behavior errors."""


class NotBoundError(BehaviorError, KeyError):
    """Raised when getting or unbinding a behavior that is not bound to the model."""

    def __init__(self, model: Any, name: str):
        self.model = model
        self.name = name
        model_name = getattr(model, "__name__", str(model))
        super().__init__(f"Behavior '{name}' is not bound to model '{model_name}'")

    def __str__(self) -> str:
        # KeyError quotes its message otherwise
        return str(self.args[0])


class BehaviorNotFoundError(BehaviorError, LookupError):
    """Raised when the locator cannot resolve a behavior name."""

    def __init__(self, name: str, kind: str = "behavior", searched: Optional[list] = None):
        self.name = name
        self.kind = kind
        self.searched = list(searched or [])
        message = f"Unable to locate {kind} named '{name}'"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class DispatchMiss(BehaviorError):
    """Raised when no bound behavior exposes the requested capability."""

    def __init__(self, model: Any, method: str, scope: str = "model"):
        self.model = model
        self.method = method
        self.scope = scope
        model_name = getattr(model, "__name__", str(model))
        super().__init__(
            f"No behavior bound to '{model_name}' answers {scope} method '{method}'"
        )


class MisconfigurationError(BehaviorError, ValueError):
    """Raised for non-mapping configuration or invalid behavior declarations."""


class CapabilityConflictError(BehaviorError):
    """Raised when two behaviors install the same entity member on one model."""

    def __init__(self, model: Any, member: str, owner: str):
        self.model = model
        self.member = member
        self.owner = owner
        model_name = getattr(model, "__name__", str(model))
        super().__init__(
            f"Entity member '{member}' on model '{model_name}' is already provided by {owner}"
        )
