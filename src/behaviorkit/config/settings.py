"""
Runtime settings for the behavior registry.

Environment Variables:
    BEHAVIORKIT_AUTO_INIT: Bind declared ``acts_as`` behaviors on first use (default: '1')
    BEHAVIORKIT_COLLISION_POLICY: 'reject' or 'last_wins' for entity members
        installed by two behaviors (default: 'reject')
    BEHAVIORKIT_SEARCH_PATHS: Comma-separated import templates used by the
        default locator, e.g. 'myapp.behaviors.{name}' (default: '')
    LOG_LEVEL: Logging level (default: 'INFO')
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Optional, Tuple

from behaviorkit.errors import MisconfigurationError

COLLISION_POLICIES = ("reject", "last_wins")

_TRUE = {"1", "true", "True", "yes", "on"}


def _split_paths(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide behavior settings, read from the environment."""

    auto_init: bool = field(
        default_factory=lambda: os.getenv("BEHAVIORKIT_AUTO_INIT", "1") in _TRUE
    )
    collision_policy: str = field(
        default_factory=lambda: os.getenv("BEHAVIORKIT_COLLISION_POLICY", "reject").strip().lower()
    )
    search_paths: Tuple[str, ...] = field(
        default_factory=lambda: _split_paths(os.getenv("BEHAVIORKIT_SEARCH_PATHS", ""))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    def validate(self) -> None:
        """Validate configuration values."""
        if self.collision_policy not in COLLISION_POLICIES:
            raise MisconfigurationError(
                f"BEHAVIORKIT_COLLISION_POLICY must be one of {COLLISION_POLICIES}, "
                f"got '{self.collision_policy}'"
            )
        for template in self.search_paths:
            if "{name}" not in template:
                raise MisconfigurationError(
                    f"Search path template '{template}' must contain '{{name}}'"
                )


_settings: Optional[Settings] = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get the cached settings, loading them from the environment on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                settings = Settings()
                settings.validate()
                _settings = settings
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment (for tests)."""
    global _settings
    with _settings_lock:
        _settings = None
