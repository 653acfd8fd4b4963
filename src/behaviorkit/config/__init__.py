from .settings import COLLISION_POLICIES, Settings, get_settings, reset_settings

__all__ = ["COLLISION_POLICIES", "Settings", "get_settings", "reset_settings"]
