from .sluggable import Sluggable
from .soft_deletable import SoftDeletable

__all__ = ["Sluggable", "SoftDeletable"]
