from .base import Entity, Model, ModelMeta

__all__ = ["Entity", "Model", "ModelMeta"]
