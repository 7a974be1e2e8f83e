"""Service clients used by the Environment Operator."""

from .store import ObjectKey, ResourceStore, get_resource_store

__all__ = ["ObjectKey", "ResourceStore", "get_resource_store"]
