"""Caching layer for computed ROI metrics."""

from label_sim.cache.roi_cache import ENTITY_TYPES, RoiCache, UnknownEntityTypeError

__all__ = ["ENTITY_TYPES", "RoiCache", "UnknownEntityTypeError"]
