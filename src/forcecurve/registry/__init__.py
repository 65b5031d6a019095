"""Curve keys, the aggregate metadata table and lazy curve access."""

from .metadata_registry import MetadataRegistry, make_curve_key, switch_name
from .curve_cache import CurveStore, CurveCache, tag_curve

__all__ = [
    'MetadataRegistry',
    'make_curve_key',
    'switch_name',
    'CurveStore',
    'CurveCache',
    'tag_curve'
]
