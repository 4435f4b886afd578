"""
Core Models Package

Immutable data models shared by the registry and the stamping engine.
All models are frozen dataclasses; new instances are created for changes.
"""

from .templates import (
    LayoutVariant,
    PageRestriction,
    PageTransform,
    PageTransforms,
    Parity,
    RegionSpec,
    TemplateDescription,
    TemplateSource,
    merge_regions,
)
from .pages import LocationEntry, Overflow, PageData

__all__ = [
    "LayoutVariant",
    "PageRestriction",
    "PageTransform",
    "PageTransforms",
    "Parity",
    "RegionSpec",
    "TemplateDescription",
    "TemplateSource",
    "merge_regions",
    "LocationEntry",
    "Overflow",
    "PageData",
]
