"""
pdf_stamper Core Package

Shared data models, open handler dispatch and schema validation used by
the registry and the stamping engine.
"""

from .models import PageData, Parity, RegionSpec, TemplateDescription
from .dispatch import HandlerRegistry, UnknownHandlerError

__all__ = [
    "PageData",
    "Parity",
    "RegionSpec",
    "TemplateDescription",
    "HandlerRegistry",
    "UnknownHandlerError",
]
