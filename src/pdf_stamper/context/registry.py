"""
Module: context.registry

Purpose:
    The stamping context: template descriptions, their source PDFs and the
    fonts text regions draw with. A context is built first (templates and
    fonts registered) and then used read-only while a document is
    assembled. Embedding fonts produces a frozen copy.

Key Classes:
    - StampContext: Template and font registry
    - UnknownTemplateError: Template name not registered
    - UnknownFontError: Font (family, style) not known
    - ContextFrozenError: Registration on a frozen context

Key Functions:
    - base_context(): Context with the PDF standard fonts
    - embed_font(): Embed one pending font, returning the augmented context
    - open_source(): Open a template source as a fitz document

Dependencies:
    - fitz (PyMuPDF): Opening template PDFs
    - context.fonts: Font registration

Used By:
    - stamping.composer: Template lookup per page
    - stamping.assembler: Font embedding before composition
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import fitz

from pdf_stamper.core.models import (
    Parity,
    RegionSpec,
    TemplateDescription,
    TemplateSource,
    merge_regions,
)

from .fonts import STANDARD_FONTS, FontSpec, register_ttf

logger = logging.getLogger(__name__)


class UnknownTemplateError(LookupError):
    """Raised when a page references a template that is not registered."""


class UnknownFontError(LookupError):
    """Raised when a region asks for a font the context does not know."""


class ContextFrozenError(RuntimeError):
    """Raised when registering into a context that is in its use phase."""


def _as_source(source: Union[str, Path, bytes]) -> TemplateSource:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Template PDF not found: {path}")
    return path


def open_source(source: TemplateSource) -> fitz.Document:
    """
    Open a template source as a new fitz document handle.

    The caller owns the handle and must close it.

    Raises:
        ValueError: If the source has no pages
    """
    if isinstance(source, bytes):
        document = fitz.open(stream=source, filetype="pdf")
    else:
        document = fitz.open(source)
    if document.page_count == 0:
        document.close()
        raise ValueError("Template source has no pages")
    return document


class StampContext:
    """
    Registry of templates and fonts.

    Build phase: add_template(), add_template_partial(), add_font().
    Use phase: lookup() and the *_for_parity() accessors. Registration
    methods return the context so calls can be chained.

    Example:
        >>> context = (
        ...     base_context()
        ...     .add_template(letter_description, Path("templates/letter.pdf"))
        ...     .add_font(Path("fonts/Inter.ttf"), "inter")
        ... )
        >>> context.lookup("letter").name
        'letter'
    """

    def __init__(self) -> None:
        self._templates: Dict[str, TemplateDescription] = {}
        self._sources: Dict[str, TemplateSource] = {}
        self._fonts: Dict[Tuple[str, str], str] = {}
        self._pending_fonts: List[FontSpec] = []
        self._frozen = False

    # ─────────────────────────────────────────────────────────────────────────
    # Build phase
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise ContextFrozenError("Context is frozen; register templates and fonts before assembly")

    def add_template(
        self,
        description: TemplateDescription,
        source: Union[str, Path, bytes],
    ) -> "StampContext":
        """
        Register a template description with its source PDF.

        Only the first page of the source is used. Variant sources given in
        ``description.odd`` / ``description.even`` are checked as well.

        Raises:
            FileNotFoundError: If a source path does not exist
        """
        self._check_mutable()
        self._sources[description.name] = _as_source(source)
        self._templates[description.name] = self._with_checked_variants(description)
        logger.debug(f"Registered template {description.name!r}")
        return self

    def add_template_partial(self, description: TemplateDescription) -> "StampContext":
        """
        Register a template that reuses another template's PDF.

        The partial names its parent in ``inherit``. It takes the parent's
        sources and regions; its own regions replace parent regions of the
        same name or are added. Fields the partial leaves unset (overflow,
        restriction, transforms, variants) come from the parent.

        Raises:
            ValueError: If ``inherit`` is missing
            UnknownTemplateError: If the parent is not registered
        """
        self._check_mutable()
        if not description.inherit:
            raise ValueError(f"Partial template {description.name!r} must name a parent in 'inherit'")
        parent = self.template(description.inherit)

        transforms = description.transforms
        if not (transforms.odd or transforms.even):
            transforms = parent.transforms

        resolved = dataclasses.replace(
            description,
            regions=merge_regions(parent.regions, description.regions),
            overflow=description.overflow if description.overflow is not None else parent.overflow,
            only_on=description.only_on if description.only_on is not None else parent.only_on,
            transforms=transforms,
            odd=description.odd or parent.odd,
            even=description.even or parent.even,
        )
        self._sources[description.name] = self._sources[parent.name]
        self._templates[description.name] = self._with_checked_variants(resolved)
        logger.debug(f"Registered partial template {description.name!r} from {parent.name!r}")
        return self

    def add_font(self, path: Union[str, Path], family: str, style: str = "regular") -> "StampContext":
        """Queue a TrueType font for embedding at assembly start."""
        self._check_mutable()
        font = FontSpec(path=Path(path), family=family, style=style)
        if not font.path.exists():
            raise FileNotFoundError(f"Font file not found: {font.path}")
        self._pending_fonts = [f for f in self._pending_fonts if f.key != font.key]
        self._pending_fonts.append(font)
        return self

    def _with_checked_variants(self, description: TemplateDescription) -> TemplateDescription:
        variants = {}
        for parity in Parity:
            variant = description.variant(parity)
            if variant is not None and variant.source is not None:
                variants[parity.value] = dataclasses.replace(variant, source=_as_source(variant.source))
        return dataclasses.replace(description, **variants) if variants else description

    # ─────────────────────────────────────────────────────────────────────────
    # Use phase
    # ─────────────────────────────────────────────────────────────────────────

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    @property
    def template_names(self) -> Tuple[str, ...]:
        return tuple(self._templates)

    def lookup(self, name: str) -> Optional[TemplateDescription]:
        """Template description by name, or None."""
        return self._templates.get(name)

    def template(self, name: str) -> TemplateDescription:
        """
        Template description by name.

        Raises:
            UnknownTemplateError: If no such template is registered
        """
        description = self._templates.get(name)
        if description is None:
            raise UnknownTemplateError(f"No template {name!r} for page")
        return description

    def regions_for_parity(self, name: str, parity: Parity) -> Tuple[RegionSpec, ...]:
        """Regions of a template for pages of the given parity."""
        description = self.template(name)
        variant = description.variant(parity)
        if variant is None:
            return description.regions
        return merge_regions(description.regions, variant.regions)

    def source_for_parity(self, name: str, parity: Parity) -> TemplateSource:
        description = self.template(name)
        variant = description.variant(parity)
        if variant is not None and variant.source is not None:
            return variant.source
        return self._sources[name]

    def source_page_for_parity(self, name: str, parity: Parity) -> fitz.Document:
        """Open a new handle on the template PDF for the given parity."""
        return open_source(self.source_for_parity(name, parity))

    def pending_font_embeddings(self) -> Tuple[FontSpec, ...]:
        return tuple(self._pending_fonts)

    def font_name(self, family: str, style: str = "regular") -> str:
        """
        reportlab font name for a (family, style) pair.

        Raises:
            UnknownFontError: If the font is neither embedded nor standard
        """
        key = (family.lower(), style)
        try:
            return self._fonts[key]
        except KeyError:
            pending = any(f.key == key for f in self._pending_fonts)
            hint = " (registered but not embedded yet)" if pending else ""
            raise UnknownFontError(f"Unknown font {family!r} style {style!r}{hint}") from None

    # ─────────────────────────────────────────────────────────────────────────
    # Views
    # ─────────────────────────────────────────────────────────────────────────

    def freeze(self) -> "StampContext":
        """Read-only copy for the use phase."""
        view = copy.copy(self)
        view._templates = dict(self._templates)
        view._sources = dict(self._sources)
        view._fonts = dict(self._fonts)
        view._pending_fonts = list(self._pending_fonts)
        view._frozen = True
        return view

    def with_font(self, key: Tuple[str, str], font_name: str) -> "StampContext":
        """Frozen copy in which ``key`` resolves to ``font_name`` and is no longer pending."""
        view = self.freeze()
        view._fonts[key] = font_name
        view._pending_fonts = [f for f in view._pending_fonts if f.key != key]
        return view

    def add_standard_fonts(self) -> "StampContext":
        self._check_mutable()
        self._fonts.update(STANDARD_FONTS)
        return self


def embed_font(font: FontSpec, context: StampContext) -> StampContext:
    """
    Embed one font and return the augmented, frozen context.

    Embedding an already embedded (family, style) pair is a no-op.
    """
    if font.key in context._fonts and font not in context.pending_font_embeddings():
        return context.freeze()
    name = register_ttf(font)
    logger.info(f"Embedded font {font.family} ({font.style})")
    return context.with_font(font.key, name)


def base_context() -> StampContext:
    """New context that knows the Helvetica, Times and Courier families."""
    return StampContext().add_standard_fonts()
