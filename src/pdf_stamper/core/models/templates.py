"""
Module: templates

Purpose:
    Template descriptions: where content goes on a page. A template is a
    physical source page plus named placement regions, an optional overflow
    target, an optional page restriction and per-parity page transforms.

Key Classes:
    - Parity: Odd/even page position
    - RegionSpec: One named placement region
    - PageRestriction: Positions a template may occupy (+ filler)
    - PageTransform / PageTransforms: Post-fill page mutations
    - LayoutVariant: Per-parity source/region overrides
    - TemplateDescription: Complete template description

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - context.registry: Template storage and lookup
    - stamping.composer: Restriction, overflow and transform resolution
    - stamping.regions: Region ordering and merging
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, Union

# A template source is either a path to a PDF file or the PDF bytes themselves
TemplateSource = Union[Path, bytes]

_REGION_BASE_KEYS = ("name", "type", "x", "y", "width", "height", "priority")


class Parity(str, Enum):
    """Parity of a 1-based page position."""

    ODD = "odd"
    EVEN = "even"

    @classmethod
    def of(cls, position: int) -> "Parity":
        """
        Parity of a 1-based page position.

        Example:
            >>> Parity.of(1)
            <Parity.ODD: 'odd'>
        """
        return cls.ODD if position % 2 == 1 else cls.EVEN


@dataclass(frozen=True)
class RegionSpec:
    """
    Named placement region on a template page (immutable).

    Coordinates are PDF points with the origin at the lower-left corner of
    the page; (x, y) is the lower-left corner of the region.

    Attributes:
        name: Region name, unique within its template
        type: Filler tag used to dispatch rendering ("text", "image", ...)
        x: Left edge in points
        y: Bottom edge in points
        width: Width in points
        height: Height in points
        priority: Draw order; lower values are drawn first (underneath)
        options: Type-specific static fields (font, size, aspect, ...)

    Example:
        >>> spec = RegionSpec.from_dict({"name": "body", "type": "text",
        ...     "x": 50, "y": 50, "width": 400, "height": 600, "size": 11})
        >>> spec.options["size"]
        11
    """

    name: str
    type: str
    x: float
    y: float
    width: float
    height: float
    priority: int = 0
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate region geometry on construction."""
        if not self.name:
            raise ValueError("Region name must not be empty")
        if self.width <= 0:
            raise ValueError(f"Region {self.name!r} width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"Region {self.name!r} height must be positive: {self.height}")
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def as_record(self) -> dict[str, Any]:
        """Flatten into a single mapping of base fields and options."""
        record = dict(self.options)
        record.update(
            name=self.name,
            type=self.type,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            priority=self.priority,
        )
        return record

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegionSpec":
        options = {k: v for k, v in data.items() if k not in _REGION_BASE_KEYS}
        return cls(
            name=data["name"],
            type=data["type"],
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            priority=data.get("priority", 0),
            options=options,
        )


@dataclass(frozen=True)
class PageRestriction:
    """
    Restricts the positions a template may be placed on.

    Exactly one of ``parity`` or ``predicate`` must be given. When a page
    would land on a disallowed position, ``filler`` names the template used
    for substitute pages; with no filler the page is dropped.

    Attributes:
        parity: Only allow odd or even positions
        predicate: Only allow positions for which predicate(position) is true
        filler: Template name for filler pages, or None
    """

    parity: Optional[Parity] = None
    predicate: Optional[Callable[[int], bool]] = None
    filler: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.parity is None) == (self.predicate is None):
            raise ValueError("PageRestriction needs exactly one of parity or predicate")
        if self.parity is not None and not isinstance(self.parity, Parity):
            object.__setattr__(self, "parity", Parity(self.parity))

    def allows(self, position: int) -> bool:
        """Check whether a 1-based position satisfies this restriction."""
        if self.parity is not None:
            return Parity.of(position) is self.parity
        return bool(self.predicate(position))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageRestriction":
        pages = data["pages"]
        if callable(pages):
            return cls(predicate=pages, filler=data.get("filler"))
        return cls(parity=Parity(pages), filler=data.get("filler"))


@dataclass(frozen=True)
class PageTransform:
    """
    A page mutation applied after regions are filled.

    Example:
        >>> PageTransform.from_value(["rotate", 90])
        PageTransform(kind='rotate', args=(90,))
    """

    kind: str
    args: Tuple[Any, ...] = ()

    @classmethod
    def from_value(cls, value: Any) -> "PageTransform":
        """Accept a PageTransform, a [kind, *args] sequence, or a mapping."""
        if isinstance(value, PageTransform):
            return value
        if isinstance(value, Mapping):
            return cls(kind=value["kind"], args=tuple(value.get("args", ())))
        kind, *args = value
        return cls(kind=kind, args=tuple(args))


@dataclass(frozen=True)
class PageTransforms:
    """Ordered transforms per parity of the resulting page position."""

    odd: Tuple[PageTransform, ...] = ()
    even: Tuple[PageTransform, ...] = ()

    def for_parity(self, parity: Parity) -> Tuple[PageTransform, ...]:
        return self.odd if parity is Parity.ODD else self.even

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageTransforms":
        return cls(
            odd=tuple(PageTransform.from_value(t) for t in data.get("odd", ())),
            even=tuple(PageTransform.from_value(t) for t in data.get("even", ())),
        )


@dataclass(frozen=True)
class LayoutVariant:
    """
    Per-parity layout override (left/right pages).

    Attributes:
        source: Template PDF for this parity, or None to use the base source
        regions: Regions replacing base regions of the same name, or added
    """

    source: Optional[TemplateSource] = None
    regions: Tuple[RegionSpec, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutVariant":
        source = data.get("source")
        return cls(
            source=Path(source) if isinstance(source, str) else source,
            regions=tuple(RegionSpec.from_dict(r) for r in data.get("regions", ())),
        )


@dataclass(frozen=True)
class TemplateDescription:
    """
    Reusable page layout description (immutable).

    Attributes:
        name: Unique template key
        regions: Ordered region specs
        overflow: Template receiving overflowing content; None truncates
        only_on: Optional page restriction
        transforms: Per-parity page transforms
        odd: Optional override for odd positions
        even: Optional override for even positions
        inherit: Parent template name (partial templates only)

    Example:
        >>> desc = TemplateDescription.from_dict({
        ...     "name": "chapter",
        ...     "overflow": "chapter-cont",
        ...     "regions": [{"name": "body", "type": "text",
        ...                  "x": 50, "y": 50, "width": 495, "height": 700}],
        ... })
        >>> desc.region_names
        ('body',)
    """

    name: str
    regions: Tuple[RegionSpec, ...] = ()
    overflow: Optional[str] = None
    only_on: Optional[PageRestriction] = None
    transforms: PageTransforms = field(default_factory=PageTransforms)
    odd: Optional[LayoutVariant] = None
    even: Optional[LayoutVariant] = None
    inherit: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Template name must not be empty")
        object.__setattr__(self, "regions", tuple(self.regions))
        _check_unique_names(self.name, self.regions)
        for variant in (self.odd, self.even):
            if variant is not None:
                _check_unique_names(self.name, variant.regions)

    @property
    def region_names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.regions)

    def variant(self, parity: Parity) -> Optional[LayoutVariant]:
        return self.odd if parity is Parity.ODD else self.even

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateDescription":
        only_on = data.get("only_on")
        odd = data.get("odd")
        even = data.get("even")
        return cls(
            name=data["name"],
            regions=tuple(RegionSpec.from_dict(r) for r in data.get("regions", ())),
            overflow=data.get("overflow"),
            only_on=PageRestriction.from_dict(only_on) if only_on else None,
            transforms=PageTransforms.from_dict(data.get("transform_pages", {})),
            odd=LayoutVariant.from_dict(odd) if odd else None,
            even=LayoutVariant.from_dict(even) if even else None,
            inherit=data.get("inherit"),
        )


def merge_regions(
    base: Tuple[RegionSpec, ...],
    overrides: Tuple[RegionSpec, ...],
) -> Tuple[RegionSpec, ...]:
    """
    Merge region overrides into a base region tuple by name.

    Overrides replace the base region of the same name in place; new names
    are appended in override order.
    """
    by_name = {r.name: r for r in overrides}
    merged = [by_name.pop(r.name, r) for r in base]
    merged.extend(r for r in overrides if r.name in by_name)
    return tuple(merged)


def _check_unique_names(template: str, regions: Tuple[RegionSpec, ...]) -> None:
    seen: set[str] = set()
    for region in regions:
        if region.name in seen:
            raise ValueError(f"Duplicate region {region.name!r} in template {template!r}")
        seen.add(region.name)
