"""
Module: pages

Purpose:
    Per-page input data: which template a logical page uses and what goes
    into each of its regions.

Key Classes:
    - PageData: One logical page of input

Key Types:
    - LocationEntry: Data for one region, always carrying "contents"
    - Overflow: Region name -> continuation entry for content that did not fit

Dependencies:
    - dataclasses (std)

Used By:
    - stamping.composer: Page composition
    - stamping.regions: Region filling
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

LocationEntry = Mapping[str, Any]
Overflow = Dict[str, Dict[str, Any]]


@dataclass(frozen=True)
class PageData:
    """
    One logical page of input (immutable).

    Attributes:
        template: Name of the template to place this page on
        locations: Region name -> entry with a "contents" key
        filler_locations: Locations used when filler pages are inserted

    Example:
        >>> page = PageData("letter", {"body": {"contents": {"text": "Hi"}}})
        >>> page.location("body")["contents"]["text"]
        'Hi'
        >>> page.location("footer") is None
        True
    """

    template: str
    locations: Mapping[str, LocationEntry] = field(default_factory=dict)
    filler_locations: Mapping[str, LocationEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "locations", MappingProxyType(dict(self.locations)))
        object.__setattr__(
            self, "filler_locations", MappingProxyType(dict(self.filler_locations))
        )

    def location(self, region_name: str) -> LocationEntry | None:
        """Entry for a region, or None when this page has nothing for it."""
        return self.locations.get(region_name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageData":
        return cls(
            template=data["template"],
            locations=data.get("locations", {}),
            filler_locations=data.get("filler_locations", {}),
        )
