"""
Module: dispatch

Purpose:
    Open tag -> handler dispatch. Region fillers and page transforms are
    both looked up by tag, and new tags can be registered without touching
    the code that dispatches.

Key Classes:
    - HandlerRegistry: Mapping of tags to handlers with a register decorator
    - UnknownHandlerError: Raised when dispatching an unregistered tag

Used By:
    - stamping.regions: Region filler dispatch
    - stamping.transforms: Page transform dispatch
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, Iterable, Iterator, TypeVar

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Callable)


class UnknownHandlerError(LookupError):
    """Raised when no handler is registered for a tag."""

    def __init__(self, kind: str, tag: str, known: Iterable[str] = ()):
        self.known = tuple(known)
        message = f"No {kind} registered for {tag!r}"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)
        self.kind = kind
        self.tag = tag


class HandlerRegistry(Generic[H]):
    """
    Tag -> handler registry.

    Example:
        >>> transforms = HandlerRegistry("page transform")
        >>> @transforms.register("noop")
        ... def _noop(page, transform):
        ...     return page
        >>> "noop" in transforms
        True
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._handlers: Dict[str, H] = {}

    def register(self, tag: str) -> Callable[[H], H]:
        """Decorator registering a handler under ``tag``. Re-registering replaces."""

        def decorator(handler: H) -> H:
            if tag in self._handlers:
                logger.debug(f"Replacing {self.kind} for {tag!r}")
            self._handlers[tag] = handler
            return handler

        return decorator

    def unregister(self, tag: str) -> None:
        self._handlers.pop(tag, None)

    def get(self, tag: str) -> H:
        try:
            return self._handlers[tag]
        except KeyError:
            raise UnknownHandlerError(self.kind, tag, self) from None

    def __contains__(self, tag: object) -> bool:
        return tag in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._handlers))
