"""Failures raised by the home screen loaders."""
from __future__ import annotations

from typing import Optional


class HomeViewError(Exception):
    """Base class for recoverable home screen failures."""


class CatalogUnavailable(HomeViewError):
    """The catalog request failed or returned something other than a media list."""

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Catalog {endpoint} unavailable: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class BannerError(HomeViewError):
    """Common base for banner failures."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Banner {path}: {reason}")
        self.path = path
        self.reason = reason


class BannerUnavailable(BannerError):
    """The banner request failed at the transport or HTTP level."""


class InvalidBannerFormat(BannerError):
    """The banner response is not a decodable image."""

    def __init__(self, path: str, content_type: Optional[str], reason: Optional[str] = None) -> None:
        super().__init__(path, reason or f"unexpected content type {content_type!r}")
        self.content_type = content_type


class BannerReleased(HomeViewError):
    """A released banner handle was used."""


__all__ = [
    "BannerError",
    "BannerReleased",
    "BannerUnavailable",
    "CatalogUnavailable",
    "HomeViewError",
    "InvalidBannerFormat",
]
