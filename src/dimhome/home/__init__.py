"""Home screen: catalog and banner loading merged into one render state."""
from __future__ import annotations

from .banner import BannerHandle, BannerLoader
from .catalog import CatalogFetcher, catalog_endpoint
from .coordinator import ViewStateCoordinator
from .errors import (
    BannerReleased,
    BannerUnavailable,
    CatalogUnavailable,
    HomeViewError,
    InvalidBannerFormat,
)
from .models import CardViewModel, LoadPhase, ViewState

__all__ = [
    "BannerHandle",
    "BannerLoader",
    "BannerReleased",
    "BannerUnavailable",
    "CardViewModel",
    "CatalogFetcher",
    "CatalogUnavailable",
    "HomeViewError",
    "InvalidBannerFormat",
    "LoadPhase",
    "ViewState",
    "ViewStateCoordinator",
    "catalog_endpoint",
]
