"""View-model records rendered by the home screen."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

if TYPE_CHECKING:  # pragma: no cover
    from .banner import BannerHandle

MediaId = Union[str, int]


@dataclass(frozen=True)
class CardViewModel:
    """Minimal data needed to draw one tile in the recommendation grid."""

    id: MediaId
    image_path: Optional[str]


@dataclass(frozen=True)
class ViewState:
    """Combined render state.

    ``cards`` is empty or the full result of the latest successful catalog
    fetch. ``banner`` is ``None`` or the handle from the latest successful
    banner load.
    """

    cards: Tuple[CardViewModel, ...] = ()
    banner: Optional["BannerHandle"] = None


class LoadPhase(enum.Enum):
    """Progress of a single loader as tracked by the coordinator."""

    PENDING = "pending"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


__all__ = ["CardViewModel", "LoadPhase", "MediaId", "ViewState"]
