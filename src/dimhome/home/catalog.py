"""Catalog fetching for the recommendation grid."""
from __future__ import annotations

import logging
from typing import Any, List, Set

import httpx

from .errors import CatalogUnavailable
from .models import CardViewModel, MediaId

logger = logging.getLogger(__name__)


def catalog_endpoint(server_url: str, library_id: MediaId) -> str:
    """Return the media listing URL for ``library_id`` on ``server_url``."""
    return f"{server_url.rstrip('/')}/api/v1/library/{library_id}/media"


def parse_catalog(payload: Any, endpoint: str = "<payload>") -> List[CardViewModel]:
    """Map a decoded catalog response onto card view models.

    The whole payload is validated before anything is returned, so callers
    either get every card or a ``CatalogUnavailable``.
    """
    if not isinstance(payload, list):
        raise CatalogUnavailable(endpoint, f"expected a JSON array, got {type(payload).__name__}")

    cards: List[CardViewModel] = []
    seen: Set[MediaId] = set()
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise CatalogUnavailable(endpoint, f"item {position} is not an object")
        media_id = item.get("id")
        # bool is an int subclass but never a valid id
        if isinstance(media_id, bool) or not isinstance(media_id, (str, int)):
            raise CatalogUnavailable(endpoint, f"item {position} has no usable id")
        poster_path = item.get("poster_path")
        if poster_path is not None and not isinstance(poster_path, str):
            raise CatalogUnavailable(endpoint, f"item {position} has a non-string poster_path")
        if media_id in seen:
            logger.warning("Duplicate media id %r in catalog %s", media_id, endpoint)
        seen.add(media_id)
        cards.append(CardViewModel(id=media_id, image_path=poster_path))
    return cards


class CatalogFetcher:
    """Request the media catalog and turn it into ``CardViewModel`` records."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch_catalog(self, endpoint: str) -> List[CardViewModel]:
        try:
            response = await self._client.get(endpoint, headers={"Accept": "application/json"})
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise CatalogUnavailable(endpoint, f"request failed: {exc}") from exc

        if response.is_error:
            raise CatalogUnavailable(endpoint, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogUnavailable(endpoint, f"malformed JSON: {exc}") from exc

        cards = parse_catalog(payload, endpoint)
        logger.debug("Fetched %d catalog items from %s", len(cards), endpoint)
        return cards


__all__ = ["CatalogFetcher", "catalog_endpoint", "parse_catalog"]
