"""Banner image loading and the scoped handle it produces."""
from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Iterable, Optional, Tuple

import httpx
from PySide6.QtGui import QImage, QPixmap

from .errors import BannerReleased, BannerUnavailable, InvalidBannerFormat

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TYPES: Tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/bmp",
)

_tokens = itertools.count(1)


def media_type(content_type: Optional[str]) -> Optional[str]:
    """Return the bare, lower-cased media type of a ``Content-Type`` header."""
    if not content_type:
        return None
    value = content_type.split(";", 1)[0].strip().lower()
    return value or None


class BannerHandle:
    """Decoded banner image that stays valid until ``release()`` is called.

    Can be used as a context manager, in which case it is released on exit.
    """

    def __init__(self, image: QImage, source: str, content_type: Optional[str] = None) -> None:
        self._image: Optional[QImage] = image
        self._token = next(_tokens)
        self.source = source
        self.content_type = content_type

    @property
    def token(self) -> int:
        return self._token

    @property
    def released(self) -> bool:
        return self._image is None

    @property
    def image(self) -> QImage:
        if self._image is None:
            raise BannerReleased(f"Banner handle {self._token} ({self.source}) was released")
        return self._image

    def to_pixmap(self) -> QPixmap:
        """Return a pixmap copy for display; needs a ``QGuiApplication``."""
        return QPixmap.fromImage(self.image)

    def release(self) -> None:
        if self._image is not None:
            logger.debug("Releasing banner handle %d (%s)", self._token, self.source)
            self._image = None

    def __enter__(self) -> "BannerHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"BannerHandle(token={self._token}, source={self.source!r}, {state})"


class BannerLoader:
    """Fetch one banner image, check it is an image and decode it."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        static_url: str = "",
        accepted_types: Iterable[str] = DEFAULT_IMAGE_TYPES,
    ) -> None:
        self._client = client
        self._static_url = static_url
        self._accepted = frozenset(t.strip().lower() for t in accepted_types)

    def url_for(self, path: str) -> str:
        if not self._static_url:
            return path
        return str(httpx.URL(self._static_url).join(path))

    def accepts(self, content_type: Optional[str]) -> bool:
        return media_type(content_type) in self._accepted

    async def fetch_banner(self, path: str) -> BannerHandle:
        try:
            response = await self._client.get(self.url_for(path))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise BannerUnavailable(path, f"request failed: {exc}") from exc

        if response.is_error:
            raise BannerUnavailable(path, f"HTTP {response.status_code}")

        content_type = response.headers.get("content-type")
        if not self.accepts(content_type):
            raise InvalidBannerFormat(path, content_type)

        image = await asyncio.to_thread(QImage.fromData, response.content)
        if image.isNull():
            raise InvalidBannerFormat(path, content_type, "payload could not be decoded")

        handle = BannerHandle(image, source=path, content_type=media_type(content_type))
        logger.debug("Decoded banner %s as %dx%d", path, image.width(), image.height())
        return handle


__all__ = ["BannerHandle", "BannerLoader", "DEFAULT_IMAGE_TYPES", "media_type"]
