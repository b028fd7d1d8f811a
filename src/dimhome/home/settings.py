"""Typed view over the ``home`` config section."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .banner import DEFAULT_IMAGE_TYPES
from .catalog import catalog_endpoint

logger = logging.getLogger(__name__)

SECTION = "home"

DEFAULT_DESCRIPTION = (
    "Set ninety-seven years after a nuclear war has destroyed civilization, "
    "when a spaceship housing humanity's lone survivors sends one hundred "
    "juvenile delinquents back to Earth, in hopes of possibly re-populating "
    "the planet."
)


@dataclass(frozen=True)
class HomeSettings:
    server_url: str = "http://localhost:8000"
    static_url: str = ""
    library_id: int = 1
    banner_path: str = "/banner1.jpg"
    request_timeout: float = 10.0
    accepted_banner_types: Tuple[str, ...] = DEFAULT_IMAGE_TYPES
    banner_title: str = "THE 100"
    banner_description: str = DEFAULT_DESCRIPTION
    resume_progress: int = 0
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def catalog_endpoint(self) -> str:
        return catalog_endpoint(self.server_url, self.library_id)

    @property
    def banner_base_url(self) -> str:
        return self.static_url or self.server_url

    def to_config(self) -> Dict[str, Any]:
        """Return the JSON-storable form read back by ``from_config``."""
        values: Dict[str, Any] = {
            "server_url": self.server_url,
            "library_id": self.library_id,
            "banner_path": self.banner_path,
            "request_timeout": self.request_timeout,
            "accepted_banner_types": list(self.accepted_banner_types),
            "banner_title": self.banner_title,
            "banner_description": self.banner_description,
            "resume_progress": self.resume_progress,
        }
        if self.static_url:
            values["static_url"] = self.static_url
        values.update(self.extra)
        return values

    @classmethod
    def from_config(cls, values: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> "HomeSettings":
        """Build settings from a config mapping; unknown keys land in ``extra``."""
        env = os.environ if environ is None else environ
        defaults = cls()
        known = {
            "server_url", "static_url", "library_id", "banner_path", "request_timeout",
            "accepted_banner_types", "banner_title", "banner_description", "resume_progress",
        }

        server_url = str(env.get("DIMHOME_SERVER_URL") or values.get("server_url") or defaults.server_url)
        static_url = str(env.get("DIMHOME_STATIC_URL") or values.get("static_url") or "")

        try:
            library_id = int(values.get("library_id", defaults.library_id))
        except (TypeError, ValueError):
            logger.warning("Invalid library_id %r, using %d", values.get("library_id"), defaults.library_id)
            library_id = defaults.library_id

        try:
            timeout = float(values.get("request_timeout", defaults.request_timeout))
        except (TypeError, ValueError):
            logger.warning("Invalid request_timeout %r", values.get("request_timeout"))
            timeout = defaults.request_timeout

        types = values.get("accepted_banner_types")
        if isinstance(types, (list, tuple)) and types:
            accepted = tuple(str(t).lower() for t in types)
        else:
            accepted = defaults.accepted_banner_types

        try:
            progress = int(values.get("resume_progress", defaults.resume_progress))
        except (TypeError, ValueError):
            progress = defaults.resume_progress
        progress = max(0, min(100, progress))

        return cls(
            server_url=server_url,
            static_url=static_url,
            library_id=library_id,
            banner_path=str(values.get("banner_path") or defaults.banner_path),
            request_timeout=timeout,
            accepted_banner_types=accepted,
            banner_title=str(values.get("banner_title") or defaults.banner_title),
            banner_description=str(values.get("banner_description") or defaults.banner_description),
            resume_progress=progress,
            extra={key: value for key, value in values.items() if key not in known},
        )


__all__ = ["HomeSettings", "SECTION"]
