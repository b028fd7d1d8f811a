"""Per-user ``config.json`` holding one JSON object per settings section."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)


class ConfigStore:
    """Read named sections from a JSON file and seed missing ones."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._damaged = False
        self._sections = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self._path, exc)
            self._damaged = True
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring config %s: top level is not an object", self._path)
            self._damaged = True
            return {}
        return {key.lower(): value for key, value in raw.items() if isinstance(value, dict)}

    def section(self, name: str) -> Dict[str, Any]:
        """Return a copy of section ``name`` (empty when absent)."""
        return dict(self._sections.get(name.lower(), {}))

    def seed_section(self, name: str, defaults: Mapping[str, Any]) -> bool:
        """Write ``defaults`` for ``name`` if the file has no such section yet.

        Returns ``True`` when the file was written. An existing section is
        never touched, even if it lacks some keys, and a damaged file is left
        alone for the user to fix.
        """
        name = name.lower()
        if self._damaged or name in self._sections:
            return False
        self._sections[name] = dict(defaults)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8") as handle:
                json.dump(self._sections, handle, indent=2, sort_keys=True)
        except OSError as exc:
            logger.warning("Could not write default config to %s: %s", self._path, exc)
            return False
        logger.info("Wrote default '%s' settings to %s", name, self._path)
        return True
