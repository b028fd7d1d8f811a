"""Load outcome log for the home screen.

When ``DIMHOME_TELEMETRY`` names a file, every finished catalog or banner
load appends one JSON line describing how it ended, how long it took and,
for banners, which mount generation it belonged to.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_VAR = "DIMHOME_TELEMETRY"


class LoadOutcome(enum.Enum):
    LOADED = "loaded"
    FAILED = "failed"
    # result arrived after destroy() or from a superseded mount
    DISCARDED = "discarded"
    CRASHED = "crashed"


@dataclass(frozen=True)
class LoadRecord:
    loader: str
    outcome: LoadOutcome
    duration: float
    generation: Optional[int] = None
    count: Optional[int] = None
    reason: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "loader": self.loader,
            "outcome": self.outcome.value,
            "duration": round(self.duration, 6),
        }
        if self.generation is not None:
            payload["generation"] = self.generation
        if self.count is not None:
            payload["count"] = self.count
        if self.reason:
            payload["reason"] = self.reason
        return payload


class LoadLog:
    """Append ``LoadRecord`` entries to a JSON lines file."""

    def __init__(self, target: Path) -> None:
        self._target = target
        target.parent.mkdir(parents=True, exist_ok=True)

    @property
    def target(self) -> Path:
        return self._target

    def write(self, record: LoadRecord) -> None:
        try:
            with self._target.open("a", encoding="utf-8", newline="\n") as handle:
                json.dump(record.to_json(), handle, ensure_ascii=False)
                handle.write("\n")
        except OSError as exc:
            logger.debug("Dropping load record for %s: %s", record.loader, exc)


def load_log_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[LoadLog]:
    """Return a ``LoadLog`` for ``DIMHOME_TELEMETRY`` or ``None`` when unset."""
    env = os.environ if environ is None else environ
    path = env.get(ENV_VAR)
    if not path:
        return None
    try:
        return LoadLog(Path(path).expanduser())
    except OSError as exc:
        logger.warning("Load log %s unavailable: %s", path, exc)
        return None


__all__ = ["ENV_VAR", "LoadLog", "LoadOutcome", "LoadRecord", "load_log_from_env"]
