from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import ConfigStore
from .events import EventBus


class CoreServices:
    """Shared services handed to the home window and its collaborators."""

    def __init__(
        self,
        app_name: str = "DimHome",
        data_dir: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.app_name = app_name
        self.data_dir = data_dir or self._resolve_data_dir(app_name)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logger or self._configure_logger(app_name)
        self._config_store = ConfigStore(self.data_dir / "config.json")
        self.event_bus = EventBus()

    @staticmethod
    def _resolve_data_dir(app_name: str) -> Path:
        if os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
        else:
            base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
        return base / app_name.lower()

    @staticmethod
    def _configure_logger(app_name: str) -> logging.Logger:
        logger = logging.getLogger(app_name)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        # Module loggers live under ``dimhome``; route them through the same handler.
        package_logger = logging.getLogger("dimhome")
        if not package_logger.handlers:
            for handler in logger.handlers:
                package_logger.addHandler(handler)
            package_logger.setLevel(logger.level)
        return logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def get_logger(self, name: str) -> logging.Logger:
        return self._logger.getChild(name)

    def get_config(self, section: str) -> Dict[str, Any]:
        return self._config_store.section(section)

    def seed_config(self, section: str, defaults: Mapping[str, Any]) -> bool:
        """Persist ``defaults`` so a first run leaves an editable config file."""
        return self._config_store.seed_section(section, defaults)
