from __future__ import annotations

import asyncio
import sys
from typing import Any, Dict, List, Optional

import httpx
from PySide6.QtWidgets import QApplication, QMainWindow

from ..home.banner import BannerLoader
from ..home.catalog import CatalogFetcher
from ..home.coordinator import ViewStateCoordinator
from ..home.models import ViewState
from ..home.settings import SECTION, HomeSettings
from ..home.view import HomeView
from .events import STATE_CHANGED
from .services import CoreServices
from .telemetry import load_log_from_env

# Qt events are pumped from the asyncio loop at this interval.
EVENT_PUMP_INTERVAL = 0.01


def describe_state(state: ViewState) -> str:
    banner = "banner" if state.banner is not None else "no banner"
    return f"{len(state.cards)} recommended, {banner}"


class HomeWindow(QMainWindow):
    def __init__(self, services: CoreServices, coordinator: ViewStateCoordinator, settings: HomeSettings) -> None:
        super().__init__()
        self._services = services
        self._coordinator = coordinator
        self._log = services.get_logger("HomeWindow")
        self.setWindowTitle("Dim")
        self.resize(1200, 760)
        self.home_view = HomeView(coordinator, settings)
        self.setCentralWidget(self.home_view)
        self.statusBar().showMessage("Loading library...")
        services.event_bus.subscribe(STATE_CHANGED, self._on_state_changed)

    def _on_state_changed(self, event_name: str, data: Dict[str, Any]) -> None:
        state = data.get("state")
        if not isinstance(state, ViewState):
            return
        summary = describe_state(state)
        self._log.info("Home state: %s", summary)
        self.statusBar().showMessage(summary)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._services.event_bus.unsubscribe(STATE_CHANGED, self._on_state_changed)
        self.home_view.detach()
        self._coordinator.destroy()
        super().closeEvent(event)


async def run_home(app: QApplication, services: CoreServices, settings: HomeSettings) -> int:
    log = services.get_logger("App")
    log.info("Loading library %s from %s", settings.library_id, settings.server_url)
    async with httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True) as client:
        coordinator = ViewStateCoordinator(
            CatalogFetcher(client),
            BannerLoader(client, settings.banner_base_url, settings.accepted_banner_types),
            catalog_endpoint=settings.catalog_endpoint,
            banner_path=settings.banner_path,
            event_bus=services.event_bus,
            load_log=load_log_from_env(),
        )
        window = HomeWindow(services, coordinator, settings)
        window.show()
        while window.isVisible():
            app.processEvents()
            await asyncio.sleep(EVENT_PUMP_INTERVAL)
        coordinator.destroy()
        await coordinator.wait_settled()
    log.info("Home window closed")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    app = QApplication(argv if argv is not None else sys.argv)
    services = CoreServices()
    services.seed_config(SECTION, HomeSettings().to_config())
    settings = HomeSettings.from_config(services.get_config(SECTION))
    return asyncio.run(run_home(app, services, settings))


if __name__ == "__main__":
    raise SystemExit(main())
