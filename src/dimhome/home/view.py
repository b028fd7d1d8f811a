"""Home screen widget: continue-watching banner plus recommended cards."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QPixmap
from PySide6.QtWidgets import (
    QGridLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from .models import CardViewModel, ViewState
from .settings import HomeSettings

if TYPE_CHECKING:  # pragma: no cover
    from .banner import BannerHandle
    from .coordinator import ViewStateCoordinator

logger = logging.getLogger(__name__)

CARD_SIZE = QSize(150, 225)
BANNER_HEIGHT = 320
GRID_COLUMNS = 5
PLACEHOLDER_COLOR = QColor(239, 68, 68)


def card_placeholder(size: QSize = CARD_SIZE) -> QPixmap:
    pixmap = QPixmap(size)
    pixmap.fill(PLACEHOLDER_COLOR)
    return pixmap


class HomeView(QWidget):
    """Read-only renderer for a ``ViewStateCoordinator``.

    The view subscribes to state changes and mounts the coordinator (which
    starts the banner load) the first time it is shown.
    """

    def __init__(
        self,
        coordinator: "ViewStateCoordinator",
        settings: Optional[HomeSettings] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._coordinator = coordinator
        self._settings = settings or HomeSettings()
        self._mounted = False
        self._card_labels: List[QLabel] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        banner = QWidget()
        banner.setObjectName("home_banner")
        banner_layout = QVBoxLayout(banner)
        self.banner_label = QLabel()
        self.banner_label.setObjectName("home_banner_image")
        self.banner_label.setMinimumHeight(BANNER_HEIGHT)
        self.banner_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        banner_layout.addWidget(self.banner_label)

        self.title_label = QLabel(self._settings.banner_title)
        self.title_label.setObjectName("home_banner_title")
        banner_layout.addWidget(self.title_label)
        resume = QLabel("PICK UP WHERE YOU LEFT OFF")
        resume.setObjectName("home_banner_resume")
        banner_layout.addWidget(resume)
        self.description_label = QLabel(self._settings.banner_description)
        self.description_label.setWordWrap(True)
        banner_layout.addWidget(self.description_label)
        self.play_button = QPushButton("PLAY")
        banner_layout.addWidget(self.play_button, alignment=Qt.AlignmentFlag.AlignLeft)
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(self._settings.resume_progress)
        self.progress_bar.setTextVisible(False)
        banner_layout.addWidget(self.progress_bar)
        layout.addWidget(banner)

        heading = QLabel("RECOMMENDED")
        heading.setObjectName("home_recommended_heading")
        layout.addWidget(heading)
        grid_host = QWidget()
        self.cards_layout = QGridLayout(grid_host)
        self.cards_layout.setSpacing(8)
        layout.addWidget(grid_host)
        layout.addStretch(1)

        coordinator.subscribe(self.render)
        self.render(coordinator.current_state())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, state: ViewState) -> None:
        self._render_banner(state.banner)
        self._render_cards(state.cards)

    def _render_banner(self, banner: Optional["BannerHandle"]) -> None:
        if banner is None or banner.released:
            self.banner_label.clear()
            return
        pixmap = banner.to_pixmap()
        self.banner_label.setPixmap(
            pixmap.scaledToHeight(BANNER_HEIGHT, Qt.TransformationMode.SmoothTransformation)
        )

    def _render_cards(self, cards: Sequence[CardViewModel]) -> None:
        for label in self._card_labels:
            self.cards_layout.removeWidget(label)
            label.setParent(None)  # type: ignore[call-overload]
        self._card_labels = []
        # Posters are not fetched here; tiles show a placeholder and the
        # poster path as tooltip.
        placeholder = card_placeholder()
        for index, card in enumerate(cards):
            label = QLabel()
            label.setObjectName("home_card")
            label.setFixedSize(CARD_SIZE)
            label.setPixmap(placeholder)
            label.setToolTip(card.image_path or "")
            label.setProperty("card_id", str(card.id))
            self.cards_layout.addWidget(label, index // GRID_COLUMNS, index % GRID_COLUMNS)
            self._card_labels.append(label)

    @property
    def card_labels(self) -> List[QLabel]:
        return list(self._card_labels)

    @property
    def has_banner(self) -> bool:
        pixmap = self.banner_label.pixmap()
        return pixmap is not None and not pixmap.isNull()

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if not self._mounted:
            self._mounted = True
            logger.debug("Home view shown; mounting coordinator")
            self._coordinator.mount()

    def detach(self) -> None:
        self._coordinator.unsubscribe(self.render)


__all__ = ["HomeView", "card_placeholder"]
