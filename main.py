"""Lectern entry point: composition root, no business logic."""

import logging
import sys

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication

from core.app_state import AppState
from core.config import load_config
from core.config_validator import ConfigValidator
from core.paper_store import PaperStore
from gui.main_window import MainWindow

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    """Launch the Lectern application."""
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=_LOG_FORMAT,
    )
    ConfigValidator.repair_rendering(config)

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Lectern")
    app.setOrganizationName("Lectern")
    app.setApplicationVersion("0.1.0")

    store = PaperStore(config.resolved_library_path())
    state = AppState(config)
    window = MainWindow(config, store, state)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
