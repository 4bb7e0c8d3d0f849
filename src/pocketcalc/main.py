"""
Application Initialization
==========================
Creates the QApplication, the main window and starts the Qt event loop.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Sets up logging from the environment-driven configuration.
2. Configures the application identity and icon.
3. Instantiates the Main Window, which owns the calculator.
"""
import logging
import os
import sys

from PySide6.QtCore import QCoreApplication
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication

from pocketcalc import config
from pocketcalc.logging_config import setup_logging
from pocketcalc.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def create_app() -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(config.ORG_ID)
    QCoreApplication.setApplicationName(config.APP_ID)

    app = QApplication(sys.argv)
    app.setApplicationDisplayName(config.VISIBLE_APP_NAME)

    if os.path.exists(config.ICON_PATH):
        app.setWindowIcon(QIcon(config.ICON_PATH))
    else:
        logger.warning(f"Icon not found at {config.ICON_PATH}")

    return app


def main() -> None:
    setup_logging()

    app = create_app()

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
