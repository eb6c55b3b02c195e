# ===== Part 1: Imports & Logging ============================================
import sys
import logging
from typing import Callable

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication, QMainWindow, QMessageBox, QWidget

from services.api_client import ApiClient
from services.workers import wait_for_workers
from utils import app_settings
from utils.app_signals import app_signals
from utils.session import SessionContext

logger = logging.getLogger(__name__)


def configure_logging(dev_mode: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if dev_mode else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logs every request at INFO; keep it to warnings outside dev mode.
    logging.getLogger("httpx").setLevel(logging.DEBUG if dev_mode else logging.WARNING)


# ===== Part 2: Page registry ================================================
def _vehicles_page(client: ApiClient, parent: QWidget | None) -> QWidget:
    from modules.vehicles import create_vehicles_page

    return create_vehicles_page(client, parent=parent)


def _clients_page(client: ApiClient, parent: QWidget | None) -> QWidget:
    from modules.clients import create_clients_page

    return create_clients_page(client, parent=parent)


def _inventory_page(client: ApiClient, parent: QWidget | None) -> QWidget:
    from modules.inventory import create_inventory_page

    return create_inventory_page(client, parent=parent)


PAGES: dict[str, Callable[[ApiClient, QWidget | None], QWidget]] = {
    "vehicles": _vehicles_page,
    "clients": _clients_page,
    "inventory": _inventory_page,
}


# ===== Part 3: Main Window ===================================================
class MainWindow(QMainWindow):
    """Hosts a single list page; navigation between pages is not provided."""

    def __init__(self, page_name: str, client: ApiClient) -> None:
        super().__init__()
        self.client = client
        self.page = PAGES[page_name](client, self)
        self.setCentralWidget(self.page)
        title = getattr(getattr(self.page, "definition", None), "title", page_name)
        self.setWindowTitle(f"ERP Console - {title}")
        self.resize(1200, 760)
        app_signals.unauthorized.connect(self._on_unauthorized)

    def _on_unauthorized(self, path: str) -> None:
        logger.warning("session rejected by the server (%s)", path)
        QMessageBox.warning(
            self,
            "Session expired",
            "The server rejected your credentials. Please sign in again.",
        )


# ===== Part 4: Application Entrypoint =======================================
def main(argv: list[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="ERP administration console")
    parser.add_argument("--page", choices=sorted(PAGES), default="vehicles", help="List page to open")
    parser.add_argument("--base-url", default=None, help="Override the API base URL")
    parser.add_argument("--token", default=None, help="Bearer token to store for this session")
    parser.add_argument("--dev", action="store_true", help="Verbose logging")
    args, qt_args = parser.parse_known_args(argv)

    configure_logging(args.dev or app_settings.DEV_MODE)

    QCoreApplication.setOrganizationName("ERPConsole")
    QCoreApplication.setApplicationName("ERPConsole")
    app = QApplication([sys.argv[0], *qt_args])

    session = SessionContext()
    if args.token:
        session.set_token(args.token)
    client = ApiClient(args.base_url, session=session)
    logger.info("using API at %s", client.base_url)

    def _on_quit() -> None:
        wait_for_workers()
        client.close()

    app.aboutToQuit.connect(_on_quit)

    win = MainWindow(args.page, client)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
