"""Application entrypoint."""

from __future__ import annotations

import logging
import os
import sys

from canvas import SketchCanvas
from completion_client import OpenAICompletionClient
from config import JsonConfigStore
from interfaces import ConfigStore
from image_encoder import QtJpegEncoder
from models import SessionState, SessionView
from session_controller import SessionController

try:
    from PySide6.QtCore import QObject, Qt, Signal
    from PySide6.QtGui import QAction
    from PySide6.QtWidgets import (
        QApplication,
        QHBoxLayout,
        QInputDialog,
        QLabel,
        QMainWindow,
        QMessageBox,
        QProgressBar,
        QPushButton,
        QVBoxLayout,
        QWidget,
    )
except Exception as exc:  # pragma: no cover
    raise SystemExit(f"PySide6 is required to run the desktop app: {exc}")

logger = logging.getLogger(__name__)

BUTTON_STYLE = "padding: 10px 16px; color: white; border-radius: 8px; background: {};"


class UIBridge(QObject):
    view_signal = Signal(object)  # SessionView


def _build_client(config_store: ConfigStore) -> OpenAICompletionClient:
    return OpenAICompletionClient(
        api_key=config_store.get_api_key(),
        model=config_store.get_model(),
        endpoint=config_store.get_endpoint(),
        max_tokens=config_store.get_max_tokens(),
    )


class App:
    def __init__(self) -> None:
        self.app = QApplication(sys.argv)
        self.config_store = JsonConfigStore()
        self.ui = UIBridge()
        self.ui.view_signal.connect(self._on_view_ui)

        self.controller = SessionController(
            encoder=QtJpegEncoder(),
            client=_build_client(self.config_store),
            on_state_change=self._on_state_change,
        )

        self.window = QMainWindow()
        self.window.setWindowTitle("Tabula AI")
        self.window.resize(640, 720)
        self._build_widgets()
        self._setup_menu()
        self.window.show()

    def _build_widgets(self) -> None:
        self.canvas = SketchCanvas(self.controller.sketch)

        self.process_button = QPushButton("Process Drawing")
        self.process_button.setStyleSheet(BUTTON_STYLE.format("#1E6FD9"))
        self.process_button.clicked.connect(self.controller.process)

        self.clear_button = QPushButton("Clear Canvas")
        self.clear_button.setStyleSheet(BUTTON_STYLE.format("#D93025"))
        self.clear_button.clicked.connect(self._clear)

        buttons = QHBoxLayout()
        buttons.setSpacing(20)
        buttons.addWidget(self.process_button)
        buttons.addWidget(self.clear_button)

        self.progress = QProgressBar()
        self.progress.setRange(0, 0)  # busy indicator
        self.progress.setFormat("Processing...")
        self.progress.setTextVisible(True)
        self.progress.hide()

        self.result_title = QLabel("AI Interpretation:")
        self.result_title.setStyleSheet("font-weight: bold; font-size: 16px;")
        self.result_label = QLabel("")
        self.result_label.setWordWrap(True)
        self.result_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.result_label.setStyleSheet("padding: 12px; background: rgba(128,128,128,25); border-radius: 8px;")
        self.result_title.hide()
        self.result_label.hide()

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet("color: red; padding: 8px;")
        self.error_label.hide()

        layout = QVBoxLayout()
        layout.addWidget(self.canvas)
        layout.addLayout(buttons)
        layout.addWidget(self.progress)
        layout.addWidget(self.result_title)
        layout.addWidget(self.result_label)
        layout.addWidget(self.error_label)
        layout.addStretch(1)

        central = QWidget()
        central.setLayout(layout)
        self.window.setCentralWidget(central)

    def _setup_menu(self) -> None:
        menu = self.window.menuBar().addMenu("Settings")

        api_action = QAction("Set API Key", menu)
        api_action.triggered.connect(self._set_api_key)
        menu.addAction(api_action)

        model_action = QAction("Set Model", menu)
        model_action.triggered.connect(self._set_model)
        menu.addAction(model_action)

        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(self.quit)
        menu.addAction(quit_action)

    def _set_api_key(self) -> None:
        value, ok = QInputDialog.getText(self.window, "API Key", "OpenAI API Key")
        if not ok:
            return
        self.config_store.set_api_key(value)
        # Hot-swap client with new key
        self.controller.replace_client(_build_client(self.config_store))
        QMessageBox.information(self.window, "Saved", "API Key saved and applied.")

    def _set_model(self) -> None:
        value, ok = QInputDialog.getText(
            self.window, "Model", "Chat completion model", text=self.config_store.get_model()
        )
        if not ok or not value:
            return
        self.config_store.set_model(value)
        self.controller.replace_client(_build_client(self.config_store))
        QMessageBox.information(self.window, "Saved", "Model saved and applied.")

    def _clear(self) -> None:
        self.controller.clear()
        self.canvas.update()

    # ------------------------------------------------------------------
    # Callbacks (may run on the client worker thread → emit signal for UI thread)
    # ------------------------------------------------------------------

    def _on_state_change(self, from_view: SessionView, to_view: SessionView) -> None:
        logger.debug("Session %s -> %s", from_view.state.value, to_view.state.value)
        self.ui.view_signal.emit(to_view)

    # ------------------------------------------------------------------
    # UI thread handlers (safe for Qt)
    # ------------------------------------------------------------------

    def _on_view_ui(self, view: SessionView) -> None:
        loading = view.state == SessionState.LOADING
        self.process_button.setDisabled(loading)
        self.canvas.set_drawing_enabled(not loading)
        self.progress.setVisible(loading)

        has_result = view.state == SessionState.RESULT and bool(view.text)
        self.result_label.setText(view.text)
        self.result_title.setVisible(has_result)
        self.result_label.setVisible(has_result)

        self.error_label.setText(view.error)
        self.error_label.setVisible(view.state == SessionState.ERROR)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> int:
        return self.app.exec()

    def quit(self) -> None:
        self.app.quit()


def configure_logging() -> None:
    level = os.getenv("TABULA_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging()
    app = App()
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
