"""
Main entry point for StockApp.
"""

import sys
import signal
import logging
from typing import Optional
from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import Qt

from stockapp.ui import MainWindow, LoginDialog, SignupDialog
from stockapp.auth import AuthGate
from stockapp.secure_store import SecureStore
from stockapp import config


class StockApp:
    """Main application class."""

    def __init__(self):
        """Initialize the application."""
        self.app = QApplication(sys.argv)
        self.app.setApplicationName(config.APP_NAME)
        self.app.setOrganizationName(config.APP_NAME)
        self.app.setStyle(config.APP_STYLE)

        self.store = SecureStore.default()
        self.gate = AuthGate(self.store)
        self.running = True

        self.login_dialog: Optional[LoginDialog] = None
        self.main_window: Optional[MainWindow] = None

        # Handle Ctrl+C gracefully
        signal.signal(signal.SIGINT, signal.SIG_DFL)

    def _handle_main_window_closed(self, should_exit_app: bool):
        """Handles the signal when the main window is closed."""
        self.running = not should_exit_app

    def run(self) -> int:
        """Run the application."""
        current_state = config.STATE_LOGIN

        while current_state != config.STATE_EXIT:
            if current_state == config.STATE_LOGIN:
                self.login_dialog = LoginDialog(self.gate)
                if self.login_dialog.exec_():
                    current_state = config.STATE_MAIN_WINDOW
                elif self.login_dialog.wants_signup:
                    current_state = config.STATE_SIGNUP
                else:
                    current_state = config.STATE_EXIT

            elif current_state == config.STATE_SIGNUP:
                # Accepted or not, signup always returns to the login screen
                SignupDialog(self.gate).exec_()
                current_state = config.STATE_LOGIN

            elif current_state == config.STATE_MAIN_WINDOW:
                self.running = False
                self.main_window = MainWindow(self.store)
                self.main_window.logout_requested.connect(lambda: self._handle_main_window_closed(False))
                self.main_window.exit_application.connect(lambda: self._handle_main_window_closed(True))
                self.main_window.show()
                self.app.exec_()
                self.main_window = None

                # running is only set back to True by a logout
                current_state = config.STATE_LOGIN if self.running else config.STATE_EXIT

        return 0


def main():
    """Main entry point."""
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
    # Enable high DPI scaling
    if hasattr(Qt, 'AA_EnableHighDpiScaling'):
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    if hasattr(Qt, 'AA_UseHighDpiPixmaps'):
        QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    app = StockApp()
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
