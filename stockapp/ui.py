"""
User interface for StockApp.

Login and signup dialogs in front of a tabbed dashboard (Home, Products,
Profile). All validation lives in the core modules; the widgets only turn
outcomes into messages.
"""

import logging
from typing import Callable, Optional
from PyQt5.QtWidgets import (
    QMainWindow, QDialog, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QLineEdit, QPushButton, QTableWidget, QTableWidgetItem,
    QMessageBox, QTabWidget, QApplication, QSystemTrayIcon, QAction,
    QAbstractItemView
)
from PyQt5.QtCore import Qt, pyqtSignal, QThread
from PyQt5.QtGui import QBrush, QColor

from .auth import AuthGate
from .inventory import ProductRepository, ProductDraft, Product, SortKey
from .outcomes import Outcome, Reason
from .profile import AccountProfile
from . import config

logger = logging.getLogger(__name__)


class TrayNotifier:
    """Shows local notifications as system tray balloons."""

    def __init__(self, parent=None):
        self.tray = QSystemTrayIcon(parent)
        self.tray.setIcon(QApplication.windowIcon())
        self.tray.setToolTip(config.APP_NAME)
        if QSystemTrayIcon.isSystemTrayAvailable():
            self.tray.show()

    def schedule_immediate(self, title: str, body: str) -> None:
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logger.info(f"System tray unavailable, notification not shown: {title}")
            return
        self.tray.showMessage(title, body, QSystemTrayIcon.Information, config.NOTIFICATION_DURATION_MS)


class BeepHaptics:
    """Desktop stand-in for a vibration: the system beep."""

    def pulse(self) -> None:
        QApplication.beep()


class AuthWorker(QThread):
    """Worker thread running one login or signup attempt."""

    result = pyqtSignal(object)

    def __init__(self, attempt: Callable[[], Optional[Outcome]]):
        super().__init__()
        self.attempt = attempt

    def run(self):
        try:
            outcome = self.attempt()
        except Exception as e:
            logger.error(f"Auth attempt failed: {e}", exc_info=True)
            outcome = Outcome.rejected(Reason.STORAGE_ERROR)
        self.result.emit(outcome)


def confirm_with(parent) -> Callable[[str], bool]:
    """Build a confirmation prompt bound to a parent widget."""
    def confirm(message: str) -> bool:
        reply = QMessageBox.question(
            parent, "Confirm Deletion", message,
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        return reply == QMessageBox.Yes
    return confirm


class AuthDialog(QDialog):
    """Base for the login and signup dialogs; stays open while an attempt runs."""

    def __init__(self, gate: AuthGate, parent=None):
        super().__init__(parent)
        self.gate = gate
        self.worker: Optional[AuthWorker] = None

    def attempt_running(self) -> bool:
        return self.worker is not None and self.worker.isRunning()

    def reject(self):
        if self.attempt_running():
            logger.debug("Close ignored while an auth attempt is running")
            return
        super().reject()

    def closeEvent(self, event):
        if self.attempt_running():
            event.ignore()
            return
        super().closeEvent(event)


class LoginDialog(AuthDialog):
    """Login dialog."""

    def __init__(self, gate: AuthGate, parent=None):
        super().__init__(gate, parent)
        self.wants_signup = False
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle(f"{config.APP_TITLE_PREFIX} - Login")
        self.setMinimumSize(360, 200)
        self.setModal(True)

        layout = QVBoxLayout()

        title = QLabel("Login")
        title.setAlignment(Qt.AlignCenter)
        font = title.font()
        font.setPointSize(16)
        font.setBold(True)
        title.setFont(font)
        layout.addWidget(title)

        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("Email")
        layout.addWidget(self.email_input)

        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("Password")
        self.password_input.setEchoMode(QLineEdit.Password)
        self.password_input.returnPressed.connect(self.login)
        layout.addWidget(self.password_input)

        self.login_button = QPushButton("Sign In")
        self.login_button.clicked.connect(self.login)
        layout.addWidget(self.login_button)

        self.signup_button = QPushButton("Create Account")
        self.signup_button.setFlat(True)
        self.signup_button.clicked.connect(self.go_to_signup)
        layout.addWidget(self.signup_button)

        layout.addStretch()
        self.setLayout(layout)
        self.email_input.setFocus()

    def go_to_signup(self):
        self.wants_signup = True
        self.reject()

    def set_busy(self, busy: bool):
        self.login_button.setEnabled(not busy)
        self.signup_button.setEnabled(not busy)
        self.login_button.setText(config.LOADING_BUTTON_TEXT if busy else "Sign In")

    def login(self):
        """Submit the form unless an attempt is already running."""
        if self.gate.busy or self.attempt_running():
            return
        email = self.email_input.text()
        password = self.password_input.text()

        self.set_busy(True)
        self.worker = AuthWorker(lambda: self.gate.login(email, password))
        self.worker.result.connect(self._handle_login_result)
        self.worker.start()

    def _handle_login_result(self, outcome: Optional[Outcome]):
        self.set_busy(False)
        if outcome is None:
            return
        if outcome.ok:
            self.accept()
        else:
            QMessageBox.warning(self, "Error", outcome.message)


class SignupDialog(AuthDialog):
    """Account creation dialog."""

    def __init__(self, gate: AuthGate, parent=None):
        super().__init__(gate, parent)
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle(f"{config.APP_TITLE_PREFIX} - Create Account")
        self.setMinimumSize(360, 220)
        self.setModal(True)

        layout = QVBoxLayout()

        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("Email")
        layout.addWidget(self.email_input)

        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("Password")
        self.password_input.setEchoMode(QLineEdit.Password)
        layout.addWidget(self.password_input)

        self.confirm_input = QLineEdit()
        self.confirm_input.setPlaceholderText("Confirm Password")
        self.confirm_input.setEchoMode(QLineEdit.Password)
        self.confirm_input.returnPressed.connect(self.signup)
        layout.addWidget(self.confirm_input)

        button_layout = QHBoxLayout()
        self.back_button = QPushButton("Back")
        self.back_button.clicked.connect(self.reject)
        button_layout.addWidget(self.back_button)

        self.signup_button = QPushButton("Create Account")
        self.signup_button.clicked.connect(self.signup)
        button_layout.addWidget(self.signup_button)
        layout.addLayout(button_layout)

        layout.addStretch()
        self.setLayout(layout)

    def signup(self):
        if self.gate.busy or self.attempt_running():
            return
        email = self.email_input.text()
        password = self.password_input.text()
        confirm = self.confirm_input.text()

        self.signup_button.setEnabled(False)
        self.worker = AuthWorker(lambda: self.gate.register(email, password, confirm))
        self.worker.result.connect(self._handle_signup_result)
        self.worker.start()

    def _handle_signup_result(self, outcome: Optional[Outcome]):
        self.signup_button.setEnabled(True)
        if outcome is None:
            return
        if outcome.ok:
            QMessageBox.information(self, "Success", "Account created successfully!")
            self.accept()
        else:
            QMessageBox.warning(self, "Error", outcome.message)


class ProductDialog(QDialog):
    """Dialog for adding/editing a product."""

    DELETE_REQUESTED = 2

    def __init__(self, draft: Optional[ProductDraft] = None, parent=None):
        super().__init__(parent)
        self.draft = draft
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle("Edit Product" if self.draft else "Add Product")
        self.setModal(True)
        self.setMinimumWidth(400)

        draft = self.draft or ProductDraft()
        layout = QFormLayout()

        self.name_input = QLineEdit(draft.name)
        layout.addRow("Name:", self.name_input)

        self.quantity_input = QLineEdit(draft.quantity)
        layout.addRow("Quantity:", self.quantity_input)

        self.expiry_input = QLineEdit(draft.expiry_date)
        self.expiry_input.setPlaceholderText("DD-MM-YYYY")
        layout.addRow("Expiry date:", self.expiry_input)

        self.exits_input = QLineEdit(draft.exits)
        layout.addRow("Exits:", self.exits_input)

        self.price_input = QLineEdit(draft.price)
        layout.addRow("Price:", self.price_input)

        buttons = QHBoxLayout()
        save_button = QPushButton("Save")
        save_button.clicked.connect(self.accept)
        buttons.addWidget(save_button)

        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.reject)
        buttons.addWidget(cancel_button)

        if self.draft:
            delete_button = QPushButton("Delete")
            delete_button.setStyleSheet("color: red")
            delete_button.clicked.connect(lambda: self.done(self.DELETE_REQUESTED))
            buttons.addWidget(delete_button)
        layout.addRow(buttons)

        self.setLayout(layout)

    def get_draft(self) -> ProductDraft:
        """Get the raw form values."""
        return ProductDraft(
            name=self.name_input.text(),
            quantity=self.quantity_input.text(),
            expiry_date=self.expiry_input.text(),
            exits=self.exits_input.text(),
            price=self.price_input.text(),
        )


class MainWindow(QMainWindow):
    """Dashboard window with Home, Products and Profile tabs."""
    logout_requested = pyqtSignal()
    exit_application = pyqtSignal()

    COLUMNS = ["Name", "Quantity", "Expiry", "Exits", "Price"]

    def __init__(self, store):
        super().__init__()
        self.store = store
        self.notifier = TrayNotifier(self)
        self.products = ProductRepository.with_sample_products(
            notifier=self.notifier, haptics=BeepHaptics()
        )
        self.sort_key = SortKey.QUANTITY
        self.profile = AccountProfile.load(store)
        self.show_full_email = False
        self.init_ui()
        self.load_products()

    def init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle(config.APP_TITLE_PREFIX)
        self.setGeometry(100, 100, 800, 500)
        self.create_menu_bar()

        tabs = QTabWidget()
        tabs.addTab(self._build_home_tab(), "Home")
        tabs.addTab(self._build_products_tab(), "Products")
        tabs.addTab(self._build_profile_tab(), "User")
        self.setCentralWidget(tabs)

        self.count_label = QLabel("Total Products: 0")
        self.count_label.setStyleSheet("padding-right: 10px;")
        self.statusBar().addPermanentWidget(self.count_label)

    def create_menu_bar(self):
        menu = self.menuBar().addMenu("&File")

        logout_action = QAction("Log Out", self)
        logout_action.triggered.connect(self._handle_logout_action)
        menu.addAction(logout_action)

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self._handle_exit_action)
        menu.addAction(exit_action)

    def _build_home_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout()
        welcome = QLabel("Welcome home!")
        welcome.setAlignment(Qt.AlignCenter)
        font = welcome.font()
        font.setPointSize(18)
        font.setBold(True)
        welcome.setFont(font)
        layout.addWidget(welcome)
        widget.setLayout(layout)
        return widget

    def _build_products_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout()

        title = QLabel("Management Reports")
        font = title.font()
        font.setBold(True)
        title.setFont(font)
        layout.addWidget(title)

        toolbar_layout = QHBoxLayout()
        for label, key in (
            ("By Quantity", SortKey.QUANTITY),
            ("By Expiry", SortKey.EXPIRY_DATE),
            ("By Exits", SortKey.EXITS),
        ):
            button = QPushButton(label)
            button.clicked.connect(lambda _checked, k=key: self.set_sort_key(k))
            toolbar_layout.addWidget(button)

        self.add_button = QPushButton("Add Product")
        self.add_button.setStyleSheet("color: green")
        self.add_button.clicked.connect(self.add_product)
        toolbar_layout.addWidget(self.add_button)
        layout.addLayout(toolbar_layout)

        self.table = QTableWidget()
        self.table.setColumnCount(len(self.COLUMNS))
        self.table.setHorizontalHeaderLabels(self.COLUMNS)
        self.table.setAlternatingRowColors(True)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.cellDoubleClicked.connect(self._handle_row_activated)
        layout.addWidget(self.table)

        widget.setLayout(layout)
        return widget

    def _build_profile_tab(self) -> QWidget:
        widget = QWidget()
        layout = QFormLayout()

        layout.addRow("User:", QLabel(self.profile.username))

        email_layout = QHBoxLayout()
        self.email_label = QLabel(self.profile.display_email(self.show_full_email))
        email_layout.addWidget(self.email_label)
        self.toggle_email_button = QPushButton("Show")
        self.toggle_email_button.clicked.connect(self.toggle_email_visibility)
        email_layout.addWidget(self.toggle_email_button)
        layout.addRow("Email:", email_layout)

        widget.setLayout(layout)
        return widget

    def toggle_email_visibility(self):
        self.show_full_email = not self.show_full_email
        self.email_label.setText(self.profile.display_email(self.show_full_email))
        self.toggle_email_button.setText("Hide" if self.show_full_email else "Show")

    def set_sort_key(self, key: SortKey):
        self.sort_key = key
        self.load_products()

    def load_products(self):
        """Load the current projection into the table."""
        self.table.setRowCount(0)
        for product in self.products.project(self.sort_key):
            self.add_product_to_table(product)
        self.count_label.setText(f"Total Products: {len(self.products)}")

    def add_product_to_table(self, product: Product):
        row = self.table.rowCount()
        self.table.insertRow(row)

        name_item = QTableWidgetItem(product.name)
        name_item.setData(Qt.UserRole, product.id)
        self.table.setItem(row, 0, name_item)
        self.table.setItem(row, 1, QTableWidgetItem(str(product.quantity)))
        self.table.setItem(row, 2, QTableWidgetItem(product.expiry_date))
        self.table.setItem(row, 3, QTableWidgetItem(str(product.exits)))
        price_item = QTableWidgetItem(config.PRICE_DISPLAY_FORMAT.format(product.price))
        price_item.setForeground(QBrush(QColor("green")))
        self.table.setItem(row, 4, price_item)

    def add_product(self):
        dialog = ProductDialog(parent=self)
        while dialog.exec_() == QDialog.Accepted:
            outcome = self.products.add(dialog.get_draft())
            if outcome.ok:
                self.load_products()
                self.statusBar().showMessage("Product added", 2000)
                return
            QMessageBox.warning(self, "Error", outcome.message)

    def _handle_row_activated(self, row: int, _column: int):
        product_id = self.table.item(row, 0).data(Qt.UserRole)
        self.edit_product(product_id)

    def edit_product(self, product_id: str):
        draft = self.products.draft_for(product_id)
        if draft is None:
            return

        dialog = ProductDialog(draft, parent=self)
        while True:
            result = dialog.exec_()
            if result == ProductDialog.DELETE_REQUESTED:
                if self.products.remove(product_id, confirm_with(self)):
                    self.load_products()
                    self.statusBar().showMessage("Product deleted", 2000)
                    return
                continue
            if result != QDialog.Accepted:
                return

            outcome = self.products.update(product_id, dialog.get_draft())
            if outcome.ok:
                self.load_products()
                self.statusBar().showMessage("Product updated", 2000)
                return
            QMessageBox.warning(self, "Error", outcome.message)

    def _handle_logout_action(self):
        self.logout_requested.emit()
        self.close()

    def _handle_exit_action(self):
        """Handle the exit action, emitting a signal to terminate the application."""
        self.exit_application.emit()
        self.close()

    def closeEvent(self, event):
        self.notifier.tray.hide()
        event.accept()
