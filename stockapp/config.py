"""
Configuration constants for the StockApp application.
"""

import os

# Application Metadata
APP_VERSION = "1.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "StockApp"  # Use: Full name of the application. Type: str. Range: Any valid string.
APP_TITLE_PREFIX = f"{APP_NAME} v{APP_VERSION}"  # Use: Prefix for the application window titles, combining name and version. Type: str (f-string). Range: Derived from APP_NAME and APP_VERSION.

# Account Settings
ALLOWED_EMAIL_DOMAIN = "@gmail.com"  # Use: Suffix every account email must end with. Compared literally and case-sensitively. Type: str. Range: Any string starting with "@".
PASSWORD_MIN_LENGTH = 6  # Use: Minimum required length for account passwords at signup. Type: int. Range: Positive integer.
STORE_KEY_EMAIL = "user_email"  # Use: Secure store key holding the account email. Type: str. Range: Any non-empty string.
STORE_KEY_PASSWORD = "user_password"  # Use: Secure store key holding the SHA-256 digest of the account password. Type: str. Range: Any non-empty string.
PROFILE_DEFAULT_USERNAME = "User"  # Use: Display name shown on the profile tab when no account email is stored. Type: str. Range: Any string.
PROFILE_MASKED_EMPTY = "*****"  # Use: Masked email shown on the profile tab when no account email is stored. Type: str. Range: Any string.

# Security Settings
KEY_SIZE = 32  # Use: Size of the secure store encryption key in bytes. Corresponds to AES-256. Type: int. Range: 16 (AES-128), 24 (AES-192), or 32 (AES-256) bytes.
NONCE_SIZE = 12  # Use: Size of the Nonce (Number used once) in bytes for AES-GCM. Type: int. Range: 12 bytes (96 bits) is the recommended size for GCM.

# Product Settings
EXPIRY_DATE_FORMAT = "%d-%m-%Y"  # Use: strptime format of product expiry dates (DD-MM-YYYY). Type: str. Range: Valid strptime format.
PRICE_DISPLAY_FORMAT = "R$ {:.2f}"  # Use: Format applied to product prices in the products table. Type: str. Range: str.format template with one field.
NOTIFICATION_TITLE_PRODUCT_ADDED = "New product added!"  # Use: Title of the local notification fired after a product is added. Type: str. Range: Any string.
NOTIFICATION_BODY_PRODUCT_ADDED = "Product {name} was added successfully."  # Use: Body of the product-added notification; {name} is the product name. Type: str. Range: str.format template with a "name" field.
NOTIFICATION_DURATION_MS = 5000  # Use: How long the tray notification stays visible in milliseconds. Type: int. Range: Positive integer.
CONFIRM_DELETE_PRODUCT = 'Do you want to delete the product "{name}"?'  # Use: Confirmation prompt shown before a product is deleted. Type: str. Range: str.format template with a "name" field.
SAMPLE_PRODUCTS = [  # Use: Products the dashboard starts with on every session. Type: list[dict[str, str]]. Range: Dicts with the ProductDraft field names.
    {"name": "Rice", "quantity": "0", "expiry_date": "06-01-2025", "exits": "50", "price": "5.5"},
    {"name": "Beans", "quantity": "10", "expiry_date": "12-10-2024", "exits": "30", "price": "7.2"},
]

# User-facing messages keyed by rejection reason value
REASON_MESSAGES = {  # Use: Text the UI shows for each rejection reason. Type: dict[str, str]. Range: Keys are outcomes.Reason values.
    "invalid_email_domain": f"Email must end with {ALLOWED_EMAIL_DOMAIN}",
    "invalid_credentials": "Invalid credentials",
    "password_mismatch": "Passwords do not match",
    "password_too_short": f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
    "validation_error": "Fill in the name and the price.",
    "not_found": "The product no longer exists.",
    "storage_error": "Could not access the secure store. Please try again.",
}

# UI Settings
APP_STYLE = 'Fusion'  # Use: PyQt5 application style. Type: str. Range: Valid PyQt5 style names (e.g., 'Fusion', 'Windows', 'Macintosh').
LOADING_BUTTON_TEXT = "Loading..."  # Use: Label of the login button while an attempt is in flight. Type: str. Range: Any string.

# Application State Machine States
STATE_LOGIN = "LOGIN"  # Use: Represents the application's login state. Type: str. Range: Any string.
STATE_SIGNUP = "SIGNUP"  # Use: Represents the application's signup state. Type: str. Range: Any string.
STATE_MAIN_WINDOW = "MAIN_WINDOW"  # Use: Represents the application's main window state. Type: str. Range: Any string.
STATE_EXIT = "EXIT"  # Use: Represents the application's exit state. Type: str. Range: Any string.

# File and Directory Names
CONFIG_DIR_NAME = ".stockapp"  # Use: Name of the hidden directory within the user's home directory where StockApp stores its data files. Type: str. Range: Any valid directory name.
CONFIG_DIR_ENV = "STOCKAPP_HOME"  # Use: Environment variable that overrides the data directory location. Type: str. Range: Any valid environment variable name.
SECURE_STORE_FILE = "secure_store.enc"  # Use: Filename for the encrypted key-value store holding the account credential. Type: str. Range: Any valid filename.
KEYRING_SERVICE = "StockApp"  # Use: OS keychain service name the secure store key is filed under. Type: str. Range: Any non-empty string.
KEYRING_KEY_PREFIX = "stockapp_store_"  # Use: Prefix of the keychain entry name; a hash of the store path follows it. Type: str. Range: Any string.


def get_data_dir() -> str:
    """Return the directory StockApp keeps its files in."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return override
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
