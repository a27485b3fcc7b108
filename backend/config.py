"""
Cấu hình backend.

Giá trị mặc định ở đây, có thể ghi đè bằng biến môi trường
hoặc truyền dict vào create_app() (dùng trong test).
"""

import logging
import os

from core.otpauth import EXPORT_ISSUER  # noqa: F401  (Issuer ghi vào URI khi export)

# Flask session
SECRET_KEY = os.environ.get("TOTP_MANAGER_SECRET_KEY", "totp_manager_dev_secret_key")

# SQLite
DATABASE_FILE = os.environ.get("TOTP_MANAGER_DB", os.path.join("database", "totp_manager.db"))

# Log
LOG_LEVEL = getattr(logging, os.environ.get("TOTP_MANAGER_LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
