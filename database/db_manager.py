import logging
import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from flask import current_app, has_app_context
from werkzeug.security import generate_password_hash, check_password_hash  # Password hashing (for security)

# Used in: backend/routes.py, backend/totp_routes.py

logger = logging.getLogger(__name__)

DATABASE_FILE = 'database/totp_manager.db'


def get_database_file() -> str:
    """Đường dẫn DB: lấy từ config của Flask app nếu đang trong app context"""
    if has_app_context():
        return current_app.config.get("DATABASE_FILE", DATABASE_FILE)
    return DATABASE_FILE


def get_db_connection():
    """Kết nối đến database"""
    conn = sqlite3.connect(get_database_file())
    conn.row_factory = sqlite3.Row  # Trả về kết quả dạng dictionary
    return conn


def _row_to_totp(row) -> dict:
    return {
        "id": row["id"],
        "userInfo": row["user_info"],
        "secret": row["secret"],
        "createdAt": row["created_at"],
    }


# --- Users -------------------------------------------------------------------
def add_new_user(username: str, password: str) -> tuple[bool, str]:
    """Thêm user mới vào database"""
    conn = get_db_connection()
    cursor = conn.cursor()

    try:
        # Hash password trước khi lưu
        hashed_password = generate_password_hash(password)

        cursor.execute(
            "INSERT INTO users (username, password) VALUES (?, ?)",
            (username, hashed_password)
        )
        conn.commit()
        logger.info("User '%s' added", username)
        return (True, username)
    except sqlite3.IntegrityError:
        error_message = f"User '{username}' already exists."
        logger.warning(error_message)
        return (False, error_message)
    finally:
        conn.close()


def verify_user_credentials(username: str, password: str) -> bool:
    """Xác thực thông tin đăng nhập của user"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute("SELECT password FROM users WHERE username = ?", (username,))
    result = cursor.fetchone()

    conn.close()

    if result and check_password_hash(result['password'], password):
        # Cập nhật thời gian đăng nhập cuối
        update_last_login(username)
        return True

    return False


def update_last_login(username: str):
    """Cập nhật thời gian đăng nhập cuối cùng"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute(
        "UPDATE users SET last_login = ? WHERE username = ?",
        (datetime.now().strftime('%Y-%m-%d %H:%M:%S'), username)
    )
    conn.commit()
    conn.close()


def get_user_id(username: str) -> Optional[int]:
    """Lấy ID của user"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute("SELECT id FROM users WHERE username = ?", (username,))
    result = cursor.fetchone()

    conn.close()

    if result:
        return result['id']

    return None


def user_exists(username: str) -> bool:
    """Kiểm tra user có tồn tại không"""
    return get_user_id(username) is not None


# --- TOTP entries ------------------------------------------------------------
def save_totp(user_id: int, user_info: str, secret: str) -> dict:
    """Lưu một tài khoản TOTP, trả về bản ghi vừa tạo"""
    totp_id = uuid.uuid4().hex
    conn = get_db_connection()
    cursor = conn.cursor()

    try:
        cursor.execute(
            "INSERT INTO totps (id, user_id, user_info, secret) VALUES (?, ?, ?, ?)",
            (totp_id, user_id, user_info, secret)
        )
        conn.commit()
        cursor.execute("SELECT * FROM totps WHERE id = ?", (totp_id,))
        return _row_to_totp(cursor.fetchone())
    finally:
        conn.close()


def save_totps(user_id: int, entries: list) -> List[dict]:
    """Lưu nhiều tài khoản trong một transaction (import hàng loạt)"""
    conn = get_db_connection()
    cursor = conn.cursor()
    ids = []

    try:
        for user_info, secret in entries:
            totp_id = uuid.uuid4().hex
            cursor.execute(
                "INSERT INTO totps (id, user_id, user_info, secret) VALUES (?, ?, ?, ?)",
                (totp_id, user_id, user_info, secret)
            )
            ids.append(totp_id)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()

    return [get_totp(totp_id, user_id) for totp_id in ids]


def list_totps(user_id: int) -> List[dict]:
    """Danh sách tài khoản TOTP của user"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute(
        "SELECT * FROM totps WHERE user_id = ? ORDER BY created_at, rowid",
        (user_id,)
    )
    rows = cursor.fetchall()

    conn.close()
    return [_row_to_totp(row) for row in rows]


def get_totp(totp_id: str, user_id: int) -> Optional[dict]:
    """Lấy một tài khoản, chỉ khi thuộc về user"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute(
        "SELECT * FROM totps WHERE id = ? AND user_id = ?",
        (totp_id, user_id)
    )
    result = cursor.fetchone()

    conn.close()
    return _row_to_totp(result) if result else None


def delete_totp(totp_id: str, user_id: int) -> bool:
    """Xóa một tài khoản, trả về False nếu không tìm thấy / không thuộc user"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute(
        "DELETE FROM totps WHERE id = ? AND user_id = ?",
        (totp_id, user_id)
    )
    conn.commit()
    deleted = cursor.rowcount > 0
    conn.close()
    return deleted


def clear_totps(user_id: int) -> int:
    """Xóa toàn bộ tài khoản của user, trả về số dòng đã xóa"""
    conn = get_db_connection()
    cursor = conn.cursor()

    cursor.execute("DELETE FROM totps WHERE user_id = ?", (user_id,))
    conn.commit()
    count = cursor.rowcount
    conn.close()
    return count
