import logging
import os
import sqlite3

logger = logging.getLogger(__name__)


def setup_database(path: str):
    """Thiết lập database với các bảng users và totps (idempotent)"""

    # Đảm bảo thư mục tồn tại
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(path)
    cursor = conn.cursor()

    # Tạo bảng users
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_login TIMESTAMP
    )
    ''')

    # Tạo bảng totps: mỗi dòng là một tài khoản TOTP của user
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS totps (
        id TEXT PRIMARY KEY,
        user_id INTEGER NOT NULL,
        user_info TEXT NOT NULL,
        secret TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (user_id) REFERENCES users (id)
    )
    ''')

    conn.commit()
    conn.close()
    logger.info("Database ready at %s", path)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    setup_database(os.path.join("database", "totp_manager.db"))
