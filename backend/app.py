"""
FLASK APP MAIN ENTRY POINT - TOTP MANAGER BACKEND
==================================================

Đây là file chính để khởi chạy TOTP Manager API Server.
File này thiết lập Flask app, cấu hình CORS, log, database và đăng ký các API routes.

CÁC TÍNH NĂNG CHÍNH
- App factory create_app() (test có thể truyền config riêng)
- CORS enabled cho frontend integration
- Tự động tạo bảng SQLite khi khởi động
- Lỗi parse / sinh mã trả về JSON thay vì trang HTML
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS

from backend import config
from core.errors import GenerationError, OtpParseError
from database.setup_database import setup_database

logger = logging.getLogger(__name__)


def create_app(overrides: dict = None) -> Flask:
    """
    TẠO FLASK APP

    Arguments:
        overrides: dict cấu hình ghi đè (vd: {"TESTING": True, "DATABASE_FILE": "..."})
    """
    app = Flask(__name__)
    app.config.from_object(config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=app.config["LOG_FORMAT"])

    # BẬT CORS (Cross-Origin Resource Sharing)
    # Cho phép frontend (chạy trên domain/port khác) gọi API đến backend
    CORS(app, supports_credentials=True)

    setup_database(app.config["DATABASE_FILE"])

    # IMPORT VÀ ĐĂNG KÝ ROUTES
    from backend.routes import auth_bp
    from backend.totp_routes import totp_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(totp_bp)

    @app.errorhandler(OtpParseError)
    def handle_parse_error(e):
        logger.warning("Parse error: %s", e)
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(GenerationError)
    def handle_generation_error(e):
        logger.error("Token generation failed: %s", e)
        return jsonify({"error": "Failed to generate token"}), 500

    logger.info("TOTP Manager backend ready (db=%s)", app.config["DATABASE_FILE"])
    return app


# KHỞI CHẠY SERVER
# Chỉ chạy khi file được execute trực tiếp (không phải import)
if __name__ == '__main__':
    create_app().run(
        debug=os.environ.get("FLASK_DEBUG") == "1",
        host='0.0.0.0',
        port=int(os.environ.get("PORT", 5000)),
    )
