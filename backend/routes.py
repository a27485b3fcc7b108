"""
AUTH ROUTES - FLASK BLUEPRINT

Đăng ký / đăng nhập / đăng xuất bằng Flask session.
Các route TOTP dùng decorator login_required ở đây.

VÍ DỤ:
curl -X POST http://localhost:5000/api/register -H "Content-Type: application/json" -d '{"username": "alice", "password": "secret"}'
curl -X POST http://localhost:5000/api/login -c cookies.txt -H "Content-Type: application/json" -d '{"username": "alice", "password": "secret"}'
"""

import functools
import logging

from flask import Blueprint, jsonify, request, session

from database.db_manager import (
    add_new_user,
    get_user_id,
    user_exists,
    verify_user_credentials,
)

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def login_required(view):
    """Chặn request chưa đăng nhập (401)."""
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        if session.get("user_id") is None:
            return jsonify({"error": "Authentication required"}), 401
        return view(*args, **kwargs)
    return wrapped


def read_json_object() -> dict:
    """Body JSON dạng object; body rỗng -> {}, JSON array / số / chuỗi -> {} luôn."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def string_field(data: dict, key: str) -> str:
    """Lấy field kiểu str đã strip; thiếu hoặc sai kiểu -> ''."""
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


def _read_credentials():
    data = read_json_object()
    username = string_field(data, 'username')
    password = data.get('password')
    return username, password if isinstance(password, str) else ''


@auth_bp.route('/api/register', methods=['POST'])
def register_user():
    """
    ĐĂNG KÝ USER MỚI

    Input:  {"username": "...", "password": "..."}
    Output: 201 {"message": ..., "user": ...}
    """
    username, password = _read_credentials()
    if not username or not password:
        return jsonify({"error": "Username and password are required"}), 400

    # Kiểm tra user đã tồn tại chưa
    if user_exists(username):
        return jsonify({"error": "User already exists"}), 400

    success, result = add_new_user(username, password)
    if not success:
        return jsonify({"error": result}), 400

    return jsonify({
        "message": "User created successfully",
        "user": username
    }), 201


@auth_bp.route('/api/login', methods=['POST'])
def login_user():
    """ĐĂNG NHẬP - lưu user_id vào session"""
    username, password = _read_credentials()
    if not username or not password:
        return jsonify({"error": "Username and password are required"}), 400

    if not verify_user_credentials(username, password):
        logger.info("Failed login for '%s'", username)
        return jsonify({"error": "Invalid credentials"}), 401

    session.clear()
    session["user_id"] = get_user_id(username)
    session["username"] = username
    return jsonify({
        "message": "Logged in",
        "user": username
    }), 200


@auth_bp.route('/api/logout', methods=['POST'])
@login_required
def logout_user():
    session.clear()
    return jsonify({"message": "Logged out successfully"})


@auth_bp.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})
