"""
TOTP API ROUTES - FLASK BLUEPRINT

Quản lý danh sách tài khoản TOTP của user đã đăng nhập.
Mọi endpoint có prefix /api/totp và yêu cầu session.

Ví dụ:
- GET    /api/totp
- POST   /api/totp/import          {"qrData": "otpauth-migration://offline?data=..."}
- GET    /api/totp/<id>/generate
- GET    /api/totp/<id>/export
"""

import base64
import io
import logging

import qrcode
from flask import Blueprint, current_app, jsonify, session

from backend.routes import login_required, read_json_object, string_field
from core.importer import import_qr_data
from core.otp_core import generate_totp, seconds_remaining
from core.otpauth import build_export_uri, normalize_secret
from database.db_manager import (
    clear_totps,
    delete_totp,
    get_totp,
    list_totps,
    save_totp,
    save_totps,
)

logger = logging.getLogger(__name__)

totp_bp = Blueprint('totp', __name__, url_prefix='/api/totp')


def _not_found():
    return jsonify({"error": "TOTP not found"}), 404


@totp_bp.route('', methods=['GET'])
@login_required
def list_entries():
    """LẤY DANH SÁCH TOTP CỦA USER"""
    return jsonify(list_totps(session["user_id"]))


@totp_bp.route('', methods=['POST'])
@login_required
def add_entry():
    """
    THÊM MỘT TOTP

    Input: {"userInfo": "alice@example.com", "secret": "JBSWY3DPEHPK3PXP"}
    """
    data = read_json_object()
    user_info = string_field(data, 'userInfo')
    secret = string_field(data, 'secret')

    if not user_info or not secret:
        return jsonify({"error": "User info and secret are required"}), 400

    # ValidationError -> 400 qua errorhandler trong app.py
    secret = normalize_secret(secret)

    record = save_totp(session["user_id"], user_info, secret)
    record["username"] = session.get("username")
    return jsonify(record), 201


@totp_bp.route('/<string:totp_id>', methods=['DELETE'])
@login_required
def delete_entry(totp_id):
    if not delete_totp(totp_id, session["user_id"]):
        return jsonify({"error": "TOTP not found or unauthorized"}), 404
    return jsonify({"message": "TOTP deleted successfully"})


@totp_bp.route('/<string:totp_id>/generate', methods=['GET'])
@login_required
def generate_token(totp_id):
    """
    SINH MÃ TOTP HIỆN TẠI

    Output: {"token": "123456", "remaining": 17}
    """
    record = get_totp(totp_id, session["user_id"])
    if record is None:
        return _not_found()

    # GenerationError -> 500 qua errorhandler trong app.py
    token = generate_totp(record["secret"])
    return jsonify({"token": token, "remaining": seconds_remaining()})


@totp_bp.route('/<string:totp_id>/export', methods=['GET'])
@login_required
def export_entry(totp_id):
    record = get_totp(totp_id, session["user_id"])
    if record is None:
        return _not_found()

    uri = build_export_uri(record["userInfo"], record["secret"], current_app.config["EXPORT_ISSUER"])
    return jsonify({"uri": uri})


@totp_bp.route('/<string:totp_id>/qr_code', methods=['GET'])
@login_required
def export_qr_code(totp_id):
    """
    TẠO QR CODE (PNG base64) CHO URI EXPORT

    Output: {"qr_code": "data:image/png;base64,...", "uri": "otpauth://totp/..."}
    """
    record = get_totp(totp_id, session["user_id"])
    if record is None:
        return _not_found()

    uri = build_export_uri(record["userInfo"], record["secret"], current_app.config["EXPORT_ISSUER"])

    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({
        "qr_code": f"data:image/png;base64,{img_str}",
        "uri": uri
    })


@totp_bp.route('/clear-all', methods=['POST'])
@login_required
def clear_all():
    count = clear_totps(session["user_id"])
    logger.info("Cleared %d entries for user %s", count, session["user_id"])
    return jsonify({"message": "All TOTPs cleared successfully", "count": count})


@totp_bp.route('/import', methods=['POST'])
@login_required
def import_entries():
    """
    IMPORT TỪ DỮ LIỆU QR

    Input:  {"qrData": "otpauth://totp/..." hoặc "otpauth-migration://offline?data=..."}
    Output: {"success": true, "count": 2, "totps": [...]}

    - Dữ liệu hỏng / không hỗ trợ -> 400 "Failed to parse QR data: ..."
    - Parse được nhưng không có entry hợp lệ -> 400 "No valid TOTP entries found"
    """
    qr_data = read_json_object().get('qrData')
    if qr_data is None or qr_data == '':
        return jsonify({"error": "QR data is required"}), 400
    if not isinstance(qr_data, str):
        return jsonify({"error": "Failed to parse QR data: qrData must be a string"}), 400

    result = import_qr_data(qr_data)
    if result.is_corrupt:
        return jsonify({"error": f"Failed to parse QR data: {result.error}"}), 400
    if not result.ok:
        return jsonify({"error": "No valid TOTP entries found", "detail": result.message}), 400

    records = save_totps(
        session["user_id"],
        [(entry.user_info, entry.secret) for entry in result.entries],
    )
    for record in records:
        record["username"] = session.get("username")

    return jsonify({
        "success": True,
        "count": len(records),
        "totps": records
    })
