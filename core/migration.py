"""
migration.py — Giải mã payload "otpauth-migration://offline?data=..." (xuất tài khoản
hàng loạt từ Google Authenticator).

Cấu trúc payload (wire format kiểu protobuf):
    MigrationPayload
      field 1 (lặp lại, length-delimited) : OtpParameters
      field 2..5 (varint)                 : version, batch_size, batch_index, batch_id -> bỏ qua
    OtpParameters
      field 1 : secret (raw bytes)  -> encode Base32
      field 2 : name   (UTF-8)
      field 3 : issuer (UTF-8)
      field 4..7 (varint) : algorithm, digits, type, counter -> bỏ qua (luôn coi là SHA1 / 6 số)

Lưu ý: ở đây secret là raw bytes nên phải Base32-encode, khác với otpauth:// URI
(secret trong URI đã là Base32 sẵn).
"""

import base64
import binascii
import logging
from typing import Optional
from urllib.parse import unquote, urlsplit

from . import base32
from .entries import DEFAULT_MIGRATION_ISSUER, NormalizedOtpEntry, ParseResult
from .errors import OtpParseError, UnsupportedFormatError, ValidationError
from .wire import WIRE_LENGTH_DELIMITED, iter_fields

logger = logging.getLogger(__name__)

MIGRATION_SCHEME = "otpauth-migration"
NO_MIGRATION_ENTRIES_MESSAGE = "No valid TOTP data found in migration format"

FIELD_OTP_PARAMETERS = 1
FIELD_SECRET = 1
FIELD_NAME = 2
FIELD_ISSUER = 3


def _utf8(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def parse_otp_parameter(data: bytes) -> Optional[NormalizedOtpEntry]:
    """
    Parse một sub-message OtpParameters.

    - Đọc hết slice (không dừng sớm khi đã có secret + name), để issuer
      nằm sau name vẫn được lấy và thứ tự trường khác đi vẫn parse đúng.
    - Chỉ trả về entry khi có đủ secret và name; thiếu thì trả None (không phải lỗi).
    - Lỗi framing bên trong sub-message chỉ làm rơi entry này.
    """
    secret = b""
    name = ""
    issuer = ""
    try:
        for field_number, wire_type, value, _ in iter_fields(data):
            if wire_type != WIRE_LENGTH_DELIMITED:
                continue
            if field_number == FIELD_SECRET:
                secret = value
            elif field_number == FIELD_NAME:
                name = _utf8(value)
            elif field_number == FIELD_ISSUER:
                issuer = _utf8(value)
    except OtpParseError as e:
        logger.warning("Dropping malformed OTP parameter: %s", e)
        return None

    if not secret or not name:
        logger.debug("Skipping OTP parameter without secret or name")
        return None

    return NormalizedOtpEntry(
        label=name,
        issuer=issuer or DEFAULT_MIGRATION_ISSUER,
        secret=base32.encode(secret),
    )


def parse_migration_payload(raw: bytes) -> ParseResult:
    """
    Parse toàn bộ payload đã Base64-decode.

    Trả về:
        ParseResult
        - lỗi framing ở tầng ngoài cùng -> failure có error (dữ liệu hỏng)
        - parse xong nhưng 0 entry hợp lệ -> failure không có error
    """
    entries = []
    try:
        for field_number, wire_type, value, offset in iter_fields(raw):
            if field_number != FIELD_OTP_PARAMETERS or wire_type != WIRE_LENGTH_DELIMITED:
                continue
            entry = parse_otp_parameter(value)
            if entry is None:
                logger.debug("OTP parameter at offset %d yielded no entry", offset)
                continue
            entries.append(entry)
    except OtpParseError as e:
        logger.warning("Migration payload rejected: %s", e)
        return ParseResult.failure(e, prefix="Failed to parse migration data: ")

    if not entries:
        return ParseResult.empty(NO_MIGRATION_ENTRIES_MESSAGE)
    logger.info("Decoded %d entries from migration payload", len(entries))
    return ParseResult.success(entries)


def extract_migration_data(uri: str) -> bytes:
    """
    Lấy tham số `data` từ otpauth-migration URI và Base64-decode.

    - Không dùng parse_qs vì nó biến '+' thành khoảng trắng.
    - Chấp nhận cả Base64 chuẩn lẫn URL-safe, có hoặc không có padding.

    Raises:
        UnsupportedFormatError: scheme không phải otpauth-migration
        ValidationError: thiếu `data` hoặc Base64 không hợp lệ
    """
    parts = urlsplit(uri.strip())
    if parts.scheme.lower() != MIGRATION_SCHEME:
        raise UnsupportedFormatError(f"Not an {MIGRATION_SCHEME} URI")

    encoded = None
    for pair in parts.query.split("&"):
        key, _, value = pair.partition("=")
        if key == "data":
            encoded = unquote(value)
            break
    if not encoded:
        raise ValidationError("Missing 'data' parameter in migration URI")

    encoded = "".join(encoded.replace(" ", "+").split())
    encoded = encoded.replace("-", "+").replace("_", "/").rstrip("=")
    encoded += "=" * (-len(encoded) % 4)
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 in migration data: {e}") from e


def parse_migration_uri(uri: str) -> ParseResult:
    """extract_migration_data + parse_migration_payload, lỗi trả về dạng ParseResult."""
    try:
        raw = extract_migration_data(uri)
    except OtpParseError as e:
        logger.warning("Migration URI rejected: %s", e)
        return ParseResult.failure(e)
    return parse_migration_payload(raw)
