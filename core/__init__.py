"""
core package
============

Codec TOTP + bộ giải mã dữ liệu chuyển tài khoản (Google Authenticator migration).

──────────────────────────────────────────────
Giải thuật cốt lõi
──────────────────────────────────────────────
- TOTP (RFC 6238): HOTP với counter = floor(timestamp / 30)
  code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^6
  → Cố định SHA-1, 30 giây, 6 chữ số (giống Google Authenticator).

- Base32 (RFC 4648): secret lưu dưới dạng chữ A-Z2-7.
  Decode dễ dãi: bỏ qua ký tự lạ, dừng ở '='.

- otpauth-migration: payload wire format kiểu protobuf, mỗi trường 1 (lặp lại)
  là một tài khoản: secret (bytes), name, issuer.

──────────────────────────────────────────────
Ví dụ sử dụng nhanh
──────────────────────────────────────────────
>>> from core import import_qr_data, generate_totp
>>> result = import_qr_data("otpauth://totp/Alice?secret=JBSWY3DPEHPK3PXP&issuer=Example")
>>> entry = result.entries[0]
>>> entry.user_info
'Alice (Example)'
>>> generate_totp("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", at_time=59)
'287082'
"""
from .entries import NormalizedOtpEntry, ParseResult
from .errors import (
    GenerationError,
    OtpError,
    OtpParseError,
    ProtocolError,
    TruncatedDataError,
    UnsupportedFormatError,
    ValidationError,
)
from .importer import Format, import_qr_data, sniff_format
from .migration import parse_migration_payload, parse_migration_uri
from .otp_core import TokenTicker, generate_totp, next_refresh_at, seconds_remaining
from .otpauth import build_export_uri, parse_totp_uri

__all__ = [
    "NormalizedOtpEntry",
    "ParseResult",
    "OtpError",
    "OtpParseError",
    "ProtocolError",
    "TruncatedDataError",
    "ValidationError",
    "UnsupportedFormatError",
    "GenerationError",
    "Format",
    "sniff_format",
    "import_qr_data",
    "parse_migration_payload",
    "parse_migration_uri",
    "parse_totp_uri",
    "build_export_uri",
    "generate_totp",
    "seconds_remaining",
    "next_refresh_at",
    "TokenTicker",
]
