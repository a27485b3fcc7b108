"""
otpauth.py — Parse / tạo otpauth://totp/ URI (một tài khoản mỗi URI).

    otpauth://totp/<label>?secret=<Base32>&issuer=<issuer>

Secret trong URI đã là Base32 nên chỉ bỏ khoảng trắng + in hoa, KHÔNG encode lại.
"""

from urllib.parse import parse_qs, quote, unquote, urlsplit

from . import base32
from .entries import DEFAULT_URI_ISSUER, NormalizedOtpEntry
from .errors import UnsupportedFormatError, ValidationError

OTPAUTH_SCHEME = "otpauth"
EXPORT_ISSUER = "TOTP Manager"


def normalize_secret(secret: str) -> str:
    """
    Bỏ khoảng trắng, in hoa một Base32 secret đã có sẵn (không encode lại).

    Raises:
        ValidationError: secret rỗng hoặc không giải mã ra byte key nào
    """
    secret = "".join(secret.split()).upper()
    if not secret:
        raise ValidationError("Secret is empty")
    if not base32.is_valid_secret(secret):
        raise ValidationError("Secret is not valid Base32")
    return secret


def parse_totp_uri(uri: str) -> NormalizedOtpEntry:
    """
    Parse otpauth://totp/... thành NormalizedOtpEntry.

    - label  = phần path sau "totp/", đã percent-decode
    - secret = query `secret` (bắt buộc)
    - issuer = query `issuer` (tùy chọn, mặc định "Unknown")
    - label rỗng thì dùng issuer làm label

    Raises:
        UnsupportedFormatError: không phải otpauth://totp/
        ValidationError: thiếu secret hoặc secret không giải mã ra key
    """
    parts = urlsplit(uri.strip())
    if parts.scheme.lower() != OTPAUTH_SCHEME or parts.netloc.lower() != "totp":
        raise UnsupportedFormatError("Only otpauth://totp/ URIs are supported")

    label = unquote(parts.path.lstrip("/")).strip()
    params = parse_qs(parts.query, keep_blank_values=True)

    raw_secret = params.get("secret", [""])[0]
    if not raw_secret.strip():
        raise ValidationError("Missing 'secret' parameter in otpauth URI")
    secret = normalize_secret(raw_secret)

    issuer = params.get("issuer", [""])[0].strip() or DEFAULT_URI_ISSUER
    return NormalizedOtpEntry(label=label or issuer, issuer=issuer, secret=secret)


def build_export_uri(user_info: str, secret: str, issuer: str = EXPORT_ISSUER) -> str:
    """Tạo URI để xuất một entry (import lại vào app Authenticator)."""
    return f"otpauth://totp/{quote(user_info, safe='')}?secret={secret}&issuer={quote(issuer, safe='')}"
