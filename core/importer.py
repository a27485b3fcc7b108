"""
importer.py — Nhận text quét từ QR, nhận dạng định dạng rồi chuyển cho parser phù hợp.
"""

import enum
import logging

from .entries import ParseResult
from .errors import OtpParseError, UnsupportedFormatError
from .migration import parse_migration_uri
from .otpauth import parse_totp_uri

logger = logging.getLogger(__name__)


class Format(enum.Enum):
    URI = "uri"
    MIGRATION = "migration"
    UNSUPPORTED = "unsupported"


def sniff_format(text: str) -> Format:
    """Xác định định dạng theo tiền tố scheme (không phân biệt hoa/thường)."""
    prefix = text.strip().lower()
    if prefix.startswith("otpauth-migration://"):
        return Format.MIGRATION
    if prefix.startswith("otpauth://totp/"):
        return Format.URI
    return Format.UNSUPPORTED


def import_qr_data(text: str) -> ParseResult:
    """
    Parse dữ liệu QR thành ParseResult.

    - MIGRATION -> nhiều entry
    - URI       -> đúng 1 entry
    - còn lại   -> failure với UnsupportedFormatError
    """
    fmt = sniff_format(text)
    if fmt is Format.MIGRATION:
        result = parse_migration_uri(text)
    elif fmt is Format.URI:
        try:
            result = ParseResult.success([parse_totp_uri(text)])
        except OtpParseError as e:
            result = ParseResult.failure(e)
    else:
        result = ParseResult.failure(UnsupportedFormatError("Unsupported QR code format"))

    if result.ok:
        logger.info("Imported %d entries (%s)", len(result.entries), fmt.value)
    else:
        logger.info("Import failed (%s): %s", fmt.value, result.message)
    return result
