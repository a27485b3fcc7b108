"""
errors.py — Các exception dùng chung cho core (parse + sinh mã TOTP).

Phân loại:
- ProtocolError          : varint / framing sai định dạng
- TruncatedDataError     : độ dài khai báo vượt quá phần còn lại của buffer
- ValidationError        : thiếu trường bắt buộc (vd: URI không có `secret`)
- UnsupportedFormatError : không phải otpauth://totp/ hay otpauth-migration://
- GenerationError        : không tính được mã TOTP

Tất cả lỗi parse đều mang theo offset / field_number (nếu có) để log chẩn đoán.
Không retry: parse là tất định, chạy lại cũng không khác.
"""

from typing import Optional


class OtpError(Exception):
    """Base class cho mọi lỗi của package core."""


class OtpParseError(OtpError):
    """Lỗi khi parse dữ liệu QR (URI hoặc migration payload)."""

    def __init__(self, message: str, offset: Optional[int] = None, field_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.field_number = field_number

    def __str__(self) -> str:
        context = []
        if self.offset is not None:
            context.append(f"offset={self.offset}")
        if self.field_number is not None:
            context.append(f"field={self.field_number}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class ProtocolError(OtpParseError):
    """Varint hoặc tag không hợp lệ."""


class TruncatedDataError(OtpParseError):
    """Trường length-delimited dài hơn phần buffer còn lại."""


class ValidationError(OtpParseError):
    """Thiếu trường bắt buộc hoặc giá trị không dùng được."""


class UnsupportedFormatError(OtpParseError):
    """Dữ liệu QR không thuộc định dạng nào được hỗ trợ."""


class GenerationError(OtpError):
    """Không sinh được mã TOTP (secret rỗng, thời gian âm...)."""
