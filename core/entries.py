"""
entries.py — Kiểu dữ liệu chuẩn hóa mà các parser trả về.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import OtpParseError

DEFAULT_URI_ISSUER = "Unknown"
DEFAULT_MIGRATION_ISSUER = "Google Authenticator"
DEFAULT_ISSUERS = (DEFAULT_URI_ISSUER, DEFAULT_MIGRATION_ISSUER)

NO_ENTRIES_MESSAGE = "No valid TOTP entries found"


@dataclass(frozen=True)
class NormalizedOtpEntry:
    """
    Một tài khoản TOTP đã chuẩn hóa.

    - label: tên hiển thị (có thể rỗng, caller tự fallback)
    - issuer: nhà phát hành, mặc định là sentinel tùy nguồn
    - secret: Base32 in hoa, không có khoảng trắng
    """

    label: str
    issuer: str
    secret: str

    @property
    def user_info(self) -> str:
        """
        Chuỗi hiển thị lưu vào DB: "label (issuer)" hoặc chỉ label.

        Chỉ dùng label khi issuer là sentinel, trùng label, hoặc label đã có
        dạng "issuer:account" (otpauth URI hay ghi như vậy).
        """
        if not self.label:
            return self.issuer
        if (
            self.issuer in DEFAULT_ISSUERS
            or self.label == self.issuer
            or self.label.startswith(f"{self.issuer}:")
        ):
            return self.label
        return f"{self.label} ({self.issuer})"

    def to_dict(self) -> dict:
        return {
            "userInfo": self.user_info,
            "label": self.label,
            "issuer": self.issuer,
            "secret": self.secret,
        }


@dataclass
class ParseResult:
    """
    Kết quả parse: danh sách entry + trạng thái.

    Bất biến:
    - thất bại => entries rỗng
    - thành công => entries không rỗng (0 entry hợp lệ cũng là thất bại)
    - error != None nghĩa là dữ liệu hỏng; error == None mà ok=False nghĩa là
      "không có gì để import"
    """

    entries: List[NormalizedOtpEntry] = field(default_factory=list)
    message: str = ""
    error: Optional[OtpParseError] = None

    @property
    def ok(self) -> bool:
        return bool(self.entries)

    @property
    def is_corrupt(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, entries: List[NormalizedOtpEntry]) -> "ParseResult":
        if not entries:
            return cls.empty()
        return cls(entries=list(entries), message=f"Parsed {len(entries)} TOTP entries")

    @classmethod
    def empty(cls, message: str = NO_ENTRIES_MESSAGE) -> "ParseResult":
        return cls(entries=[], message=message)

    @classmethod
    def failure(cls, error: OtpParseError, prefix: str = "") -> "ParseResult":
        return cls(entries=[], message=f"{prefix}{error}", error=error)
