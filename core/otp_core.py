#!/usr/bin/env python3
"""
otp_core.py — Core library sinh mã TOTP (RFC 6238) + tiện ích đếm ngược.

Mục tiêu:
- Chứa các hàm thuần (pure functions) để backend / CLI gọi trực tiếp.
- Cố định theo chuẩn các app Authenticator phổ biến: HMAC-SHA1, 30 giây, 6 chữ số.
- Không đọc/ghi file, không giữ state giữa các lần gọi.

Lưu ý:
- Không có fallback "mã ngẫu nhiên" khi lỗi: secret rỗng hoặc thời gian không hợp lệ
  sẽ raise GenerationError để caller biết và xử lý.
- Secret giải mã ra 0 byte (toàn ký tự rác) vẫn tính được mã vì HMAC nhận key mọi độ dài.
"""

import hashlib
import hmac
import math
import struct
import time
from typing import Optional

from . import base32
from .errors import GenerationError

# --- Config / constants ----------------------------------------------------
DIGITS = 6          # chuẩn: 6 chữ số
TIME_STEP = 30      # TOTP step (giây), cố định
MAX_COUNTER = 2 ** 64 - 1  # counter đóng gói 8 byte


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Chuyển integer (counter) sang 8-byte big-endian như RFC4226 yêu cầu.

    Ví dụ: int_to_bytes(1) -> b'\x00\x00\x00\x00\x00\x00\x00\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Áp dụng dynamic truncation theo RFC4226.

    - Lấy offset = last_byte & 0x0F
    - Lấy 4 bytes từ offset (big-endian), clear bit dấu (& 0x7FFFFFFF)
    - Trả về integer 31-bit (unsigned)
    """
    offset = hmac_digest[-1] & 0x0F
    (value,) = struct.unpack(">I", hmac_digest[offset:offset + 4])
    return value & 0x7FFFFFFF


def _normalize_time(at_time: Optional[float]) -> float:
    if at_time is None:
        return time.time()
    if isinstance(at_time, bool) or not isinstance(at_time, (int, float)):
        raise GenerationError(f"Invalid time value: {at_time!r}")
    if isinstance(at_time, float) and (math.isnan(at_time) or math.isinf(at_time)):
        raise GenerationError(f"Time must be a finite number, got {at_time!r}")
    if at_time < 0:
        raise GenerationError(f"Time must be non-negative, got {at_time!r}")
    return at_time


def time_step(at_time: Optional[float] = None) -> int:
    """Counter T = floor(t / 30), tối đa 2^64 - 1."""
    step = int(_normalize_time(at_time) // TIME_STEP)
    if step > MAX_COUNTER:
        raise GenerationError(f"Time {at_time!r} is beyond the 64-bit TOTP counter")
    return step


def generate_totp(secret_b32: str, at_time: Optional[float] = None) -> str:
    """
    Sinh mã TOTP 6 chữ số.

    Steps:
    1. Bỏ khoảng trắng, in hoa, Base32-decode (dễ dãi) -> raw key
    2. T = floor(t / 30), đóng gói 8 byte big-endian
    3. HMAC-SHA1(key, T)
    4. Dynamic truncate -> % 10^6
    5. Zero-pad đủ 6 chữ số ("000042" chứ không phải "42")

    Arguments:
        secret_b32: Base32 secret
        at_time: epoch seconds (None -> time.time())

    Raises:
        GenerationError: secret rỗng / không phải str, thời gian âm hoặc quá lớn
    """
    if not isinstance(secret_b32, str) or not secret_b32.strip():
        raise GenerationError("Secret is empty")

    counter = time_step(at_time)
    key = base32.decode("".join(secret_b32.split()).upper())
    digest = hmac.new(key, int_to_bytes(counter), hashlib.sha1).digest()
    del key
    code = dynamic_truncate(digest) % (10 ** DIGITS)
    return str(code).zfill(DIGITS)


# --- Countdown helpers -----------------------------------------------------
def seconds_remaining(at_time: Optional[float] = None) -> int:
    """Số giây còn lại của mã hiện tại: 30 - (floor(t) mod 30), trong khoảng 1..30."""
    return TIME_STEP - (int(_normalize_time(at_time)) % TIME_STEP)


def next_refresh_at(at_time: Optional[float] = None) -> int:
    """Thời điểm (epoch) mã kế tiếp bắt đầu, luôn là bội số của 30."""
    return (time_step(at_time) + 1) * TIME_STEP


class TokenTicker:
    """
    Làm mới mã theo ranh giới step, không theo timer cố định.

    Gọi tick(now) mỗi giây; chỉ trả về mã mới khi counter T đổi
    (tức là lúc t mod 30 quay về 0), còn lại trả None.
    Timer 30s chạy từ lúc mount sẽ lệch pha so với step thật.
    """

    def __init__(self, secret_b32: str):
        self.secret_b32 = secret_b32
        self.current_step = None
        self.code = None

    def tick(self, now: Optional[float] = None) -> Optional[str]:
        now = _normalize_time(now)
        step = time_step(now)
        if step == self.current_step:
            return None
        self.current_step = step
        self.code = generate_totp(self.secret_b32, now)
        return self.code

    def remaining(self, now: Optional[float] = None) -> int:
        return seconds_remaining(now)


# If this module is executed directly, do nothing — it's core-only for import.
if __name__ == "__main__":
    print("otp_core.py is a library module. Use `totp-manager totp <secret>` instead.")
