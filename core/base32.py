"""
base32.py — Base32 (RFC 4648) encode/decode, decode viết tay.

Encode dùng base64.b32encode. Decode thì không dùng base64.b32decode vì nó quá chặt:
secret được quét từ QR / gõ tay thường có khoảng trắng, dấu gạch, chữ thường hoặc thiếu padding.
decode() ở đây cố tình "dễ dãi": bỏ qua ký tự lạ thay vì raise.
"""

import base64

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_LOOKUP = {ch: i for i, ch in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Mã hóa bytes -> chuỗi Base32 in hoa, có padding '=' đến bội số của 8.

    Ví dụ: encode(b"Hello!") -> "JBSWY3DPEE======"
    """
    return base64.b32encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """
    Giải mã Base32 -> bytes, không bao giờ raise.

    - Không phân biệt hoa/thường.
    - Gặp '=' thì dừng (coi như padding cuối dữ liệu).
    - Ký tự ngoài bảng chữ cái bị bỏ qua.
    - Bit thừa (< 8) ở cuối bị bỏ.
    """
    out = bytearray()
    buffer = 0
    bits = 0
    for ch in text.upper():
        if ch == "=":
            break
        value = _LOOKUP.get(ch)
        if value is None:
            continue
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)


def is_valid_secret(text: str) -> bool:
    """True nếu secret giải mã ra ít nhất 1 byte key."""
    return bool(decode(text))
