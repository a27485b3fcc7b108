"""
wire.py — Bộ đọc wire format kiểu protobuf tối giản (varint + length-delimited).

Chỉ đủ dùng cho payload otpauth-migration, không phải protobuf đầy đủ:
- wire type 0 (varint): đọc rồi bỏ qua giá trị
- wire type 2 (length-delimited): trả về bytes
- wire type khác: nhảy 1 byte (best-effort, không chính xác tuyệt đối)

Mọi hàm đều nhận (buf, offset) và trả về offset kế tiếp, không giữ state.
"""

from typing import Iterator, Optional, Tuple, Union

from .errors import ProtocolError, TruncatedDataError

WIRE_VARINT = 0
WIRE_LENGTH_DELIMITED = 2

MAX_VARINT_SHIFT = 63


def read_varint(buf: bytes, offset: int) -> Tuple[int, int]:
    """
    Đọc varint little-endian base-128 tại offset.

    Trả về:
        (value, next_offset)
    Raises:
        ProtocolError: varint dài quá 64 bit
        TruncatedDataError: hết buffer khi bit tiếp nối (0x80) vẫn bật
    """
    start = offset
    value = 0
    shift = 0
    while True:
        if shift > MAX_VARINT_SHIFT:
            raise ProtocolError("Varint exceeds 64 bits", offset=start)
        if offset >= len(buf):
            raise TruncatedDataError("Buffer ended inside varint", offset=start)
        byte = buf[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7


def read_tag(buf: bytes, offset: int) -> Tuple[int, int, int]:
    """
    Đọc tag 1 byte: field_number = byte >> 3, wire_type = byte & 0x7.

    Trả về:
        (field_number, wire_type, next_offset)
    """
    if offset >= len(buf):
        raise TruncatedDataError("Buffer ended before tag", offset=offset)
    tag = buf[offset]
    return tag >> 3, tag & 0x07, offset + 1


def read_length_delimited(buf: bytes, offset: int, field_number: Optional[int] = None) -> Tuple[bytes, int]:
    """
    Đọc trường length-delimited: varint độ dài rồi đến payload.

    Luôn kiểm tra offset + length <= len(buf) trước khi cắt.
    """
    length, offset = read_varint(buf, offset)
    if offset + length > len(buf):
        raise TruncatedDataError(
            f"Declared length {length} exceeds remaining {len(buf) - offset} bytes",
            offset=offset,
            field_number=field_number,
        )
    return bytes(buf[offset:offset + length]), offset + length


def skip_field(buf: bytes, offset: int, wire_type: int) -> int:
    """Bỏ qua giá trị của một trường, trả về offset kế tiếp."""
    if wire_type == WIRE_VARINT:
        _, offset = read_varint(buf, offset)
        return offset
    if wire_type == WIRE_LENGTH_DELIMITED:
        _, offset = read_length_delimited(buf, offset)
        return offset
    # wire type 1/5 (fixed64/fixed32) không xuất hiện trong payload migration
    return offset + 1


def iter_fields(buf: bytes) -> Iterator[Tuple[int, int, Union[bytes, int, None], int]]:
    """
    Duyệt lần lượt các trường trong buffer.

    Yield:
        (field_number, wire_type, value, offset)
        - value là bytes với wire type 2, int với wire type 0, None với loại khác
        - offset là vị trí tag của trường (dùng cho log)
    """
    offset = 0
    while offset < len(buf):
        tag_offset = offset
        field_number, wire_type, offset = read_tag(buf, offset)
        if wire_type == WIRE_LENGTH_DELIMITED:
            value, offset = read_length_delimited(buf, offset, field_number)
        elif wire_type == WIRE_VARINT:
            value, offset = read_varint(buf, offset)
        else:
            value = None
            offset = skip_field(buf, offset, wire_type)
        yield field_number, wire_type, value, tag_offset
