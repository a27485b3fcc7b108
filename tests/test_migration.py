"""Tests for the migration payload decoder."""

import base64

import pytest

from core import base32
from core.errors import ProtocolError, TruncatedDataError, ValidationError, UnsupportedFormatError
from core.migration import (
    NO_MIGRATION_ENTRIES_MESSAGE,
    extract_migration_data,
    parse_migration_payload,
    parse_migration_uri,
    parse_otp_parameter,
)

from conftest import (
    SAMPLE_MIGRATION_SECRET,
    SAMPLE_MIGRATION_URI,
    length_delimited,
    migration_payload,
    otp_parameter,
    varint,
)


class TestParseOtpParameter:
    def test_basic(self) -> None:
        entry = parse_otp_parameter(otp_parameter(b"Hello!", "bob@example.com"))
        assert entry.label == "bob@example.com"
        assert entry.secret == base32.encode(b"Hello!")
        assert entry.issuer == "Google Authenticator"

    def test_issuer_after_name_is_kept(self) -> None:
        entry = parse_otp_parameter(otp_parameter(b"key", "alice", "GitHub"))
        assert entry.issuer == "GitHub"
        assert entry.user_info == "alice (GitHub)"

    def test_reordered_fields(self) -> None:
        data = length_delimited(3, b"Svc") + length_delimited(2, b"n") + length_delimited(1, b"k")
        entry = parse_otp_parameter(data)
        assert (entry.label, entry.issuer, entry.secret) == ("n", "Svc", base32.encode(b"k"))

    def test_missing_secret_is_dropped(self) -> None:
        assert parse_otp_parameter(otp_parameter(secret=None)) is None

    def test_empty_name_is_dropped(self) -> None:
        assert parse_otp_parameter(otp_parameter(name="")) is None

    def test_malformed_sub_message_is_dropped(self) -> None:
        assert parse_otp_parameter(b"\x0a\x7fabc") is None

    def test_utf8_name(self) -> None:
        entry = parse_otp_parameter(otp_parameter(name="người dùng"))
        assert entry.label == "người dùng"


class TestParseMigrationPayload:
    def test_single_entry(self) -> None:
        result = parse_migration_payload(migration_payload(otp_parameter(b"Hello!", "bob@example.com")))
        assert result.ok
        assert len(result.entries) == 1
        assert result.entries[0].secret == "JBSWY3DPEE======"
        assert result.entries[0].label == "bob@example.com"

    def test_multiple_entries_keep_order(self) -> None:
        raw = migration_payload(
            otp_parameter(b"a", "first"),
            otp_parameter(secret=None, name="broken"),
            otp_parameter(b"c", "third", "Svc"),
        )
        result = parse_migration_payload(raw)
        assert [e.label for e in result.entries] == ["first", "third"]

    def test_empty_buffer_is_business_failure(self) -> None:
        result = parse_migration_payload(b"")
        assert not result.ok
        assert not result.is_corrupt
        assert result.entries == []
        assert result.message == NO_MIGRATION_ENTRIES_MESSAGE

    def test_truncated_buffer(self) -> None:
        raw = migration_payload(otp_parameter())
        result = parse_migration_payload(raw[:10])
        assert not result.ok
        assert result.entries == []
        assert isinstance(result.error, TruncatedDataError)
        assert result.message.startswith("Failed to parse migration data")

    def test_overlong_varint(self) -> None:
        result = parse_migration_payload(b"\x0a" + b"\xff" * 11)
        assert isinstance(result.error, ProtocolError)
        assert result.entries == []

    def test_every_truncation_is_handled(self) -> None:
        raw = migration_payload(otp_parameter(), otp_parameter(b"x", "y"))
        for cut in range(len(raw)):
            result = parse_migration_payload(raw[:cut])
            assert result.ok or result.entries == []

    def test_idempotent(self) -> None:
        raw = migration_payload(otp_parameter(), otp_parameter(b"x", "y", "Z"))
        assert parse_migration_payload(raw) == parse_migration_payload(raw)


class TestSkippedFields:
    def test_unknown_top_level_length_delimited_field(self) -> None:
        raw = length_delimited(9, b"batch metadata") + migration_payload(otp_parameter(b"Hello!", "bob"))
        result = parse_migration_payload(raw)
        assert [e.label for e in result.entries] == ["bob"]

    def test_top_level_fixed_width_wire_type_advances_one_byte(self) -> None:
        # field 10, wire type 5, followed by a single filler byte
        raw = bytes([(10 << 3) | 5, 0x00]) + migration_payload(otp_parameter(b"Hello!", "bob"))
        result = parse_migration_payload(raw)
        assert [e.label for e in result.entries] == ["bob"]
        assert result.entries[0].secret == "JBSWY3DPEE======"

    def test_unknown_length_delimited_field_inside_parameter(self) -> None:
        param = length_delimited(8, b"\x0a\x02zz") + otp_parameter(b"Hello!", "bob", "Acme")
        result = parse_migration_payload(migration_payload(param))
        (entry,) = result.entries
        assert (entry.label, entry.issuer, entry.secret) == ("bob", "Acme", "JBSWY3DPEE======")

    def test_top_level_field_1_with_varint_wire_type_is_skipped(self) -> None:
        raw = bytes([(1 << 3) | 0]) + varint(300) + migration_payload(otp_parameter(b"k", "carol"))
        result = parse_migration_payload(raw)
        assert [e.label for e in result.entries] == ["carol"]


class TestMigrationUri:
    def test_sample_export(self) -> None:
        result = parse_migration_uri(SAMPLE_MIGRATION_URI)
        assert result.ok
        (entry,) = result.entries
        assert entry.label == "S1520958"
        assert entry.issuer == "angelone.in"
        assert entry.secret == SAMPLE_MIGRATION_SECRET

    def test_url_safe_base64_without_padding(self) -> None:
        raw = migration_payload(otp_parameter(b"\xfb\xff\xfe" * 5, "urlsafe"))
        data = base64.urlsafe_b64encode(raw).decode().rstrip("=")
        assert extract_migration_data(f"otpauth-migration://offline?data={data}") == raw

    def test_plus_is_not_a_space(self) -> None:
        raw = migration_payload(otp_parameter(b"\x00\x00" + b"\xfb\xef\xbe" * 5, "plus"))
        data = base64.b64encode(raw).decode()
        assert "+" in data
        assert extract_migration_data(f"otpauth-migration://offline?data={data}") == raw

    def test_missing_data(self) -> None:
        with pytest.raises(ValidationError):
            extract_migration_data("otpauth-migration://offline?foo=bar")

    def test_invalid_base64(self) -> None:
        result = parse_migration_uri("otpauth-migration://offline?data=A")
        assert isinstance(result.error, ValidationError)

    def test_wrong_scheme(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            extract_migration_data("otpauth://totp/x?secret=AAAA")
