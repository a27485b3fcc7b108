"""Tests for the normalized entry and parse result types."""

import pytest

from core.entries import NormalizedOtpEntry, ParseResult
from core.errors import TruncatedDataError


@pytest.mark.parametrize(
    "label, issuer, expected",
    [
        ("alice", "GitHub", "alice (GitHub)"),
        ("alice@github.com", "git", "alice@github.com (git)"),
        ("GitHub:alice", "GitHub", "GitHub:alice"),
        ("alice", "Unknown", "alice"),
        ("alice", "Google Authenticator", "alice"),
        ("Example", "Example", "Example"),
        ("", "Example", "Example"),
    ],
)
def test_user_info(label: str, issuer: str, expected: str) -> None:
    entry = NormalizedOtpEntry(label=label, issuer=issuer, secret="JBSWY3DPEHPK3PXP")
    assert entry.user_info == expected


class TestParseResult:
    def test_success_without_entries_is_failure(self) -> None:
        result = ParseResult.success([])
        assert not result.ok
        assert not result.is_corrupt

    def test_failure_keeps_error(self) -> None:
        error = TruncatedDataError("Declared length 9 exceeds remaining 3 bytes", offset=1)
        result = ParseResult.failure(error, prefix="Failed: ")
        assert result.entries == []
        assert result.is_corrupt
        assert result.message == "Failed: Declared length 9 exceeds remaining 3 bytes (offset=1)"
