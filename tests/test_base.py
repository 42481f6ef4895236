"""Tests for shared dataclasses, errors and parsing helpers."""

from datetime import timedelta, timezone

import pytest

from gitstream.base import (
    Blame,
    Commit,
    Event,
    FormatError,
    GitStreamError,
    ProcessError,
    TransportError,
    is_object_hash,
    parse_count,
    parse_epoch,
    parse_offset,
)


class TestIsObjectHash:
    """Tests for is_object_hash."""

    @pytest.mark.parametrize("value", ["a" * 40, "0123456789abcdef" * 4])
    def test_valid(self, value: str) -> None:
        assert is_object_hash(value)

    @pytest.mark.parametrize(
        "value",
        ["", "a" * 39, "a" * 41, "A" * 40, "g" * 40, " " + "a" * 40],
    )
    def test_invalid(self, value: str) -> None:
        assert not is_object_hash(value)


class TestParseOffset:
    """Tests for parse_offset."""

    def test_negative(self) -> None:
        assert parse_offset("-0400") == timezone(timedelta(hours=-4))

    def test_positive_with_minutes(self) -> None:
        assert parse_offset("+0530") == timezone(timedelta(hours=5, minutes=30))

    def test_zero(self) -> None:
        assert parse_offset("+0000").utcoffset(None) == timedelta(0)

    @pytest.mark.parametrize("value", ["0400", "+04:00", "UTC", "+04"])
    def test_malformed(self, value: str) -> None:
        with pytest.raises(FormatError):
            parse_offset(value)

    @pytest.mark.parametrize("value", ["+2400", "-2400", "+9999"])
    def test_out_of_range(self, value: str) -> None:
        """Offsets of a day or more are rejected by timezone()."""
        with pytest.raises(FormatError, match="out of range"):
            parse_offset(value)

    def test_just_under_a_day(self) -> None:
        assert parse_offset("-2359").utcoffset(None) == -timedelta(
            hours=23, minutes=59
        )

class TestParseEpoch:
    """Tests for parse_epoch."""

    def test_utc_by_default(self) -> None:
        when = parse_epoch("1690000000")
        assert when.timestamp() == 1690000000
        assert when.utcoffset() == timedelta(0)

    def test_keeps_given_offset(self) -> None:
        when = parse_epoch("1690000000", parse_offset("-0400"))
        assert when.hour == 0
        assert when.utcoffset() == timedelta(hours=-4)

    def test_malformed(self) -> None:
        with pytest.raises(FormatError):
            parse_epoch("12:00")

    @pytest.mark.parametrize("value", ["99999999999999999999", "-99999999999999"])
    def test_out_of_range(self, value: str) -> None:
        with pytest.raises(FormatError, match="out of range"):
            parse_epoch(value)


class TestParseCount:
    def test_valid(self) -> None:
        assert parse_count("42") == 42

    def test_zero(self) -> None:
        assert parse_count("0") == 0

    @pytest.mark.parametrize(
        "value", ["forty-two", "", "-3", "+3", " 3", "3 ", "1_000", "3\n", "٣"]
    )
    def test_malformed(self, value: str) -> None:
        """Only the plain digits git prints are accepted."""
        with pytest.raises(FormatError):
            parse_count(value)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_hierarchy(self) -> None:
        assert issubclass(FormatError, GitStreamError)
        assert issubclass(TransportError, GitStreamError)
        assert issubclass(ProcessError, GitStreamError)
        assert not issubclass(ProcessError, FormatError)

    def test_process_error_carries_details(self) -> None:
        error = ProcessError(["log", "--format=raw"], 128, "fatal: bad revision\n")
        assert error.command == ["log", "--format=raw"]
        assert error.returncode == 128
        assert error.stderr == "fatal: bad revision\n"
        assert str(error) == "git log exited with status 128: fatal: bad revision"

    def test_process_error_without_stderr(self) -> None:
        assert str(ProcessError(["log"], 1)) == "git log exited with status 1"


class TestDataclasses:
    def test_commit_defaults_are_independent(self) -> None:
        first, second = Commit(), Commit()
        first.parents.append("x")
        first.author.name = "Jane"
        assert second.parents == []
        assert second.author == Event()

    def test_trailing_newline_flag_ignored_in_equality(self) -> None:
        assert Commit(sha="a", has_trailing_newline=True) == Commit(sha="a")

    def test_blame_str(self) -> None:
        entry = Blame(
            sha="a" * 40,
            original_line_no=1,
            final_line_no=1,
            author=Event("Jane", "jane@example.com"),
        )
        assert str(entry) == f"{'a' * 40}: Jane <jane@example.com>"
