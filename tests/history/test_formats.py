"""Tests for the git log format builder and tagged renderer."""

from datetime import datetime, timedelta, timezone

import pytest

from gitstream.base import Commit, Event, FormatError, Stat
from gitstream.history.formats import (
    Scheme,
    build_format,
    format_iso_date,
    parse_iso_date,
    render_tagged,
)

SHA = "a1" * 20
TREE = "b2" * 20
PARENT = "c3" * 20


class TestBuildFormat:
    """Tests for build_format."""

    def test_tagged_format_is_exact(self) -> None:
        """The tagged template must match what the decoder expects byte for byte."""
        assert build_format(Scheme.TAGGED) == (
            "_H:%H%n_T:%T%n_P:%P%n"
            "_aN:%aN%n_aE:%aE%n_aI:%aI%n"
            "_cN:%cN%n_cE:%cE%n_cI:%cI%n"
            "_B:%B%n%x00"
        )

    def test_default_is_tagged(self) -> None:
        assert build_format() == build_format(Scheme.TAGGED)

    def test_native_format_is_raw(self) -> None:
        assert build_format(Scheme.NATIVE) == "raw"

    def test_schemes_are_distinct(self) -> None:
        assert build_format(Scheme.TAGGED) != build_format(Scheme.NATIVE)


class TestIsoDates:
    """Tests for strict ISO 8601 parsing and rendering."""

    def test_parse_keeps_offset(self) -> None:
        result = parse_iso_date("2023-07-22T00:26:40-04:00")
        assert result.utcoffset() == timedelta(hours=-4)
        assert result.timestamp() == 1690000000

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(FormatError):
            parse_iso_date("yesterday")

    def test_parse_rejects_naive(self) -> None:
        """A date without an offset cannot be reproduced exactly."""
        with pytest.raises(FormatError):
            parse_iso_date("2023-07-22T00:26:40")

    def test_format_matches_git(self) -> None:
        tz = timezone(timedelta(hours=5, minutes=30))
        when = datetime(2023, 7, 22, 9, 56, 40, tzinfo=tz)
        assert format_iso_date(when) == "2023-07-22T09:56:40+05:30"

    def test_format_utc(self) -> None:
        when = datetime(2023, 7, 22, 4, 26, 40, tzinfo=timezone.utc)
        assert format_iso_date(when) == "2023-07-22T04:26:40+00:00"

    def test_format_none(self) -> None:
        assert format_iso_date(None) == ""


class TestRenderTagged:
    """Tests for render_tagged."""

    def _commit(self, **kwargs: object) -> Commit:
        when = parse_iso_date("2023-07-22T00:26:40-04:00")
        defaults: dict[str, object] = {
            "sha": SHA,
            "tree": TREE,
            "parents": [PARENT],
            "author": Event("Jane A. Doe", "jane@example.com", when),
            "committer": Event("John Smith", "john@example.com", when),
            "message": "Subject\n\nBody\n",
        }
        defaults.update(kwargs)
        return Commit(**defaults)  # type: ignore[arg-type]

    def test_render_without_stats(self) -> None:
        result = render_tagged(self._commit())
        assert result == (
            f"_H:{SHA}\n"
            f"_T:{TREE}\n"
            f"_P:{PARENT}\n"
            "_aN:Jane A. Doe\n"
            "_aE:jane@example.com\n"
            "_aI:2023-07-22T00:26:40-04:00\n"
            "_cN:John Smith\n"
            "_cE:john@example.com\n"
            "_cI:2023-07-22T00:26:40-04:00\n"
            "_B:Subject\n\nBody\n\n\x00\n"
        )

    def test_render_root_commit_has_empty_parent_line(self) -> None:
        result = render_tagged(self._commit(parents=[]))
        assert "\n_P:\n" in result

    def test_render_merge_joins_parents_in_order(self) -> None:
        other = "d4" * 20
        result = render_tagged(self._commit(parents=[PARENT, other]))
        assert f"\n_P:{PARENT} {other}\n" in result

    def test_render_stats_with_binary_sentinel(self) -> None:
        commit = self._commit(
            stats=[
                Stat("src/app.py", 3, 1),
                Stat("assets/logo.png", None, None),
            ]
        )
        result = render_tagged(commit)
        assert result.endswith(
            "\x00\n\n3\t1\tsrc/app.py\n-\t-\tassets/logo.png\n"
        )

    def test_render_empty_message(self) -> None:
        result = render_tagged(self._commit(message=""))
        assert result.endswith("_B:\n\x00\n")
