from __future__ import annotations

import pytest

from buildstamp.common.compat import (
    SnapshotMismatchError,
    ensure_snapshot_compatible,
    format_report_header,
    is_snapshot_compatible,
)
from buildstamp.common.version import get_display_string, get_snapshot_hash


def test_same_hash_is_compatible():
    assert is_snapshot_compatible(get_snapshot_hash())
    assert is_snapshot_compatible(f"  {get_snapshot_hash()}\n")
    ensure_snapshot_compatible(get_snapshot_hash())


def test_different_hash_is_not_compatible():
    assert not is_snapshot_compatible("deadbeef")
    assert not is_snapshot_compatible(get_snapshot_hash().upper() + "0")


def test_ensure_raises_with_context():
    with pytest.raises(SnapshotMismatchError) as ei:
        ensure_snapshot_compatible("deadbeef", source="app.snapshot")

    err = ei.value
    assert err.expected == get_snapshot_hash()
    assert err.found == "deadbeef"
    assert err.source == "app.snapshot"
    assert "app.snapshot" in str(err)


def test_report_header_lists_all_fields():
    header = format_report_header()
    lines = header.splitlines()
    assert lines[0] == f"version: {get_display_string()}"
    assert [line.split(":", 1)[0] for line in lines] == [
        "version",
        "commit",
        "source",
        "channel",
        "snapshot",
    ]
