from __future__ import annotations

from buildstamp.common.version import (
    get_channel,
    get_commit_label,
    get_display_string,
    get_snapshot_hash,
    get_source_hash,
)


class SnapshotMismatchError(RuntimeError):
    def __init__(self, expected: str, found: str, *, source: str | None = None) -> None:
        self.expected = expected
        self.found = found
        self.source = source
        where = f" ({source})" if source else ""
        msg = f"snapshot hash mismatch{where}: expected {expected!r}, found {found!r}"
        super().__init__(msg)


def is_snapshot_compatible(found: str) -> bool:
    """직렬화된 산출물의 snapshot hash가 현재 코드와 호환되는지.

    비교는 정확히 일치(앞뒤 공백만 무시)로 한다.
    """
    return found.strip() == get_snapshot_hash()


def ensure_snapshot_compatible(found: str, *, source: str | None = None) -> None:
    if not is_snapshot_compatible(found):
        raise SnapshotMismatchError(get_snapshot_hash(), found, source=source)


def format_report_header() -> str:
    """crash/진단 리포트 맨 위에 붙이는 헤더."""
    lines = [
        f"version: {get_display_string()}",
        f"commit: {get_commit_label()}",
        f"source: {get_source_hash()}",
        f"channel: {get_channel()}",
        f"snapshot: {get_snapshot_hash()}",
    ]
    return "\n".join(lines)
