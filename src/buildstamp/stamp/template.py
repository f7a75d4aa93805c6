"""Render the generated constants module.

The build step fills ``STAMPED_TEMPLATE`` with literal values and writes it to
``buildstamp/common/_stamped.py``. The accessor module only imports the result.
"""

from __future__ import annotations

import hashlib
import json
import os
import re
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from buildstamp.common.identity import KNOWN_CHANNELS, BuildIdentity

STAMPED_TEMPLATE = """\
# Generated by buildstamp.stamp.stamp_cli. Do not edit by hand.
from __future__ import annotations

DISPLAY_STRING = {{DISPLAY_STRING}}
COMMIT_LABEL = {{COMMIT_LABEL}}
SNAPSHOT_HASH = {{SNAPSHOT_HASH}}
SOURCE_HASH = {{SOURCE_HASH}}
CHANNEL = {{CHANNEL}}
"""

_TOKEN_RE = re.compile(r"\{\{[A-Z_]+\}\}")
_COMMIT_LABEL_RE = re.compile(r"\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.\-+]+)?")
_SNAPSHOT_HASH_RE = re.compile(r"[0-9A-Za-z]+")
_SOURCE_HASH_RE = re.compile(r"[0-9a-fA-F]+")


class StampError(ValueError):
    pass


_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def _py_str(value: str) -> str:
    # ruff format과 같은 따옴표 선택: 큰따옴표를 포함하면 작은따옴표 literal
    if '"' in value and "'" not in value:
        return repr(value)
    return json.dumps(value, ensure_ascii=False)


def format_build_time(dt: datetime) -> str:
    """git 기본 날짜 포맷. 예: ``Wed Jun 5 00:00:00 2025 +0000``"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    # %a/%b는 locale을 따르므로 git처럼 영어 이름을 고정 테이블에서
    day = _DAY_NAMES[dt.weekday()]
    month = _MONTH_NAMES[dt.month - 1]
    return f"{day} {month} {dt.day} {dt:%H:%M:%S %Y %z}"


def format_display_string(
    *,
    commit_label: str,
    branch: str,
    build_time: str,
    host_os: str,
    target_arch: str,
    simulator: bool = False,
) -> str:
    sim = "sim" if simulator else ""
    return f'{commit_label} ({branch}) ({build_time}) on "{host_os}_{sim}{target_arch}"'


def compute_snapshot_hash(paths: Iterable[str | Path]) -> str:
    """snapshot 포맷을 정의하는 소스 파일들의 md5.

    입력 순서와 무관하도록 정렬하고, 파일명도 함께 해시한다.
    """
    files = sorted(Path(p) for p in paths)
    if not files:
        raise StampError("no snapshot files given")

    digest = hashlib.md5()
    for p in files:
        if not p.is_file():
            raise StampError(f"snapshot file not found: {p}")
        digest.update(p.name.encode("utf-8"))
        digest.update(p.read_bytes())
    return digest.hexdigest()


def validate_identity(identity: BuildIdentity) -> None:
    for name, value in identity.to_dict().items():
        if not value:
            raise StampError(f"{name} is empty")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise StampError(f"{name} is not valid UTF-8 text: {value!r}") from e

    if not _COMMIT_LABEL_RE.fullmatch(identity.commit_label):
        raise StampError(f"commit_label is not a version label: {identity.commit_label!r}")
    if not _SNAPSHOT_HASH_RE.fullmatch(identity.snapshot_hash):
        raise StampError(f"snapshot_hash must be an alphanumeric token: {identity.snapshot_hash!r}")
    if not _SOURCE_HASH_RE.fullmatch(identity.source_hash):
        raise StampError(f"source_hash must be a hex token: {identity.source_hash!r}")
    if identity.channel not in KNOWN_CHANNELS:
        known = ", ".join(KNOWN_CHANNELS)
        raise StampError(f"unknown channel: {identity.channel} (known: {known})")


def find_unsubstituted_tokens(text: str) -> list[str]:
    return _TOKEN_RE.findall(text)


def render(identity: BuildIdentity, template: str = STAMPED_TEMPLATE) -> str:
    values = {
        "{{DISPLAY_STRING}}": identity.display_string,
        "{{COMMIT_LABEL}}": identity.commit_label,
        "{{SNAPSHOT_HASH}}": identity.snapshot_hash,
        "{{SOURCE_HASH}}": identity.source_hash,
        "{{CHANNEL}}": identity.channel,
    }
    # 템플릿만 한 번에 치환한다(값 안에 들어 있는 {{...}}는 그대로 둔다)
    unknown = [t for t in find_unsubstituted_tokens(template) if t not in values]
    if unknown:
        raise StampError(f"unsubstituted tokens in template: {unknown}")
    return _TOKEN_RE.sub(lambda m: _py_str(values[m.group(0)]), template)


def write_stamped(identity: BuildIdentity, path: str | Path) -> Path:
    """검증 -> 렌더 -> 임시 파일에 쓰고 교체(중간 상태의 파일이 남지 않게)."""
    validate_identity(identity)
    text = render(identity)

    dst = Path(path)
    dst.parent.mkdir(parents=True, exist_ok=True)
    tmp = dst.with_name(dst.name + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, dst)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return dst
