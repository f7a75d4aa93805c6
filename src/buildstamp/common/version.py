"""Build identity accessors.

Values are stamped into ``buildstamp.common._stamped`` at build time and read
once at import. Every accessor is a zero-argument projection of the same frozen
record, so calls are safe from any thread without locking.
"""

from __future__ import annotations

import platform
import sys

from buildstamp.common import _stamped
from buildstamp.common.identity import BuildIdentity

_IDENTITY = BuildIdentity(
    display_string=_stamped.DISPLAY_STRING,
    commit_label=_stamped.COMMIT_LABEL,
    snapshot_hash=_stamped.SNAPSHOT_HASH,
    source_hash=_stamped.SOURCE_HASH,
    channel=_stamped.CHANNEL,
)

__all__ = [
    "get_display_string",
    "get_snapshot_hash",
    "get_commit_label",
    "get_source_hash",
    "get_channel",
    "get_build_identity",
    "as_dict",
    "get_build_info",
]


def get_display_string() -> str:
    """예: ``3.8.1 (main) (Wed Jun 5 00:00:00 2025 +0000) on "linux_x64"``"""
    return _IDENTITY.display_string


def get_snapshot_hash() -> str:
    return _IDENTITY.snapshot_hash


def get_commit_label() -> str:
    return _IDENTITY.commit_label


def get_source_hash() -> str:
    return _IDENTITY.source_hash


def get_channel() -> str:
    return _IDENTITY.channel


def get_build_identity() -> BuildIdentity:
    return _IDENTITY


def as_dict() -> dict[str, str]:
    return _IDENTITY.to_dict()


def get_build_info() -> dict[str, object]:
    """빌드/실행 식별 정보.

    - stamped identity 다섯 필드 + 지금 돌고 있는 인터프리터/플랫폼.
    - /version 엔드포인트와 ``version_cli --json`` 출력에서 같이 쓴다.
    """
    return {
        **as_dict(),
        "python": {"version": sys.version.split()[0]},
        "platform": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
    }
