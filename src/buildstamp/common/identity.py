from __future__ import annotations

from dataclasses import asdict, dataclass

# 빌드 파이프라인과 합의된 release channel 목록(닫힌 집합)
KNOWN_CHANNELS: tuple[str, ...] = ("stable", "beta", "dev", "main", "custom")


@dataclass(frozen=True)
class BuildIdentity:
    """빌드 시점에 찍힌(stamped) 식별 정보.

    - 다섯 필드는 모두 독립적으로 주입된다.
    - display_string은 다른 필드에서 계산하지 않는다(빌드 쪽 포맷 결정).
    """

    display_string: str
    commit_label: str
    snapshot_hash: str
    source_hash: str
    channel: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
