from __future__ import annotations

import sys
from pathlib import Path

import pytest

# apps/ (repo root)와 src/buildstamp를 설치 없이도 import 할 수 있게
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for p in (str(ROOT), str(SRC)):
    if p not in sys.path:
        sys.path.insert(0, p)


@pytest.fixture(autouse=True)
def _isolate_buildstamp_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # 개발자 셸/CI에 설정된 BUILDSTAMP_* 가 테스트로 새지 않도록
    for k in (
        "BUILDSTAMP_OUTPUT",
        "BUILDSTAMP_CHANNEL",
        "BUILDSTAMP_HOST_OS",
        "BUILDSTAMP_TARGET_ARCH",
        "BUILDSTAMP_USE_SIMULATOR",
    ):
        monkeypatch.delenv(k, raising=False)
