from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

try:
    from dotenv import load_dotenv  # type: ignore
except Exception:  # pragma: no cover
    load_dotenv = None

_TRUTHY = {"1", "true", "yes", "on"}

DEFAULT_OUTPUT = Path(__file__).resolve().parent / "_stamped.py"


@dataclass(frozen=True)
class Settings:
    output_path: str
    channel: str
    host_os: str | None
    target_arch: str | None
    use_simulator: bool


def get_settings() -> Settings:
    # 로컬 개발에서는 .env가 있으면 읽고, CI에서는 환경변수만으로 동작
    if load_dotenv is not None:
        load_dotenv(override=False)

    output_path = os.getenv("BUILDSTAMP_OUTPUT", str(DEFAULT_OUTPUT))
    channel = os.getenv("BUILDSTAMP_CHANNEL", "dev").strip().lower()
    host_os = os.getenv("BUILDSTAMP_HOST_OS") or None
    target_arch = os.getenv("BUILDSTAMP_TARGET_ARCH") or None
    use_simulator = os.getenv("BUILDSTAMP_USE_SIMULATOR", "").strip().lower() in _TRUTHY

    return Settings(
        output_path=output_path,
        channel=channel,
        host_os=host_os,
        target_arch=target_arch,
        use_simulator=use_simulator,
    )
