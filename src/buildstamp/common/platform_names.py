from __future__ import annotations

import platform
import sys

from buildstamp.common.config import get_settings

HOST_OS_NAMES: tuple[str, ...] = ("android", "fuchsia", "ios", "linux", "macos", "windows")
TARGET_ARCH_NAMES: tuple[str, ...] = ("ia32", "x64", "arm", "arm64", "riscv32", "riscv64")

_OS_ALIASES = {
    "linux": "linux",
    "darwin": "macos",
    "win32": "windows",
    "cygwin": "windows",
    "android": "android",
    "ios": "ios",
    "fuchsia": "fuchsia",
}

_ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
    "armv7": "arm",
    "armv6l": "arm",
    "arm": "arm",
    "riscv64": "riscv64",
    "riscv32": "riscv32",
}


def normalize_os(raw: str) -> str:
    key = raw.strip().lower()
    return _OS_ALIASES.get(key, key)


def normalize_arch(raw: str) -> str:
    key = raw.strip().lower()
    return _ARCH_ALIASES.get(key, key)


def host_os_name() -> str:
    s = get_settings()
    if s.host_os:
        return normalize_os(s.host_os)
    return normalize_os(sys.platform)


def target_arch_name() -> str:
    # 크로스 빌드가 아니면 target == host
    s = get_settings()
    if s.target_arch:
        return normalize_arch(s.target_arch)
    return normalize_arch(platform.machine())


def using_simulator() -> bool:
    return get_settings().use_simulator
