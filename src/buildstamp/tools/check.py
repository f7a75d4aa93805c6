"""Sanity check for the stamped build identity.

The accessors never validate; this tool is the optional downstream check that a
build pipeline (or ci_check) runs after stamping.

Usage:
  python -m buildstamp.tools.check
"""

from __future__ import annotations

import argparse
import re
import sys

from buildstamp.common.identity import KNOWN_CHANNELS, BuildIdentity
from buildstamp.common.platform_names import HOST_OS_NAMES, TARGET_ARCH_NAMES
from buildstamp.common.version import get_build_identity
from buildstamp.stamp.template import find_unsubstituted_tokens

_WS_RE = re.compile(r"\s")
# banner 끝의 플랫폼 태그: on "<host-os>_[sim]<target-arch>"
_PLATFORM_TAG_RE = re.compile(r' on "(?P<os>[^"_]+)_(?P<arch>[^"]+)"$')


def _platform_problems(display_string: str) -> list[str]:
    m = _PLATFORM_TAG_RE.search(display_string)
    if m is None:
        return ['display_string has no platform tag (on "<os>_<arch>")']

    problems: list[str] = []
    os_name, arch = m.group("os"), m.group("arch")
    if arch.startswith("sim") and arch != "sim":
        arch = arch[len("sim") :]
    if os_name not in HOST_OS_NAMES:
        problems.append(f"unknown host os in platform tag: {os_name}")
    if arch not in TARGET_ARCH_NAMES:
        problems.append(f"unknown target arch in platform tag: {arch}")
    return problems


def find_problems(identity: BuildIdentity) -> list[str]:
    problems: list[str] = []

    for name, value in identity.to_dict().items():
        if not value:
            problems.append(f"{name} is empty")
            continue
        tokens = find_unsubstituted_tokens(value)
        if tokens:
            problems.append(f"{name} has unsubstituted token(s): {', '.join(tokens)}")

    for name in ("snapshot_hash", "source_hash"):
        value = getattr(identity, name)
        if value and _WS_RE.search(value):
            problems.append(f"{name} contains whitespace: {value!r}")

    if identity.channel and identity.channel not in KNOWN_CHANNELS:
        problems.append(f"unknown channel: {identity.channel}")

    if identity.commit_label and identity.commit_label not in identity.display_string:
        problems.append(f"display_string does not contain commit_label {identity.commit_label!r}")

    if identity.display_string:
        problems.extend(_platform_problems(identity.display_string))

    return problems


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Check the stamped build identity.")
    ap.add_argument("--quiet", action="store_true", help="only print problems")
    args = ap.parse_args(argv)

    identity = get_build_identity()
    if not args.quiet:
        print(f"[check] {identity.display_string}")

    problems = find_problems(identity)
    for p in problems:
        print(f"[check] ERROR: {p}", file=sys.stderr)

    if problems:
        return 1

    if not args.quiet:
        print("[check] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
