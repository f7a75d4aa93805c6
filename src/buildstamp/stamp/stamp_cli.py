"""Stamp build identity into the generated constants module.

Usage:
  python -m buildstamp.stamp.stamp_cli --commit-label 3.8.1 --channel dev
  python -m buildstamp.stamp.stamp_cli --commit-label 3.8.1 --snapshot-files a.cc b.cc
  python -m buildstamp.stamp.stamp_cli --commit-label 3.8.1 --snapshot-hash 42f987b8c14084aea \\
      --source-hash 4bb26ad --branch main --build-time 2025-06-05T00:00:00+00:00 --dry-run
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone

from buildstamp.common.config import get_settings
from buildstamp.common.gitinfo import get_git_info
from buildstamp.common.identity import KNOWN_CHANNELS, BuildIdentity
from buildstamp.common.platform_names import host_os_name, target_arch_name, using_simulator
from buildstamp.stamp.template import (
    StampError,
    compute_snapshot_hash,
    format_build_time,
    format_display_string,
    render,
    validate_identity,
    write_stamped,
)


def _parse_build_time(text: str) -> datetime:
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise StampError(f"--build-time must be ISO 8601: {text!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Stamp build identity constants.")
    ap.add_argument("--commit-label", type=str, required=True, help="version label, e.g. 3.8.1")
    ap.add_argument(
        "--channel",
        type=str,
        default=None,
        help=f"release channel ({', '.join(KNOWN_CHANNELS)}; default: BUILDSTAMP_CHANNEL or dev)",
    )
    ap.add_argument(
        "--branch", type=str, default=None, help="banner branch indicator (default: channel)"
    )

    g = ap.add_mutually_exclusive_group(required=True)
    g.add_argument("--snapshot-hash", type=str, default=None, help="snapshot format hash")
    g.add_argument(
        "--snapshot-files",
        type=str,
        nargs="+",
        default=None,
        help="compute snapshot hash (md5) from these files",
    )

    ap.add_argument(
        "--source-hash", type=str, default=None, help="short VCS hash (default: git HEAD)"
    )
    ap.add_argument(
        "--build-time",
        type=str,
        default=None,
        help="ISO 8601 build time (default: HEAD commit time, else now)",
    )
    ap.add_argument("--display-string", type=str, default=None, help="use this banner verbatim")
    ap.add_argument("--output", type=str, default=None, help="output path (default: settings)")
    ap.add_argument("--dry-run", action="store_true", help="print the module instead of writing")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    s = get_settings()
    channel = (args.channel or s.channel).strip().lower()

    git = get_git_info()

    source_hash = args.source_hash or git.short_hash
    if not source_hash:
        print(
            "[ERR] source hash unavailable (not a git work tree?). use --source-hash",
            file=sys.stderr,
        )
        return 3

    try:
        if args.snapshot_files:
            snapshot_hash = compute_snapshot_hash(args.snapshot_files)
        else:
            snapshot_hash = args.snapshot_hash

        # --display-string을 줘도 --build-time 형식 오류는 그냥 넘기지 않는다
        built = _parse_build_time(args.build_time) if args.build_time else None

        display_string = args.display_string
        if display_string is None:
            if built is None:
                built = git.commit_time or datetime.now(timezone.utc)
            display_string = format_display_string(
                commit_label=args.commit_label,
                branch=args.branch or channel,
                build_time=format_build_time(built),
                host_os=host_os_name(),
                target_arch=target_arch_name(),
                simulator=using_simulator(),
            )

        identity = BuildIdentity(
            display_string=display_string,
            commit_label=args.commit_label,
            snapshot_hash=snapshot_hash,
            source_hash=source_hash,
            channel=channel,
        )

        if args.dry_run:
            validate_identity(identity)
            print(render(identity), end="")
            return 0

        dst = write_stamped(identity, args.output or s.output_path)
    except StampError as e:
        print(f"[ERR] {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"[ERR] failed to write stamped module: {e}", file=sys.stderr)
        return 4

    print(f"[stamp] {display_string}")
    print(f"[OK] stamped -> {dst}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
