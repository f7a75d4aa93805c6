from __future__ import annotations

import argparse
import json

from buildstamp.common.version import as_dict, get_build_info, get_commit_label, get_display_string

FIELDS = ("display_string", "commit_label", "snapshot_hash", "source_hash", "channel")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Print build identity.")
    g = ap.add_mutually_exclusive_group(required=False)
    g.add_argument("--json", action="store_true", help="print build info as JSON")
    g.add_argument("--short", action="store_true", help="print commit label only")
    g.add_argument("--field", type=str, choices=FIELDS, default=None, help="print one field")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.json:
        print(json.dumps(get_build_info(), ensure_ascii=False, indent=2))
    elif args.short:
        print(get_commit_label())
    elif args.field:
        print(as_dict()[args.field])
    else:
        print(get_display_string())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
