"""Cross-platform local CI check.

Steps:

1) ruff format --check
2) ruff check
3) pytest
4) (optional) stamped identity check
5) E2E one-shot (or skip)

Usage:
  python -m buildstamp.tools.ci_check
  python -m buildstamp.tools.ci_check --port 8010
  python -m buildstamp.tools.ci_check --skip-e2e --include-identity-check
"""

from __future__ import annotations

import argparse
import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path


def _find_repo_root(start: Path) -> Path:
    for p in [start, *start.parents]:
        if (p / "pyproject.toml").exists() and (p / "src").exists() and (p / "apps").exists():
            return p
    return start


def _resolve_ruff(repo_root: Path) -> str | None:
    """Find ruff executable with sensible fallbacks (.venv first, then PATH)."""
    candidates = [
        repo_root / ".venv" / "Scripts" / "ruff.exe",  # Windows venv
        repo_root / ".venv" / "bin" / "ruff",  # Linux/macOS venv
    ]
    for p in candidates:
        if p.exists():
            return str(p)

    return shutil.which("ruff")


def _run(cmd: list[str], *, cwd: Path) -> int:
    print(f"[ci_check] $ {' '.join(cmd)}")
    p = subprocess.run(cmd, cwd=str(cwd))
    return int(p.returncode)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="buildstamp local CI check (cross-platform).")
    ap.add_argument("--port", type=int, default=8010, help="port for E2E server (default 8010)")
    ap.add_argument("--skip-e2e", action="store_true", help="skip E2E step")
    ap.add_argument(
        "--include-identity-check",
        action="store_true",
        help="run buildstamp.tools.check against the stamped module",
    )
    return ap


def build_step_names(*, skip_e2e: bool, include_identity_check: bool) -> list[str]:
    """Return the ordered list of step names for the given option set.

    Pure function: safe to regression-test without executing subprocesses.
    """
    names = ["ruff format --check", "ruff check", "pytest"]
    if include_identity_check:
        names.append("identity check")
    names.append("skip e2e" if skip_e2e else "e2e")
    return names


def run_ci_check(*, port: int, skip_e2e: bool, include_identity_check: bool) -> int:
    repo_root = _find_repo_root(Path.cwd())
    print(f"[ci_check] repo_root: {repo_root}")

    ruff = _resolve_ruff(repo_root)
    if not ruff:
        print(
            "[ci_check] ERROR: ruff not found. Run: python -m pip install -e '.[dev]'",
            file=sys.stderr,
        )
        return 2

    plan = build_step_names(skip_e2e=skip_e2e, include_identity_check=include_identity_check)

    runnables: dict[str, Callable[[], int]] = {
        "ruff format --check": lambda: _run([ruff, "format", "--check", "."], cwd=repo_root),
        "ruff check": lambda: _run([ruff, "check", "."], cwd=repo_root),
        "pytest": lambda: _run([sys.executable, "-m", "pytest", "-q"], cwd=repo_root),
        "identity check": lambda: _run(
            [sys.executable, "-m", "buildstamp.tools.check"], cwd=repo_root
        ),
        "skip e2e": lambda: 0,
        "e2e": lambda: _run(
            [sys.executable, "-m", "buildstamp.tools.e2e", "--port", str(port)],
            cwd=repo_root,
        ),
    }

    missing = [name for name in plan if name not in runnables]
    if missing:
        print(f"[ci_check] ERROR: unknown step name(s) in plan: {missing}", file=sys.stderr)
        return 2

    steps: list[tuple[str, Callable[[], int]]] = [(name, runnables[name]) for name in plan]

    total = len(steps)
    for i, (name, fn) in enumerate(steps, start=1):
        print(f"[ci_check] step {i}/{total}: {name}")
        code = fn()
        if code != 0:
            return code

    print("[ci_check] OK")
    return 0


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    return run_ci_check(
        port=int(args.port),
        skip_e2e=bool(args.skip_e2e),
        include_identity_check=bool(args.include_identity_check),
    )


if __name__ == "__main__":
    raise SystemExit(main())
