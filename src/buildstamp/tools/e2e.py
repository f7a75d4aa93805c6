"""Cross-platform E2E one-shot runner.

Validates that the stamped identity is served end to end:

1) identity check (unsubstituted tokens, channel, hashes)
2) start API server (uvicorn) in background
3) smoke check /health and /version (snapshot hash must match this process)
4) stop server

Usage:
  python -m buildstamp.tools.e2e
  python -m buildstamp.tools.e2e --port 8010
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
import time
from pathlib import Path

from buildstamp.common.version import get_build_identity
from buildstamp.tools.check import find_problems
from buildstamp.tools.smoke_http import run as smoke_run


def _find_repo_root(start: Path) -> Path:
    """Try to locate repo root even when executed outside of repo root."""
    for p in [start, *start.parents]:
        if (p / "pyproject.toml").exists() and (p / "src").exists() and (p / "apps").exists():
            return p
    return start


def _with_repo_pythonpath(env: dict[str, str], repo_root: Path) -> dict[str, str]:
    """Ensure apps/ and src/ are importable for uvicorn subprocess."""
    sep = os.pathsep
    existing = env.get("PYTHONPATH", "")
    parts = [str(repo_root), str(repo_root / "src")]
    if existing.strip():
        parts.append(existing)
    env["PYTHONPATH"] = sep.join(parts)
    return env


def _start_server(*, repo_root: Path, host: str, port: int) -> subprocess.Popen:
    env = _with_repo_pythonpath(os.environ.copy(), repo_root)
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "apps.api.main:app",
        "--host",
        host,
        "--port",
        str(port),
    ]

    print(f"[e2e] starting api: {' '.join(cmd)}")
    proc = subprocess.Popen(cmd, cwd=str(repo_root), env=env)

    time.sleep(0.2)
    if proc.poll() is not None:
        raise RuntimeError(
            f"api server exited immediately (exitcode={proc.returncode}). Is the port in use?"
        )

    return proc


def _stop_server(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return

    print(f"[e2e] stopping api server (pid={proc.pid})")
    try:
        proc.terminate()
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="buildstamp E2E one-shot runner.")

    ap.add_argument("--host", type=str, default="127.0.0.1", help="bind host for uvicorn")
    ap.add_argument("--port", type=int, default=8000, help="bind port for uvicorn")

    ap.add_argument("--timeout-sec", type=float, default=8)
    ap.add_argument("--retries", type=int, default=30)
    ap.add_argument("--retry-delay-sec", type=float, default=0.5)

    ap.add_argument("--skip-serve", action="store_true", help="skip serve+smoke")

    return ap


def run_e2e(
    *,
    host: str,
    port: int,
    timeout_sec: float,
    retries: int,
    retry_delay_sec: float,
    skip_serve: bool,
) -> int:
    repo_root = _find_repo_root(Path.cwd())
    print(f"[e2e] repo_root: {repo_root}")
    print(f"[e2e] host: {host}  port: {port}")

    print("[e2e] step 1/2: identity check")
    identity = get_build_identity()
    problems = find_problems(identity)
    if problems:
        for p in problems:
            print(f"[e2e] identity problem: {p}", file=sys.stderr)
        return 1
    print(f"[e2e] identity OK: {identity.display_string}")

    if skip_serve:
        print("[e2e] step 2/2: skip serve+smoke")
        print("[e2e] done.")
        return 0

    print("[e2e] step 2/2: serve (background) + smoke_http")
    server_proc: subprocess.Popen | None = None
    try:
        server_proc = _start_server(repo_root=repo_root, host=host, port=port)

        code = smoke_run(
            base_url=f"http://{host}:{port}",
            timeout_sec=timeout_sec,
            retries=retries,
            retry_delay_sec=retry_delay_sec,
            health_path="/health",
            version_path="/version",
            expected_snapshot_hash=identity.snapshot_hash,
            allow_snapshot_mismatch=False,
        )
        if code != 0:
            print(f"[e2e] smoke_http failed (exitcode={code})", file=sys.stderr)
            return code

        print("[e2e] OK")
        return 0
    finally:
        if server_proc is not None:
            _stop_server(server_proc)


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    return run_e2e(
        host=args.host,
        port=args.port,
        timeout_sec=args.timeout_sec,
        retries=args.retries,
        retry_delay_sec=args.retry_delay_sec,
        skip_serve=bool(args.skip_serve),
    )


if __name__ == "__main__":
    raise SystemExit(main())
