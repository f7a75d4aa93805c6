from __future__ import annotations

import argparse
import json
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from buildstamp.common.version import get_snapshot_hash


@dataclass(frozen=True)
class HttpResult:
    ok: bool
    status_code: int | None
    content: str | None
    obj: Any | None
    error: str | None


def _format_obj(obj: Any | None, content: str | None) -> str:
    if obj is not None:
        try:
            return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
        except Exception:
            return str(obj)
    return (content or "").strip()


def _request_json(client: httpx.Client, *, method: str, url: str) -> HttpResult:
    try:
        resp = client.request(method, url, headers={"Accept": "application/json"})
    except Exception as e:
        # NOTE: connect 단계 예외가 httpx.HTTPError로 래핑되지 않는 환경이 있다.
        # "서버 아직 안 뜸" 상황을 재시도로 흡수하기 위해 broad catch.
        return HttpResult(
            ok=False,
            status_code=None,
            content=None,
            obj=None,
            error=f"{type(e).__name__}: {e}",
        )
    content: str | None = None
    obj: Any | None = None
    try:
        content = resp.text
        if content and content.strip():
            try:
                obj = resp.json()
            except Exception:
                obj = content
    except Exception as e:
        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            content=None,
            obj=None,
            error=f"failed to read response: {e}",
        )

    ok = 200 <= resp.status_code < 300
    return HttpResult(ok=ok, status_code=resp.status_code, content=content, obj=obj, error=None)


def _with_retry(
    *,
    name: str,
    action: Callable[[], HttpResult],
    retries: int,
    retry_delay_sec: float,
    no_retry_codes: set[int],
) -> HttpResult:
    max_attempts = max(1, retries + 1)
    last: HttpResult | None = None

    for attempt in range(1, max_attempts + 1):
        res = action()
        last = res

        if res.ok:
            return res

        if res.status_code is not None and res.status_code in no_retry_codes:
            return res

        if attempt >= max_attempts:
            return res

        code_text = f"HTTP {res.status_code}" if res.status_code is not None else "no-status"
        err_text = res.error or "request failed"
        warn = (
            f"[smoke] WARN {name} attempt {attempt}/{max_attempts} failed "
            f"({code_text}): {err_text}. "
            f"retry in {retry_delay_sec}s"
        )
        print(warn, file=sys.stderr)
        time.sleep(max(0.0, retry_delay_sec))

    return last or HttpResult(
        ok=False,
        status_code=None,
        content=None,
        obj=None,
        error="null response",
    )


def _fail(path: str, res: HttpResult) -> int:
    code_text = f"HTTP {res.status_code}" if res.status_code is not None else "no-status"
    err_text = res.error or "request failed"
    print(f"[smoke] {path} FAILED ({code_text}): {err_text}", file=sys.stderr)
    return 1


def run(
    *,
    base_url: str,
    timeout_sec: float,
    retries: int,
    retry_delay_sec: float,
    health_path: str,
    version_path: str,
    expected_snapshot_hash: str | None,
    allow_snapshot_mismatch: bool,
) -> int:
    base_url = base_url.rstrip("/")
    if not health_path.startswith("/"):
        health_path = "/" + health_path
    if not version_path.startswith("/"):
        version_path = "/" + version_path

    print(f"[smoke] base_url: {base_url}")
    print(
        "[smoke] timeout_sec: "
        f"{timeout_sec}, retries: {retries}, retry_delay_sec: {retry_delay_sec}"
    )

    with httpx.Client(timeout=timeout_sec) as client:
        # 1) /health
        health = _with_retry(
            name=f"GET {health_path}",
            action=lambda: _request_json(client, method="GET", url=f"{base_url}{health_path}"),
            retries=retries,
            retry_delay_sec=retry_delay_sec,
            no_retry_codes={404},
        )
        if not health.ok:
            return _fail(health_path, health)

        print(
            f"[smoke] {health_path} OK (HTTP {health.status_code}): "
            f"{_format_obj(health.obj, health.content)}"
        )

        # 2) /version
        ver = _with_retry(
            name=f"GET {version_path}",
            action=lambda: _request_json(client, method="GET", url=f"{base_url}{version_path}"),
            retries=retries,
            retry_delay_sec=retry_delay_sec,
            no_retry_codes={404},
        )
        if not ver.ok:
            return _fail(version_path, ver)

        data = ver.obj if isinstance(ver.obj, dict) else {}
        print(f"[smoke] {version_path} OK (HTTP {ver.status_code}): {data.get('display_string')}")

    # 3) 서버와 이 프로세스의 snapshot hash 비교
    expected = expected_snapshot_hash or get_snapshot_hash()
    served = data.get("snapshot_hash")
    if served != expected:
        msg = f"[smoke] snapshot hash mismatch: local={expected} served={served}"
        if allow_snapshot_mismatch:
            print(f"[smoke] WARN {msg}", file=sys.stderr)
            return 0
        print(msg, file=sys.stderr)
        return 1

    print(f"[smoke] snapshot hash OK: {expected}")
    print("[smoke] done.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="HTTP smoke check for buildstamp API endpoints.")

    # target
    ap.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="base URL like http://127.0.0.1:8000 (overrides --host/--port)",
    )
    ap.add_argument("--host", type=str, default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)

    # timing
    ap.add_argument("--timeout-sec", type=float, default=10)
    ap.add_argument("--retries", type=int, default=0)
    ap.add_argument("--retry-delay-sec", type=float, default=0.5)

    # endpoints
    ap.add_argument("--health-path", type=str, default="/health")
    ap.add_argument("--version-path", type=str, default="/version")

    # behavior
    ap.add_argument(
        "--expected-snapshot-hash",
        type=str,
        default=None,
        help="hash the server must report (default: this process's snapshot hash)",
    )
    ap.add_argument("--allow-snapshot-mismatch", action="store_true")

    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    base_url = args.base_url
    if not base_url:
        base_url = f"http://{args.host}:{args.port}"

    return run(
        base_url=base_url,
        timeout_sec=args.timeout_sec,
        retries=args.retries,
        retry_delay_sec=args.retry_delay_sec,
        health_path=args.health_path,
        version_path=args.version_path,
        expected_snapshot_hash=args.expected_snapshot_hash,
        allow_snapshot_mismatch=bool(args.allow_snapshot_mismatch),
    )


if __name__ == "__main__":
    raise SystemExit(main())
