from __future__ import annotations

import sys
import uuid
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from buildstamp.common.version import get_build_info, get_snapshot_hash


def _load_api_app() -> Any:
    """apps/api/main.py를 파일 경로로 로드해서 FastAPI app을 가져온다.

    - apps/가 패키지(__init__.py)여부에 의존하지 않도록 함
    - 테스트 환경에서 import 캐시 충돌을 피하려고 모듈명을 유니크하게 사용
    """
    repo_root = Path(__file__).resolve().parents[1]
    main_py = repo_root / "apps" / "api" / "main.py"
    assert main_py.exists(), f"not found: {main_py}"

    module_name = f"_buildstamp_api_main_{uuid.uuid4().hex}"
    spec = spec_from_file_location(module_name, main_py)
    assert spec and spec.loader, "failed to create module spec"

    mod = module_from_spec(spec)
    sys.modules[module_name] = mod
    spec.loader.exec_module(mod)  # type: ignore[union-attr]
    return mod.app


@pytest.fixture()
def client() -> TestClient:
    return TestClient(_load_api_app())


def test_health(client: TestClient):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_version_endpoint_min_schema(client: TestClient):
    res = client.get("/version")
    assert res.status_code == 200

    data = res.json()
    assert isinstance(data, dict)

    # ✅ 최소 계약: service는 항상 존재하고, 고정된 값이어야 함
    assert data.get("service") == "buildstamp-api"

    # ✅ 최소 계약: get_build_info()가 제공하는 키는 /version에 포함되어야 함
    build = get_build_info()
    for k in build.keys():
        assert k in data, f"missing build key in /version response: {k}"

    assert data["snapshot_hash"] == get_snapshot_hash()
    assert data["commit_label"] in data["display_string"]


def test_version_echoes_request_id(client: TestClient):
    res = client.get("/version", headers={"X-Request-ID": "rid-1"})
    assert res.headers["X-Request-ID"] == "rid-1"


def test_snapshot_check_compatible(client: TestClient):
    res = client.get("/version/snapshot", params={"hash": get_snapshot_hash()})
    assert res.status_code == 200
    data = res.json()
    assert data["compatible"] is True
    assert data["snapshot_hash"] == get_snapshot_hash()


def test_snapshot_check_mismatch_returns_409(client: TestClient):
    res = client.get(
        "/version/snapshot", params={"hash": "deadbeef"}, headers={"X-Request-ID": "rid-2"}
    )
    assert res.status_code == 409

    data = res.json()
    assert data["ok"] is False
    assert data["request_id"] == "rid-2"
    assert data["error"]["code"] == "SNAPSHOT_MISMATCH"
    assert data["error"]["details"] == {"expected": get_snapshot_hash(), "found": "deadbeef"}


def test_snapshot_check_requires_hash(client: TestClient):
    res = client.get("/version/snapshot")
    assert res.status_code == 422
    err = res.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    # 파라미터 이름은 alias("hash") 그대로 노출
    assert err["details"][0]["loc"] == ["query", "hash"]
