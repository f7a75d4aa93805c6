from __future__ import annotations

import subprocess
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GitInfo:
    commit: str | None
    short_hash: str | None
    branch: str | None
    commit_time: datetime | None
    dirty: bool


def _run(cmd: list[str], cwd: str | None = None) -> str:
    return subprocess.check_output(cmd, text=True, cwd=cwd, stderr=subprocess.DEVNULL).strip()


def get_git_info(cwd: str | None = None) -> GitInfo:
    """git 작업 트리 밖이거나 git이 없으면 전부 None/False."""
    try:
        commit = _run(["git", "rev-parse", "HEAD"], cwd)
        short_hash = _run(["git", "rev-parse", "--short", "HEAD"], cwd)
        branch = _run(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd)
        # %cI: strict ISO 8601 (예: 2025-06-05T00:00:00+00:00)
        commit_iso = _run(["git", "show", "-s", "--format=%cI", "HEAD"], cwd)
        commit_time = datetime.fromisoformat(commit_iso)
        dirty = bool(_run(["git", "status", "--porcelain"], cwd))
        return GitInfo(
            commit=commit,
            short_hash=short_hash,
            branch=branch,
            commit_time=commit_time,
            dirty=dirty,
        )
    except Exception:
        return GitInfo(commit=None, short_hash=None, branch=None, commit_time=None, dirty=False)
