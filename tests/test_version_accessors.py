from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor

import pytest

import buildstamp.common.version as ver
from buildstamp.common.identity import KNOWN_CHANNELS, BuildIdentity

ACCESSORS = [
    ver.get_display_string,
    ver.get_snapshot_hash,
    ver.get_commit_label,
    ver.get_source_hash,
    ver.get_channel,
]


def test_accessors_return_stamped_values():
    assert ver.get_commit_label() == "3.8.1"
    assert ver.get_source_hash() == "4bb26ad"
    assert ver.get_snapshot_hash() == "42f987b8c14084aea"
    assert ver.get_channel() == "dev"
    assert ver.get_display_string() == (
        '3.8.1 (main) (Wed Jun 5 00:00:00 2025 +0000) on "linux_x64"'
    )


@pytest.mark.parametrize("fn", ACCESSORS)
def test_accessor_is_stable_across_calls(fn):
    first = fn()
    assert isinstance(first, str)
    assert fn() == first
    assert fn() is first


def test_channel_is_known():
    assert ver.get_channel() in KNOWN_CHANNELS


def test_display_string_embeds_commit_label():
    assert ver.get_commit_label() in ver.get_display_string()


def test_display_string_has_platform_tag():
    assert re.search(r' on "[a-z]+_(sim)?[a-z0-9]+"$', ver.get_display_string())


@pytest.mark.parametrize("fn", [ver.get_snapshot_hash, ver.get_source_hash])
def test_hashes_non_empty_without_whitespace(fn):
    value = fn()
    assert value
    assert not re.search(r"\s", value)


def test_build_identity_is_frozen():
    identity = ver.get_build_identity()
    assert isinstance(identity, BuildIdentity)
    with pytest.raises(AttributeError):
        identity.channel = "stable"  # type: ignore[misc]
    assert ver.get_channel() == "dev"


def test_as_dict_mutation_does_not_leak():
    d = ver.as_dict()
    d["channel"] = "stable"
    assert ver.get_channel() == "dev"
    assert ver.as_dict()["channel"] == "dev"


def test_build_info_includes_identity_and_runtime():
    info = ver.get_build_info()
    for k, v in ver.as_dict().items():
        assert info[k] == v
    assert "python" in info
    assert "platform" in info


def test_concurrent_reads_are_consistent():
    expected = tuple(fn() for fn in ACCESSORS)

    def read_all(_: int) -> tuple[str, ...]:
        return tuple(fn() for fn in ACCESSORS)

    with ThreadPoolExecutor(max_workers=16) as ex:
        results = list(ex.map(read_all, range(2000)))

    assert all(r == expected for r in results)
