from __future__ import annotations

from buildstamp.stamp.template import (
    STAMPED_TEMPLATE,
    StampError,
    compute_snapshot_hash,
    find_unsubstituted_tokens,
    format_build_time,
    format_display_string,
    render,
    validate_identity,
    write_stamped,
)

__all__ = [
    "STAMPED_TEMPLATE",
    "StampError",
    "compute_snapshot_hash",
    "find_unsubstituted_tokens",
    "format_build_time",
    "format_display_string",
    "render",
    "validate_identity",
    "write_stamped",
]
