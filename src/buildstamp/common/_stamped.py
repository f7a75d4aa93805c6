# Generated by buildstamp.stamp.stamp_cli. Do not edit by hand.
from __future__ import annotations

DISPLAY_STRING = '3.8.1 (main) (Wed Jun 5 00:00:00 2025 +0000) on "linux_x64"'
COMMIT_LABEL = "3.8.1"
SNAPSHOT_HASH = "42f987b8c14084aea"
SOURCE_HASH = "4bb26ad"
CHANNEL = "dev"
