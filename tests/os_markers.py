"""Reusable pytest markers describing platform requirements."""

from __future__ import annotations

import sys

import pytest

OS_AGNOSTIC = pytest.mark.os_agnostic
LINUX_ONLY = pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX host")
WINDOWS_ONLY = pytest.mark.skipif(sys.platform != "win32", reason="requires Windows")

__all__ = ["LINUX_ONLY", "OS_AGNOSTIC", "WINDOWS_ONLY"]
