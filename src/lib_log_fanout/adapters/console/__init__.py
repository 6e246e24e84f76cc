"""Console destinations rendered with Rich."""

from __future__ import annotations

from .prototype_console import PrototypeConsoleDestination
from .rich_console import ConsoleDestination

__all__ = ["ConsoleDestination", "PrototypeConsoleDestination"]
