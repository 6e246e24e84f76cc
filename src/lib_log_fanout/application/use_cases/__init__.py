"""Use cases orchestrating the fan-out pipeline."""

from __future__ import annotations

from .process_message import ProcessCallable, create_process_message

__all__ = ["ProcessCallable", "create_process_message"]
