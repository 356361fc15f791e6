"""Shared CLI UI helpers (Rich formatting)."""

from __future__ import annotations

from rich.console import Console

console = Console()
