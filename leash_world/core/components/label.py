"""Display name component."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Label:
    """Human readable name shown in notifications."""

    text: str = ""


__all__ = ["Label"]
