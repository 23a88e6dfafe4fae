"""Organ tags accepted by the identification service.

Keeping the enumeration in the domain layer lets the CLI, the tool registry
and the client share a single source of truth.
"""

from __future__ import annotations

from enum import Enum


class Organ(str, Enum):
    """Plant part shown in one image of an identification request."""

    LEAF = "leaf"
    FLOWER = "flower"
    FRUIT = "fruit"
    BARK = "bark"
    HABIT = "habit"
    AUTO = "auto"
    OTHER = "other"

    @classmethod
    def default(cls) -> "Organ":
        """Organ used when the caller does not know which part is shown."""

        return cls.AUTO
