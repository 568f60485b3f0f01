"""Security patch date parsing and comparison.

Android reports its security patch level as a ``YYYY-MM-DD`` string. Anything
that does not split into exactly three integer parts collapses to the
``0-0-0`` sentinel, which compares earlier than every real date.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_COMPONENT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class PatchDate:
    year: int = 0
    month: int = 0
    day: int = 0

    @classmethod
    def parse(cls, text: Any) -> "PatchDate":
        """Parse ``YYYY-MM-DD``; malformed input yields ``PatchDate(0, 0, 0)``."""
        if not isinstance(text, str):
            return cls()
        parts = text.split("-")
        if len(parts) != 3:
            return cls()
        if not all(_COMPONENT_RE.fullmatch(p) for p in parts):
            return cls()
        year, month, day = (int(p) for p in parts)
        return cls(year, month, day)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.year, self.month, self.day)

    def is_equal_or_later_than(self, other: "PatchDate") -> bool:
        # Plain tuple ordering; months and days are not range checked.
        return self.as_tuple() >= other.as_tuple()

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


SENTINEL_PATCH_DATE = PatchDate()

__all__ = ["PatchDate", "SENTINEL_PATCH_DATE"]
