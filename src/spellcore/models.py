from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Verbosity(Enum):
    TOP = "top"            # single best suggestion
    CLOSEST = "closest"    # every suggestion tied at the smallest distance
    ALL = "all"            # every suggestion within the bound

    @classmethod
    def parse(cls, value: "Verbosity | str") -> "Verbosity":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(v.value for v in cls)
            raise ValueError(f"Unknown verbosity {value!r} (expected one of: {names})") from None


@dataclass(frozen=True)
class Suggestion:
    term: str
    distance: int       # edit distance from the query
    frequency: int      # stored count of the term
