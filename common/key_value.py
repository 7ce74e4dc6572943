"""
Key/value pair carried between the map and reduce phases
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KeyValue:
    """A single intermediate record"""
    key: str
    value: str

    def to_line(self) -> str:
        return f"{self.key} {self.value}"

    @classmethod
    def from_line(cls, line: str) -> Optional["KeyValue"]:
        """
        Parse an intermediate file line

        Splits on the first whitespace boundary. Lines without a value
        (blank lines, a lone key) yield None.
        """
        parts = line.strip().split(None, 1)
        if len(parts) != 2:
            return None
        return cls(parts[0], parts[1])
