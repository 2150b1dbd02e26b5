"""Ordered risk severity levels shared by transaction and monthly scores"""

from enum import Enum


class Severity(Enum):
    """Risk severity, ordered None < Low < Medium < High"""

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def step_up(self) -> "Severity":
        """Next tier up, High stays High"""
        return _ORDER[min(self.rank + 1, len(_ORDER) - 1)]

    def __lt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_ORDER = [Severity.NONE, Severity.LOW, Severity.MEDIUM, Severity.HIGH]
_RANKS = {level: i for i, level in enumerate(_ORDER)}

# Urgency prefix for human-readable reasons
URGENCY_EMOJI = {
    Severity.HIGH: "🚨",
    Severity.MEDIUM: "⚠️",
    Severity.LOW: "ℹ️",
    Severity.NONE: "",
}


def severity_for_score(score: int) -> Severity:
    """
    Map a 0-100 monthly score to a severity band.

    - 70+:  High
    - 40+:  Medium
    - >0:   Low
    - 0:    None
    """
    if score >= 70:
        return Severity.HIGH
    elif score >= 40:
        return Severity.MEDIUM
    elif score > 0:
        return Severity.LOW
    else:
        return Severity.NONE
