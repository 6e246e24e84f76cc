"""Severity model shared by every destination.

Purpose
-------
Offer a closed, totally ordered set of log severities together with the
classification buckets destinations use when choosing colours, streams, or
native codes.

Contents
--------
* :class:`Severity` enum with ordering, lookup, and presentation helpers.
* :class:`SeverityClass` buckets (error, informational, other).
* ``_CLASS_TABLE`` / ``_LABEL_TABLE`` constants.

System Role
-----------
Leaf of the dependency graph: messages carry exactly one :class:`Severity` and
every adapter maps it to its backend vocabulary.
"""

from __future__ import annotations

from enum import Enum


class SeverityClass(Enum):
    """Coarse buckets used by formatting policies."""

    INFORMATIONAL = "informational"
    ERROR = "error"
    OTHER = "other"


class Severity(Enum):
    """Enumerated severities ordered from least to most severe.

    Examples
    --------
    >>> Severity.DEBUG < Severity.NOTICE < Severity.CRIT
    True
    >>> Severity.from_name("Err").severity
    'err'
    """

    DEBUG = 0
    INFO = 1
    NOTICE = 2
    WARNING = 3
    ERR = 4
    ALERT = 5
    EMERG = 6
    CRIT = 7

    @property
    def severity(self) -> str:
        """Return the lowercase wire name (``err``, ``crit`` ...)."""

        return self.name.lower()

    @property
    def severity_class(self) -> SeverityClass:
        """Return the formatting bucket this level belongs to."""

        return _CLASS_TABLE[self]

    @property
    def is_error(self) -> bool:
        return self.severity_class is SeverityClass.ERROR

    @property
    def label(self) -> str:
        """Return the capitalised label used by human-oriented consoles."""

        return _LABEL_TABLE[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.value >= other.value

    def __str__(self) -> str:
        return self.severity

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def coerce(cls, value: "Severity | str") -> "Severity":
        """Return ``value`` as a :class:`Severity`, accepting level names."""

        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            raise TypeError(f"log level must be a Severity or a level name, got {type(value).__name__}")
        return cls.from_name(value)


_CLASS_TABLE = {
    Severity.DEBUG: SeverityClass.INFORMATIONAL,
    Severity.INFO: SeverityClass.INFORMATIONAL,
    Severity.NOTICE: SeverityClass.OTHER,
    Severity.WARNING: SeverityClass.ERROR,
    Severity.ERR: SeverityClass.ERROR,
    Severity.ALERT: SeverityClass.ERROR,
    Severity.EMERG: SeverityClass.ERROR,
    Severity.CRIT: SeverityClass.ERROR,
}

_LABEL_TABLE = {
    Severity.DEBUG: "Debug",
    Severity.INFO: "Info",
    Severity.NOTICE: "Notice",
    Severity.WARNING: "Warning",
    Severity.ERR: "Error",
    Severity.ALERT: "Alert",
    Severity.EMERG: "Emergency",
    Severity.CRIT: "Critical",
}


__all__ = ["Severity", "SeverityClass"]
