"""Marker for keys with no stored value."""

from enum import Enum


class Absent(Enum):
    """Singleton returned when a key holds no value.

    Distinct from ``None`` so a stored ``None`` (or ``""``, ``0``...)
    can be told apart from a miss. Falsy, like an empty result.
    """

    ABSENT = "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent.ABSENT
