import random
from enum import Enum
from typing import Optional, Tuple


class OperationType(str, Enum):
    SLEEP = "SLEEP"
    FILE_IO = "FILE_IO"
    NETWORK_IO = "NETWORK_IO"
    MIXED = "MIXED"


# Strategies MIXED may delegate to; MIXED itself is never re-selected.
CONCRETE_TYPES: Tuple[OperationType, ...] = (
    OperationType.SLEEP,
    OperationType.FILE_IO,
    OperationType.NETWORK_IO,
)


def parse_operation_type(value: Optional[str]) -> Tuple[OperationType, bool]:
    """
    Case-insensitive lookup of an operation tag.

    Returns (operation_type, fallback_used).  Absent, blank or unknown
    values resolve to SLEEP with fallback_used=True; logging the fallback
    is left to the caller.
    """
    if value is None:
        return OperationType.SLEEP, True
    try:
        return OperationType[value.strip().upper()], False
    except KeyError:
        return OperationType.SLEEP, True


def generate_duration(min_ms: int, max_ms: int, rng: Optional[random.Random] = None) -> int:
    """Random duration in [min_ms, max_ms], both ends inclusive; min_ms when min_ms >= max_ms."""
    if min_ms >= max_ms:
        return min_ms
    return (rng or random).randint(min_ms, max_ms)
