"""Common types and helpers shared across models."""

import math
from datetime import UTC, datetime
from typing import TypeAlias

TripId: TypeAlias = str
UserId: TypeAlias = str


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties going up (2.25 -> 2.3, -2.5 -> -2.0).

    Unlike the builtin round(), ties never go to the even neighbour.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))
