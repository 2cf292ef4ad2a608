"""Send-It score models."""

from dataclasses import dataclass
from enum import StrEnum


class ColorTier(StrEnum):
    DANGER = "danger"
    WARNING = "warning"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return list(ColorTier).index(self)


@dataclass(frozen=True)
class ScoreFactor:
    name: str
    adjustment: float
    detail: str


@dataclass(frozen=True)
class SendItResult:
    score: int
    label: str
    color_tier: ColorTier
    raw_score: float
    factors: tuple[ScoreFactor, ...] = ()
