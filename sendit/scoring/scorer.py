"""Send-It scorer: WeatherSnapshot -> 1-10 score, label and color tier."""

from sendit.models.common import round_int
from sendit.models.send_it import ColorTier, SendItResult
from sendit.models.weather import WeatherSnapshot
from sendit.scoring.factors import FACTORS

BASELINE = 5.0
MIN_SCORE = 1
MAX_SCORE = 10

# (inclusive upper bound, label); scores above the last bound are EPIC_DAY
LABELS: tuple[tuple[int, str], ...] = (
    (2, "Stay in bed"),
    (3, "Coffee first"),
    (4, "Meh"),
    (5, "Decent"),
    (6, "Let's ride"),
    (7, "Looking good"),
    (8, "Send it!"),
    (9, "SEND IT!"),
)
EPIC_DAY = "EPIC DAY"

TIERS: tuple[tuple[int, ColorTier], ...] = (
    (3, ColorTier.DANGER),
    (5, ColorTier.WARNING),
    (7, ColorTier.GOOD),
)


def score(snapshot: WeatherSnapshot) -> SendItResult:
    """Score a snapshot. Total over any WeatherSnapshot; never raises."""
    factors = tuple(factor(snapshot) for factor in FACTORS)
    raw = BASELINE + sum(f.adjustment for f in factors)
    final = max(MIN_SCORE, min(MAX_SCORE, round_int(raw)))
    return SendItResult(
        score=final,
        label=label_for(final),
        color_tier=tier_for(final),
        raw_score=raw,
        factors=factors,
    )


def label_for(score: int) -> str:
    for upper, label in LABELS:
        if score <= upper:
            return label
    return EPIC_DAY


def tier_for(score: int) -> ColorTier:
    for upper, tier in TIERS:
        if score <= upper:
            return tier
    return ColorTier.EXCELLENT
