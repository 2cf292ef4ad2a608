"""Staleness checks for weather snapshots."""

from datetime import UTC, datetime


def snapshot_age_minutes(last_updated: datetime, now: datetime | None = None) -> float:
    """Minutes elapsed since a snapshot was captured."""
    if now is None:
        now = datetime.now(UTC)
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=UTC)
    return max(0.0, (now - last_updated).total_seconds() / 60)


def is_snapshot_stale(
    last_updated: datetime | None, max_age_minutes: int, now: datetime | None = None
) -> bool:
    """A missing snapshot counts as stale."""
    if last_updated is None:
        return True
    return snapshot_age_minutes(last_updated, now) > max_age_minutes
