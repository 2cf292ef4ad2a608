"""Repository for trips and trip membership."""

import logging
import secrets
import sqlite3
import uuid

from sendit.models.trip import Location, Trip
from sendit.storage import user_repo

logger = logging.getLogger(__name__)

# No I, O, 0 or 1: they are easy to misread when shared aloud
INVITE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10


class TripNotFoundError(LookupError):
    """No trip exists with the requested id."""


def generate_invite_code() -> str:
    """Generate a random 6-character invite code."""
    return "".join(
        secrets.choice(INVITE_ALPHABET) for _ in range(INVITE_CODE_LENGTH)
    )


def create_trip(
    conn: sqlite3.Connection,
    name: str,
    resort: str,
    location: Location,
    start_date: str,
    end_date: str,
    created_by: str,
) -> str:
    """Create a trip with a unique invite code and its creator as sole member.

    Also points the creator's profile at the new trip. Returns the trip id.
    """
    trip_id = uuid.uuid4().hex
    for attempt in range(MAX_CODE_ATTEMPTS):
        code = generate_invite_code()
        try:
            conn.execute(
                "INSERT INTO trips "
                "(id, name, resort, lat, lng, start_date, end_date, invite_code, created_by) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    trip_id, name, resort, location.lat, location.lng,
                    start_date, end_date, code, created_by,
                ),
            )
            break
        except sqlite3.IntegrityError as e:
            if "trips.invite_code" not in str(e):
                conn.rollback()
                raise
            logger.warning(
                "Invite code collision on %s (attempt %d/%d)",
                code, attempt + 1, MAX_CODE_ATTEMPTS,
            )
    else:
        conn.rollback()
        raise RuntimeError("Could not allocate a unique invite code")

    conn.execute(
        "INSERT INTO trip_members (trip_id, user_id) VALUES (?, ?)",
        (trip_id, created_by),
    )
    conn.commit()
    user_repo.set_current_trip(conn, created_by, trip_id)
    logger.info("Created trip %s (%s) with code %s", trip_id, name, code)
    return trip_id


def join_trip_by_code(
    conn: sqlite3.Connection, invite_code: str, user_id: str
) -> str | None:
    """Join a trip by invite code (case-insensitive).

    Membership is idempotent. Returns the trip id, or None if no trip
    matches the code.
    """
    row = conn.execute(
        "SELECT id FROM trips WHERE invite_code = ? LIMIT 1",
        (invite_code.strip().upper(),),
    ).fetchone()
    if row is None:
        return None

    trip_id = row["id"]
    conn.execute(
        "INSERT OR IGNORE INTO trip_members (trip_id, user_id) VALUES (?, ?)",
        (trip_id, user_id),
    )
    conn.commit()
    user_repo.set_current_trip(conn, user_id, trip_id)
    return trip_id


def get_trip(conn: sqlite3.Connection, trip_id: str) -> Trip | None:
    """Get a single trip with its members."""
    row = conn.execute("SELECT * FROM trips WHERE id = ?", (trip_id,)).fetchone()
    if row is None:
        return None
    return _to_trip(conn, row)


def require_trip(conn: sqlite3.Connection, trip_id: str) -> Trip:
    trip = get_trip(conn, trip_id)
    if trip is None:
        raise TripNotFoundError(f"Trip not found: {trip_id}")
    return trip


def get_user_trips(conn: sqlite3.Connection, user_id: str) -> list[Trip]:
    """Get every trip the user is a member of, newest first."""
    rows = conn.execute(
        "SELECT t.* FROM trips t "
        "JOIN trip_members m ON m.trip_id = t.id "
        "WHERE m.user_id = ? "
        "ORDER BY t.created_at DESC, t.rowid DESC",
        (user_id,),
    ).fetchall()
    return [_to_trip(conn, r) for r in rows]


def get_members(conn: sqlite3.Connection, trip_id: str) -> list[str]:
    rows = conn.execute(
        "SELECT user_id FROM trip_members WHERE trip_id = ? "
        "ORDER BY joined_at, rowid",
        (trip_id,),
    ).fetchall()
    return [r["user_id"] for r in rows]


def count_trips(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM trips").fetchone()[0]


def _to_trip(conn: sqlite3.Connection, row: sqlite3.Row) -> Trip:
    return Trip(
        id=row["id"],
        name=row["name"],
        resort=row["resort"],
        location=Location(lat=row["lat"], lng=row["lng"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        invite_code=row["invite_code"],
        created_by=row["created_by"],
        members=get_members(conn, row["id"]),
        created_at=row["created_at"],
    )
