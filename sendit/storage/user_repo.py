"""Repository for user profiles."""

import sqlite3

from sendit.models.trip import UserProfile


def upsert_user(conn: sqlite3.Connection, profile: UserProfile) -> None:
    """Create or update a profile. current_trip is only written when set."""
    conn.execute(
        "INSERT INTO users (uid, display_name, nickname, email, photo_url, current_trip) "
        "VALUES (?, ?, ?, ?, ?, ?) "
        "ON CONFLICT(uid) DO UPDATE SET "
        "display_name = excluded.display_name, "
        "nickname = COALESCE(excluded.nickname, users.nickname), "
        "email = excluded.email, "
        "photo_url = excluded.photo_url, "
        "current_trip = COALESCE(excluded.current_trip, users.current_trip)",
        (
            profile.uid, profile.display_name, profile.nickname,
            profile.email, profile.photo_url, profile.current_trip,
        ),
    )
    conn.commit()


def get_user(conn: sqlite3.Connection, uid: str) -> UserProfile | None:
    row = conn.execute("SELECT * FROM users WHERE uid = ?", (uid,)).fetchone()
    if row is None:
        return None
    return UserProfile(
        uid=row["uid"],
        display_name=row["display_name"],
        email=row["email"],
        photo_url=row["photo_url"],
        nickname=row["nickname"],
        current_trip=row["current_trip"],
    )


def set_nickname(conn: sqlite3.Connection, uid: str, nickname: str) -> bool:
    """Set a user's nickname. Returns False if the user does not exist."""
    cursor = conn.execute(
        "UPDATE users SET nickname = ? WHERE uid = ?", (nickname.strip(), uid)
    )
    conn.commit()
    return cursor.rowcount > 0


def set_current_trip(conn: sqlite3.Connection, uid: str, trip_id: str | None) -> bool:
    """Point a user at a trip. Returns False if the user does not exist."""
    cursor = conn.execute(
        "UPDATE users SET current_trip = ? WHERE uid = ?", (trip_id, uid)
    )
    conn.commit()
    return cursor.rowcount > 0


def count_users(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
