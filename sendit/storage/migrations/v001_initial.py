"""Initial schema: users, trips and trip membership."""

import sqlite3

DDL = [
    # User profiles
    """
    CREATE TABLE IF NOT EXISTS users (
        uid TEXT PRIMARY KEY,
        display_name TEXT NOT NULL,
        nickname TEXT,
        email TEXT NOT NULL DEFAULT '',
        photo_url TEXT NOT NULL DEFAULT '',
        current_trip TEXT,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Trips
    """
    CREATE TABLE IF NOT EXISTS trips (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        resort TEXT NOT NULL,
        lat REAL NOT NULL,
        lng REAL NOT NULL,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        invite_code TEXT UNIQUE NOT NULL,
        created_by TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_trips_invite_code ON trips(invite_code)",

    # Trip membership
    """
    CREATE TABLE IF NOT EXISTS trip_members (
        trip_id TEXT NOT NULL REFERENCES trips(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL,
        joined_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (trip_id, user_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_trip_members_user ON trip_members(user_id)",
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
