"""Trip and user profile records kept in the document store."""

from dataclasses import dataclass, field

from sendit.models.common import TripId, UserId


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float


@dataclass(frozen=True)
class Trip:
    id: TripId
    name: str
    resort: str
    location: Location
    start_date: str  # YYYY-MM-DD
    end_date: str  # YYYY-MM-DD
    invite_code: str
    created_by: UserId
    members: list[UserId] = field(default_factory=list)
    created_at: str = ""


@dataclass(frozen=True)
class UserProfile:
    uid: UserId
    display_name: str
    email: str = ""
    photo_url: str = ""
    nickname: str | None = None
    current_trip: TripId | None = None
