"""Default resort list with pre-resolved coordinates."""

from sendit.config.schema import ResortConfig

DEFAULT_RESORTS: list[ResortConfig] = [
    ResortConfig(name="Palisades Tahoe", slug="palisades-tahoe", lat=39.1968, lng=-120.2354),
    ResortConfig(name="Heavenly", slug="heavenly", lat=38.9353, lng=-119.9400),
    ResortConfig(name="Northstar", slug="northstar", lat=39.2746, lng=-120.1210),
    ResortConfig(name="Kirkwood", slug="kirkwood", lat=38.6849, lng=-120.0653),
    ResortConfig(name="Mt. Rose", slug="mt-rose", lat=39.3149, lng=-119.8813),
    ResortConfig(name="Mammoth Mountain", slug="mammoth", lat=37.6308, lng=-119.0326),
    ResortConfig(name="Park City", slug="park-city", lat=40.6514, lng=-111.5080),
    ResortConfig(name="Vail", slug="vail", lat=39.6403, lng=-106.3742),
    ResortConfig(name="Breckenridge", slug="breckenridge", lat=39.4817, lng=-106.0384),
    ResortConfig(name="Jackson Hole", slug="jackson-hole", lat=43.5877, lng=-110.8279),
    ResortConfig(name="Aspen Snowmass", slug="aspen-snowmass", lat=39.2084, lng=-106.9490),
    ResortConfig(name="Telluride", slug="telluride", lat=37.9375, lng=-107.8123),
    ResortConfig(name="Big Sky", slug="big-sky", lat=45.2618, lng=-111.4010),
    ResortConfig(name="Steamboat", slug="steamboat", lat=40.4572, lng=-106.8045),
    ResortConfig(name="Deer Valley", slug="deer-valley", lat=40.6375, lng=-111.4783),
]
