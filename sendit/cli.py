"""CLI entry point for the SendIt trip dashboard."""

import argparse
import logging

from sendit.config.loader import (
    get_config_value,
    load_config,
    resort_by_name,
    set_config_value,
)
from sendit.config.schema import AppConfig
from sendit.models.trip import Location, UserProfile
from sendit.pipeline.refresh_pipeline import WeatherState, refresh_weather
from sendit.reporting.formatters import format_report_json, format_state_text
from sendit.reporting.health_checker import HealthChecker
from sendit.storage import trip_repo, user_repo
from sendit.storage.database import open_store
from sendit.watcher import WeatherWatcher, client_from_config

DEFAULT_CONFIG = "config/sendit.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="sendit",
        description="Ski trip dashboard: mountain weather and the Send-It score",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")

    sub = parser.add_subparsers(dest="command")

    # weather / watch
    weather_p = sub.add_parser("weather", help="Fetch weather and score it once")
    _add_location_args(weather_p)
    weather_p.add_argument("--json", action="store_true", help="JSON output")

    watch_p = sub.add_parser("watch", help="Refresh weather on a timer")
    _add_location_args(watch_p)
    watch_p.add_argument("--interval", type=int, default=None, help="Seconds between refreshes")

    sub.add_parser("resorts", help="List configured resorts")

    # user add / nickname
    user_p = sub.add_parser("user", help="User profile operations")
    user_sub = user_p.add_subparsers(dest="user_command")
    add_p = user_sub.add_parser("add", help="Create or update a user")
    add_p.add_argument("uid")
    add_p.add_argument("--name", required=True)
    add_p.add_argument("--email", default="")
    add_p.add_argument("--photo", default="")
    add_p.add_argument("--nickname", default=None)
    nick_p = user_sub.add_parser("nickname", help="Set a user's nickname")
    nick_p.add_argument("uid")
    nick_p.add_argument("nickname")

    # trip create / join / list / show / weather
    trip_p = sub.add_parser("trip", help="Trip operations")
    trip_sub = trip_p.add_subparsers(dest="trip_command")
    create_p = trip_sub.add_parser("create", help="Create a trip")
    create_p.add_argument("--name", required=True)
    create_p.add_argument("--resort", required=True)
    create_p.add_argument("--start", required=True, help="YYYY-MM-DD")
    create_p.add_argument("--end", required=True, help="YYYY-MM-DD")
    create_p.add_argument("--user", required=True)
    join_p = trip_sub.add_parser("join", help="Join a trip by invite code")
    join_p.add_argument("code")
    join_p.add_argument("--user", required=True)
    list_p = trip_sub.add_parser("list", help="List a user's trips")
    list_p.add_argument("--user", required=True)
    show_p = trip_sub.add_parser("show", help="Show a trip")
    show_p.add_argument("trip_id")
    tw_p = trip_sub.add_parser("weather", help="Weather at a trip's resort")
    tw_p.add_argument("trip_id")
    tw_p.add_argument("--json", action="store_true", help="JSON output")

    sub.add_parser("health", help="Run health checks")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = set_config_value(config, "storage.db_path", args.db)

    if args.command == "weather":
        return _cmd_weather(config, args)
    elif args.command == "watch":
        return _cmd_watch(config, args)
    elif args.command == "resorts":
        return _cmd_resorts(config)
    elif args.command == "user":
        return _cmd_user(config, args)
    elif args.command == "trip":
        return _cmd_trip(config, args)
    elif args.command == "health":
        return _cmd_health(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _add_location_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--resort", help="Resort name or slug")
    p.add_argument("--lat", type=float)
    p.add_argument("--lng", type=float)


def _resolve_location(config: AppConfig, args) -> tuple[Location, str] | None:
    if args.resort:
        resort = resort_by_name(config, args.resort)
        if resort is None:
            print(f"Error: unknown resort '{args.resort}'")
            return None
        return Location(resort.lat, resort.lng), resort.name
    if args.lat is None or args.lng is None:
        print("Error: use --resort NAME or --lat X --lng Y")
        return None
    return Location(args.lat, args.lng), f"{args.lat:.4f},{args.lng:.4f}"


def _print_weather(config: AppConfig, location: Location, title: str, as_json: bool) -> int:
    client = client_from_config(config)
    state = refresh_weather(WeatherState(), client, location.lat, location.lng)
    if state.snapshot is None or state.result is None:
        print(format_state_text(state, title))
        return 1
    if as_json:
        print(format_report_json(state.snapshot, state.result))
    else:
        print(format_state_text(state, title))
    return 0


def _cmd_weather(config: AppConfig, args) -> int:
    resolved = _resolve_location(config, args)
    if resolved is None:
        return 1
    location, title = resolved
    return _print_weather(config, location, title, args.json)


def _cmd_watch(config: AppConfig, args) -> int:
    resolved = _resolve_location(config, args)
    if resolved is None:
        return 1
    location, title = resolved
    watcher = WeatherWatcher(
        config, location.lat, location.lng, title=title, interval=args.interval
    )
    print(f"Watching {title} every {watcher.interval}s (SIGUSR1 to refresh now)")
    watcher.start()
    return 0


def _cmd_resorts(config: AppConfig) -> int:
    for r in config.resorts:
        print(f"{r.slug:<18} {r.name:<20} {r.lat:9.4f} {r.lng:10.4f}")
    return 0


def _cmd_user(config: AppConfig, args) -> int:
    with open_store(config.storage.db_path) as conn:
        if args.user_command == "add":
            user_repo.upsert_user(
                conn,
                UserProfile(
                    uid=args.uid,
                    display_name=args.name,
                    email=args.email,
                    photo_url=args.photo,
                    nickname=args.nickname,
                ),
            )
            print(f"Saved user {args.uid}")
            return 0
        elif args.user_command == "nickname":
            if not user_repo.set_nickname(conn, args.uid, args.nickname):
                print(f"Error: no user {args.uid}")
                return 1
            print(f"Nickname for {args.uid}: {args.nickname}")
            return 0
    print("Use: user add UID --name NAME | user nickname UID NICK")
    return 1


def _cmd_trip(config: AppConfig, args) -> int:
    with open_store(config.storage.db_path) as conn:
        if args.trip_command == "create":
            resort = resort_by_name(config, args.resort)
            if resort is None:
                print(f"Error: unknown resort '{args.resort}'")
                return 1
            trip_id = trip_repo.create_trip(
                conn,
                name=args.name,
                resort=resort.name,
                location=Location(resort.lat, resort.lng),
                start_date=args.start,
                end_date=args.end,
                created_by=args.user,
            )
            trip = trip_repo.require_trip(conn, trip_id)
            print(f"Created trip {trip.id} | invite code {trip.invite_code}")
            return 0
        elif args.trip_command == "join":
            trip_id = trip_repo.join_trip_by_code(conn, args.code, args.user)
            if trip_id is None:
                print(f"Error: no trip with code {args.code.upper()}")
                return 1
            print(f"Joined trip {trip_id}")
            return 0
        elif args.trip_command == "list":
            trips = trip_repo.get_user_trips(conn, args.user)
            print(f"Trips for {args.user}: {len(trips)}")
            for t in trips:
                print(
                    f"  {t.id[:8]} {t.name} @ {t.resort} "
                    f"{t.start_date}..{t.end_date} [{t.invite_code}]"
                )
            return 0
        elif args.trip_command == "show":
            trip = trip_repo.get_trip(conn, args.trip_id)
            if trip is None:
                print(f"Error: no trip {args.trip_id}")
                return 1
            print(f"{trip.name} @ {trip.resort} ({trip.start_date}..{trip.end_date})")
            print(f"Invite code: {trip.invite_code} | Members: {', '.join(trip.members)}")
            return 0
        elif args.trip_command == "weather":
            trip = trip_repo.get_trip(conn, args.trip_id)
            if trip is None:
                print(f"Error: no trip {args.trip_id}")
                return 1
            return _print_weather(config, trip.location, f"{trip.name} @ {trip.resort}", args.json)
    print("Use: trip create | join | list | show | weather")
    return 1


def _cmd_health(config: AppConfig) -> int:
    with open_store(config.storage.db_path) as conn:
        status = HealthChecker(conn, config.weather.base_url).check()

    print(f"DB: {'OK' if status.db_connected else 'FAIL'}")
    print(f"Open-Meteo API: {'OK' if status.weather_api_reachable else 'FAIL'}")
    print(f"Trips: {status.trip_count} | Users: {status.user_count}")
    return 0 if status.db_connected and status.weather_api_reachable else 1


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
