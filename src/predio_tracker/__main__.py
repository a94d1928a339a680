import argparse
import json
import os

from .config import get_settings, reset_settings_cache
from .db.init import init_db
from .logging_config import configure_logging
from .service import PredioService


def _add_db_arg(parser):
    parser.add_argument(
        "--db",
        default=None,
        help="SQLite path (defaults to PREDIOS_DB or ./predios.sqlite)",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description="Parcel status tracker",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit one JSON object per log line",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create tables if missing")
    _add_db_arg(p)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    _add_db_arg(p)

    p = sub.add_parser("set-status", help="Record one status change")
    p.add_argument("parcel_id")
    p.add_argument("status", nargs="?", default=None, help="rojo, azul or neutral")
    p.add_argument("--section", default=None)
    p.add_argument("--actor", default=None)
    _add_db_arg(p)

    for name, help_text in (
        ("stats", "Print per-section counts"),
        ("users", "Print the actor directory"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_db_arg(p)

    p = sub.add_parser("activity", help="Print recent status changes")
    p.add_argument("--limit", default=None, help="Rows to show (1-500)")
    _add_db_arg(p)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    configure_logging(
        args.log_level or settings.log_level,
        json_lines=args.log_json or settings.log_json,
    )
    db_path = args.db or settings.db_path

    if args.command == "init-db":
        init_db(db_path)
        print(json.dumps({"ok": True, "db": db_path}))
        return

    if args.command == "serve":
        import uvicorn

        os.environ["PREDIOS_DB"] = db_path
        reset_settings_cache()
        init_db(db_path)
        uvicorn.run(
            "predio_tracker.api.app:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            log_level=(args.log_level or settings.log_level).lower(),
        )
        return

    init_db(db_path)
    with PredioService.open(db_path) as service:
        if args.command == "set-status":
            _, event = service.set_status(
                args.parcel_id, args.status, args.section, args.actor
            )
            print(json.dumps({"ok": True, "event": event.to_dict()}))
        elif args.command == "stats":
            print(json.dumps([s.to_dict() for s in service.summarize()]))
        elif args.command == "users":
            print(json.dumps([a.to_dict() for a in service.list_actors()]))
        elif args.command == "activity":
            print(json.dumps([e.to_dict() for e in service.activity(args.limit)]))


def _safe_main():
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:
        print(json.dumps({"error": str(exc)}))
        raise SystemExit(1)


if __name__ == "__main__":
    _safe_main()
