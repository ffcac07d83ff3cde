#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Progress Buddy (SQLite + FastAPI)

Commands:
  init                Create the database file and the activities/logs/goals tables
  serve               Run the HTTP API with uvicorn

Notes:
- The database path comes from --db, then BUDDY_DB_PATH / DATABASE_URL, then
  config.yaml `db_path`, then data/progress_buddy.db next to this file.
"""

import argparse
import logging
import sys

from progress_buddy.config import load_settings
from progress_buddy.db import Store
from progress_buddy.errors import InitializationError
from progress_buddy.logs import configure_logging

logger = logging.getLogger("progress_buddy.cli")


def cmd_init(args, settings):
    try:
        with Store(args.db or settings["db_path"]) as store:
            print(f"Initialized database at {store.db_path}")
    except InitializationError as e:
        logger.error("failed to initialize database: %s", e)
        return 1
    return 0


def cmd_serve(args, settings):
    import uvicorn

    from progress_buddy.api import create_app

    if args.db:
        settings["db_path"] = args.db
    app = create_app(settings=settings)
    port = args.port or settings["port"]
    logger.info("Progress Buddy API server running on port %s (env=%s)", port, settings["env"])
    uvicorn.run(app, host=args.host, port=port, log_level=settings["log_level"].lower())
    return 0


def main(argv=None):
    ap = argparse.ArgumentParser(description="Progress Buddy")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_init = sub.add_parser("init", help="Create database and schema")
    ap_init.add_argument("--db", default=None, help="SQLite file path")
    ap_init.set_defaults(func=cmd_init)

    ap_serve = sub.add_parser("serve", help="Run the HTTP API")
    ap_serve.add_argument("--db", default=None, help="SQLite file path")
    ap_serve.add_argument("--host", default="0.0.0.0")
    ap_serve.add_argument("--port", type=int, default=None)
    ap_serve.set_defaults(func=cmd_serve)

    args = ap.parse_args(argv)
    settings = load_settings()
    configure_logging(settings["log_level"])
    return args.func(args, settings)


if __name__ == "__main__":
    sys.exit(main())
