#!/usr/bin/env python3
"""Start the Groupie Tracker web server."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Type

from werkzeug.serving import WSGIRequestHandler

from groupie import config, env
from groupie.api_server import create_app
from groupie.logging_config import setup_logging

logger = logging.getLogger("groupie")


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve the artist catalog pages and JSON API.",
    )
    parser.add_argument("--host", help="Interface to bind (default: GROUPIE_HOST or 127.0.0.1).")
    parser.add_argument("--port", type=int, help="Port to listen on (default: GROUPIE_PORT or 8080).")
    parser.add_argument(
        "--artists",
        type=Path,
        help="JSON array of seed artists (default: data/artists.json).",
    )
    parser.add_argument(
        "--translations",
        type=Path,
        help="Translation table as {locale: {key: value}} (default: data/translations.json).",
    )
    parser.add_argument("--log-level", help="Logging level name (default: INFO).")
    parser.add_argument("--log-file", help="Also write logs to this file (default: GROUPIE_LOG_FILE).")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run Flask in debug mode with the reloader.",
    )
    return parser.parse_args(list(argv))


def build_settings(args: argparse.Namespace) -> config.Settings:
    settings = config.get_settings()
    overrides = {
        "host": args.host,
        "port": args.port,
        "artists_file": args.artists,
        "translations_file": args.translations,
        "log_level": args.log_level.upper() if args.log_level else None,
        "log_file": args.log_file,
    }
    settings = replace(settings, **{key: value for key, value in overrides.items() if value is not None})
    if args.debug:
        settings = replace(settings, debug=True)
    return settings


def build_request_handler(read_timeout: float, write_timeout: float) -> Type[WSGIRequestHandler]:
    """Request handler applying per-connection socket deadlines.

    ``read_timeout`` bounds waiting for a request, ``write_timeout`` bounds
    sending the response. Zero disables a deadline.
    """

    class DeadlineRequestHandler(WSGIRequestHandler):
        timeout = read_timeout or None
        write_deadline = write_timeout or None

        def handle_one_request(self) -> None:
            self.connection.settimeout(self.timeout)
            super().handle_one_request()

        def send_response(self, code, message=None) -> None:
            self.start_write_deadline()
            super().send_response(code, message)

        def start_write_deadline(self) -> None:
            self.connection.settimeout(self.write_deadline)

    return DeadlineRequestHandler


def main(argv: Iterable[str]) -> int:
    args = parse_args(argv)
    env.load_env()
    settings = build_settings(args)
    setup_logging(settings.log_level, settings.log_file)

    app = create_app(settings=settings)
    logger.info("Server started on http://%s:%d", settings.host, settings.port)
    try:
        app.run(
            host=settings.host,
            port=settings.port,
            debug=settings.debug,
            request_handler=build_request_handler(settings.read_timeout, settings.write_timeout),
        )
    except OSError as exc:
        logger.error("Could not start server: %s", exc)
        return 1
    return 0


def console_main() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    console_main()
