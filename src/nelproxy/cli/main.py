# src/nelproxy/cli/main.py

"""
CLI entrypoint.

Loads settings from the environment, applies command-line overrides, initializes
logging, then runs one of:
- serve:  the dispatch API under uvicorn (plain HTTP or TLS),
- worker: one worker pass for an inventory,
- submit: post a task JSON file to the dispatch API (producer side).

Exit codes: 0 ok, 1 configuration error, 2 transport error.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import uvicorn

from ..api.app import create_app
from ..config import Settings, get_settings
from ..errors import ConfigurationError, TransportError
from ..logging_setup import setup_logging
from ..tasks.task_store import TaskStore
from ..worker.agent import WorkerAgent
from ..worker.client import DispatchClient, build_http_client

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_TRANSPORT = 2


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors are configuration errors, not the transport exit status."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_CONFIG, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(prog="nelproxy", description="CI -> Ansible task queue.")
    p.add_argument("--server", help="server address (bind address for serve)")
    p.add_argument("--port", type=int, help="server port")
    p.add_argument("--ssl", dest="ssl_enabled", action="store_true", default=None, help="enable SSL")
    p.add_argument("--no-ssl", dest="ssl_enabled", action="store_false", help="disable SSL")
    p.add_argument("--logs", dest="log_file", type=Path, help="log file")
    p.add_argument("--log-level", help="console log level (default: INFO)")
    p.add_argument("--timeout", dest="request_timeout", type=float, help="HTTP timeout in seconds")

    sub = p.add_subparsers(dest="mode", required=True)

    serve = sub.add_parser("serve", help="run the dispatch API")
    serve.add_argument("--ssl-cert", type=Path, help="path to a ssl cert file")
    serve.add_argument("--ssl-key", type=Path, help="path to a ssl key file")

    worker = sub.add_parser("worker", help="run one worker pass")
    worker.add_argument("--inventory", help="production name or inventory name")
    worker.add_argument("--jformat", dest="json_output", action="store_true", default=None, help="json format on the output")
    worker.add_argument("--ca-bundle", type=Path, help="CA bundle to verify the server certificate")
    worker.add_argument(
        "--stop-on-ack-failure",
        action="store_true",
        default=None,
        help="abort the pass at the first failed acknowledge",
    )

    submit = sub.add_parser("submit", help="submit a task JSON file ('-' for stdin)")
    submit.add_argument("file", help="task JSON file")
    return p


def _settings_from_args(args: argparse.Namespace, base: Settings) -> Settings:
    overrides: dict[str, Any] = {
        name: getattr(args, name, None)
        for name in (
            "server",
            "port",
            "ssl_enabled",
            "log_file",
            "log_level",
            "request_timeout",
            "ssl_cert",
            "ssl_key",
            "inventory",
            "json_output",
            "ca_bundle",
            "stop_on_ack_failure",
        )
    }
    return base.with_overrides(**overrides)


def run_server(settings: Settings) -> int:
    settings.validate_for_server()
    app = create_app(TaskStore())

    ssl_kwargs: dict[str, str] = {}
    if settings.ssl_enabled:
        ssl_kwargs = {"ssl_certfile": str(settings.ssl_cert), "ssl_keyfile": str(settings.ssl_key)}

    logger.info(
        "Listening on %s:%s (%s)",
        settings.server,
        settings.port,
        "https" if settings.ssl_enabled else "http",
    )
    # log_config=None: uvicorn's access log goes through our root handlers (log file included).
    uvicorn.run(app, host=settings.server, port=settings.port, log_config=None, **ssl_kwargs)
    return EXIT_OK


def run_worker(settings: Settings) -> int:
    settings.validate_for_worker()
    with build_http_client(settings) as http:
        agent = WorkerAgent(
            DispatchClient(http),
            settings.inventory,
            emit=lambda line: print(line, flush=True),
            json_output=settings.json_output,
            stop_on_ack_failure=settings.stop_on_ack_failure,
            executable=settings.playbook_bin,
            inventory_root=settings.inventory_root,
        )
        result = agent.run_pass()

    logger.info(
        "Worker pass finished outcome=%s processed=%s skipped=%d",
        result.outcome.value,
        result.processed_ids,
        result.skipped,
    )
    if not result.processed_ids and not settings.json_output:
        print("No tasks for the current production")
    return EXIT_OK


def _read_payload(source: str) -> dict[str, Any]:
    try:
        raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read task file {source}: {exc}") from exc
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Task file {source} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Task file {source} must contain a JSON object")
    return data


def run_submit(settings: Settings, source: str) -> int:
    settings.validate_for_client()
    payload = _read_payload(source)
    with build_http_client(settings) as http:
        reply = DispatchClient(http).submit(payload)
    print(json.dumps(reply, ensure_ascii=False))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = _settings_from_args(args, get_settings())
    except ConfigurationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_file=settings.log_file, console_level=console_level)

    logger.info("Starting %s mode=%s", settings.app_name, args.mode)

    try:
        if args.mode == "serve":
            return run_server(settings)
        if args.mode == "worker":
            return run_worker(settings)
        return run_submit(settings, args.file)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG
    except TransportError as exc:
        logger.error("Transport error: %s", exc)
        return EXIT_TRANSPORT


if __name__ == "__main__":
    raise SystemExit(main())
