"""
Run the rank API server together with its Prometheus exporter.
"""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from rank_api.app import create_app
from rank_api.config import get_settings
from rank_api.dependencies import init_rank_repo
from rank_api.errors import ConfigurationError
from rank_api.logging_config import setup_logging
from rank_api.metrics import start_metrics_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank API server")
    parser.add_argument("--host", type=str, default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="API port")
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Prometheus exporter port",
    )
    parser.add_argument(
        "--no-metrics",
        action="store_true",
        help="Do not start the Prometheus exporter",
    )
    parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Keep ranks in process memory instead of Firestore",
    )
    return parser


def _pick(override, default):
    return default if override is None else override


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.in_memory:
        settings = settings.model_copy(update={"use_in_memory_backends": True})

    setup_logging(settings.log_level, settings.log_format)

    try:
        # Fail fast on a bad Firestore configuration rather than on the first request.
        init_rank_repo(settings)
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2

    if settings.metrics_enabled and not args.no_metrics:
        start_metrics_server(
            _pick(args.metrics_port, settings.metrics_port),
            addr=settings.metrics_host,
        )

    uvicorn.run(
        create_app(),
        host=_pick(args.host, settings.host),
        port=_pick(args.port, settings.port),
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
