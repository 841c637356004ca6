# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from subhub.app import match_catalog_file, reconcile_subscription, render_deployable
from subhub.common.logging import level_from_name
from subhub.config import ConfigurationError, configure_logging
from subhub.domain.errors import FilterEvaluationError, SerializationError
from subhub.domain.model import ObjectKey

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Propagate hub subscriptions into deployables")
    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile", help="Run one reconciliation cycle against the API server"
    )
    reconcile.add_argument(
        "subscription",
        type=str,
        help="Subscription to reconcile, as NAMESPACE/NAME",
    )

    render = subparsers.add_parser(
        "render", help="Print the deployable synthesized for a subscription manifest"
    )
    render.add_argument(
        "-f",
        "--file",
        required=True,
        help="Subscription manifest (YAML or JSON)",
    )
    render.add_argument(
        "--channel-generation",
        type=int,
        help="Channel generation to stamp on the template",
    )

    match = subparsers.add_parser(
        "match", help="List catalog deployables matched by a subscription's package filter"
    )
    match.add_argument(
        "-f",
        "--file",
        required=True,
        help="Subscription manifest (YAML or JSON)",
    )
    match.add_argument(
        "-c",
        "--catalog",
        required=True,
        help="Multi-document YAML file of catalog deployables",
    )

    return parser.parse_args(list(argv))


def _parse_subscription_key(value: str) -> ObjectKey:
    namespace, sep, name = value.partition("/")
    if not sep or not namespace or not name or "/" in name:
        raise ValueError(f"Expected NAMESPACE/NAME, got {value!r}")
    return ObjectKey(namespace=namespace, name=name)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging(level=level_from_name(os.getenv("SUBHUB_LOG_LEVEL")))
        parsed_args = _parse_args(args_list)
        key = (
            _parse_subscription_key(parsed_args.subscription)
            if parsed_args.command == "reconcile"
            else None
        )
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if key is not None:
            result = reconcile_subscription(key)
            for failure in result.soft_failures:
                log.warning("Soft failure %s on %s: %s", failure.kind, failure.key, failure.error)
        elif parsed_args.command == "render":
            document = render_deployable(
                parsed_args.file, channel_generation=parsed_args.channel_generation
            )
            print(json.dumps(document, indent=2, sort_keys=True))
        elif parsed_args.command == "match":
            for matched in match_catalog_file(parsed_args.file, parsed_args.catalog):
                print(matched)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except (ConfigurationError, SerializationError, FilterEvaluationError):
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
