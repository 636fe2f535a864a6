from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from reviewlink.app import build_service
from reviewlink.config import configure_logging, get_api_config
from reviewlink.domain.errors import InvalidInputError, UnauthorizedError
from reviewlink.domain.model import CallerIdentity
from reviewlink.domain.reconciliation import ConfirmedMatch, LinkRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from reviewlink.app import ReconciliationService

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile external reviews with clients")
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover = subparsers.add_parser("discover", help="Propose review/client matches")
    discover.add_argument(
        "--business-id",
        type=str,
        required=True,
        help="Business (tenant) to scan",
    )
    discover.add_argument(
        "--user-id",
        type=str,
        required=True,
        help="Owner user id the transaction is bound to",
    )

    link = subparsers.add_parser("link", help="Commit confirmed matches")
    link.add_argument(
        "--business-id",
        type=str,
        required=True,
        help="Business (tenant) the matches belong to",
    )
    link.add_argument(
        "--user-id",
        type=str,
        required=True,
        help="Owner user id the transaction is bound to",
    )
    link.add_argument(
        "--match",
        dest="matches",
        action="append",
        default=None,
        metavar="EXTERNAL_REVIEW_ID:CLIENT_ID",
        help="Confirmed pair; repeatable. Without it every discovered match is linked",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, help="Bind address (defaults to config)")
    serve.add_argument("--port", type=int, help="Bind port (defaults to config)")

    return parser.parse_args(list(argv))


def _parse_identity(value: str) -> CallerIdentity:
    try:
        return CallerIdentity(user_id=value)
    except ValueError as exc:
        raise ValueError(f"Invalid user id: {value!r}") from exc


def _parse_match(value: str) -> ConfirmedMatch:
    external_review_id, sep, client_id = value.partition(":")
    if not sep or not external_review_id or not client_id:
        raise ValueError(f"Invalid --match value (expected EXTERNAL:CLIENT): {value}")
    return ConfirmedMatch(external_review_id=external_review_id, client_id=client_id)


def _run_discover(service: ReconciliationService, args: argparse.Namespace) -> None:
    result = service.discover(args.business_id, _parse_identity(args.user_id))
    for match in result.matches:
        log.info(
            "Match: review %s (%s) -> client %s (%s)",
            match.external_review_id,
            match.author_name,
            match.client_id,
            match.client_display_name,
        )
    log.info("Discovery finished: matches=%s", result.match_count)


def _run_link(service: ReconciliationService, args: argparse.Namespace) -> None:
    identity = _parse_identity(args.user_id)
    if args.matches:
        request = LinkRequest(
            business_id=args.business_id,
            matches=tuple(_parse_match(value) for value in args.matches),
        )
        result = service.link(request, identity)
    else:
        result = service.link_all_discovered(args.business_id, identity)
    log.info("Link finished: linked=%s", result.linked_count)


def _serve(args: argparse.Namespace) -> None:
    import uvicorn  # noqa: PLC0415

    from reviewlink.adapters.http import create_app_from_config  # noqa: PLC0415

    config = get_api_config()
    uvicorn.run(
        create_app_from_config(config),
        host=args.host or config.host,
        port=args.port or config.port,
        log_config=None,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    if parsed_args.command == "serve":
        _serve(parsed_args)
        return

    try:
        service, database = build_service()
    except Exception:
        log.exception("Could not start the database")
        sys.exit(1)

    try:
        if parsed_args.command == "discover":
            _run_discover(service, parsed_args)
        elif parsed_args.command == "link":
            _run_link(service, parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (InvalidInputError, UnauthorizedError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)
    finally:
        database.dispose()


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
