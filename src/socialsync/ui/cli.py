from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from socialsync.app import migrate_legacy_socials, sync_socials, verify_onchain_socials
from socialsync.config import ConfigurationError, configure_logging
from socialsync.domain.gate import RunMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _add_execute_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Write the computed changes (default: dry run, nothing is written)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile BaseCard socials")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every chain read",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate = subparsers.add_parser(
        "migrate",
        help="Convert legacy flat socials to the {handle, verified} shape",
    )
    _add_execute_flag(migrate)

    sync = subparsers.add_parser(
        "sync",
        help="Overwrite stored socials with differing on-chain attestations",
    )
    _add_execute_flag(sync)

    subparsers.add_parser("verify", help="Report stored socials against the chain")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "migrate":
            mode = RunMode.from_flag(execute=parsed_args.execute)
            result = migrate_legacy_socials(mode=mode)
            if result.changes and not mode.persists:
                log.info("Dry run: %s cards would be migrated", len(result.changes))
        elif parsed_args.command == "sync":
            mode = RunMode.from_flag(execute=parsed_args.execute)
            sync_result = sync_socials(mode=mode)
            if sync_result.changed and not mode.persists:
                log.info(
                    "Dry run: %s cards would be updated. Pass --execute to apply",
                    sync_result.changed,
                )
        elif parsed_args.command == "verify":
            verify_onchain_socials()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
