"""Main entry point for the feedterm CLI."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..config import ConfigError, DashboardConfig, load_config
from .dashboard import run_dashboard

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedterm",
        description="Terminal dashboard for browsing and posting to a content feed",
        epilog=(
            "Keys: Up/Down scroll, PgUp/PgDn previous/next item, F1 login, "
            "F2 new item, F5 refresh, q quit"
        ),
    )
    parser.add_argument("--config", help="Path to config.yaml (default: ~/.feedterm/config.yaml)")
    parser.add_argument("--api-url", help="Content service base URL (overrides config and FEEDTERM_API_URL)")
    parser.add_argument("--log-file", help="Write logs here instead of the configured log_file")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    return parser


def setup_logging(config: DashboardConfig, debug: bool = False):
    """Send logs to a file; curses owns the terminal."""
    log_path = Path(config.log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.DEBUG if debug else getattr(logging, str(config.log_level).upper(), logging.INFO)
    logging.basicConfig(
        filename=str(log_path),
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for feedterm."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.api_url:
        config.api_url = args.api_url
    if args.log_file:
        config.log_file = args.log_file

    try:
        setup_logging(config, debug=args.debug)
    except OSError as e:
        print(f"Error: cannot open log file {config.log_file}: {e}", file=sys.stderr)
        return 2

    return run_dashboard(config)


def run():
    """Entry point for console script."""
    sys.exit(main())


if __name__ == "__main__":
    run()
