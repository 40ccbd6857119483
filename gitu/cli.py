"""Command-line front door for gitu.

Parses the (deliberately small) option set, loads config, sets up logging,
then runs the interactive session in the current working copy.
"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from .logs import configure_logging, debug_requested
from .runtime import run_app
from .runtime.config import load_gitu_config


def package_version() -> str:
    try:
        return version("gitu")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitu",
        description="Browse and operate on the git repository in the current directory.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {package_version()}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the interactive session.

    Exits with the session's status when it is non-zero (startup errors).
    """
    build_parser().parse_args(argv)
    config = load_gitu_config()
    configure_logging(debug_requested(config.debug))
    status = run_app(config)
    if status:
        raise SystemExit(status)


if __name__ == "__main__":
    main()
