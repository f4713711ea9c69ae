"""CLI entrypoint for apex-chat."""

from __future__ import annotations

import argparse
from importlib import metadata
from typing import Sequence

from .app import ApexChatApp
from .config import ensure_config_dir


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apex-chat", description="Apex DeepSeek chat")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("apex-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"apex-chat {version}")
        return

    ensure_config_dir()
    app = ApexChatApp()
    app.run()


if __name__ == "__main__":
    main()
