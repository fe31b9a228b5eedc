#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Entry point for the ideas terminal dashboard.

Usage:
    ideas-tui                   # Start on the Ideas tab
    ideas-tui --tab projects    # Start on another tab
    python3 -m ideas.tui_cli
"""

import argparse
import sys
from typing import List, Optional

from ideas._version import __version__
from ideas.debug_logger import get_logger
from ideas.errors import IdeasError
from ideas.paths import IdeasPaths
from ideas.store import IdeasStore
from ideas.tui.app_state import Tab


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ideas-tui",
        description="Ideas - terminal dashboard for ideas, projects, plans and dotfiles",
    )
    parser.add_argument("--version", action="version", version=f"ideas {__version__}")
    parser.add_argument(
        "--tab",
        "-t",
        choices=[tab.value for tab in Tab],
        default=Tab.IDEAS.value,
        help="Tab to show at startup",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for the TUI."""
    args = build_parser().parse_args(argv)

    # Imported late so --help and --version work without a usable terminal
    from ideas.tui.app import IdeasApp, load_all

    try:
        store = IdeasStore(IdeasPaths.detect())
        records, warnings = load_all(store)
    except IdeasError as e:
        get_logger().error("tui_startup", str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    app = IdeasApp(store, records, initial_tab=Tab(args.tab), warnings=warnings)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
