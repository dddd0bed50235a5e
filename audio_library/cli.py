from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .commands import artists as cmd_artists
from .commands import tree as cmd_tree
from .config import Settings, find_config
from .daemon import LibraryWatcher
from .library import MusicLibrary
from .scanner import LibraryScanner

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    """Strips library roots from log messages so paths read relative to the library."""

    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for root in self.roots:
            message = message.replace(f"{root}/", "").replace(root, "")
        return message


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str, roots: list[Path]) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, roots))
    root_logger.addHandler(warn_buffer)

    logging.getLogger("watchdog").setLevel(logging.WARNING)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a music library by artist and album")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    tree_parser = subparsers.add_parser("tree", help="Print artists, albums and tracks")
    tree_parser.add_argument(
        "--no-tracks",
        action="store_true",
        help="Only list artists and albums",
    )
    tree_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON to stdout",
    )
    subparsers.add_parser("artists", help="Print one line per artist with album/track counts")
    subparsers.add_parser("watch", help="Keep the library current while files change")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    config_path = find_config(args.config)
    settings = Settings.load(config_path)
    display_roots = [root.resolve() for root in settings.library.roots]
    warn_buffer = configure_logging(args.log_level, display_roots)

    try:
        match args.command:
            case "tree":
                library = MusicLibrary.from_tracks(LibraryScanner(settings.library).iter_tracks())
                if getattr(args, "json", False):
                    cmd_tree.run_json(library.artists)
                else:
                    cmd_tree.run(library.artists, show_tracks=not getattr(args, "no_tracks", False))
            case "artists":
                library = MusicLibrary.from_tracks(LibraryScanner(settings.library).iter_tracks())
                cmd_artists.run(library.artists)
            case "watch":
                try:
                    asyncio.run(LibraryWatcher(settings).run())
                except KeyboardInterrupt:
                    logging.getLogger(__name__).info("Interrupted")
            case _:
                parser.error("Unknown command")
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m", file=sys.stderr)
            for line in warn_buffer.records:
                print(f" - {line}", file=sys.stderr)


if __name__ == "__main__":
    main()
