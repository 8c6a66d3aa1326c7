from __future__ import annotations
import logging

from rich.console import Console
from rich.logging import RichHandler

# stdout carries the protocol; everything human-readable goes to stderr
stderr_console = Console(stderr=True)


def setup_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=stderr_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
