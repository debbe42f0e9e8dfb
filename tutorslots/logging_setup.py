"""
Logging configuration shared by the CLI and the HTTP server.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", console: Console | None = None) -> None:
    """Install a Rich handler on the root logger, or just adjust its level."""
    root = logging.getLogger()

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
        root.addHandler(handler)

    root.setLevel(level)
