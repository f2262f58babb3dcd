"""Diagnostic channel shared by the interactive tools.

Menus, prompts and warnings go to stderr so stdout stays free for the
single line of output other scripts consume.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

err_console = Console(stderr=True, highlight=False)


def say(text: str = "") -> None:
    err_console.print(text, markup=False, soft_wrap=True)


def warn(text: str) -> None:
    err_console.print(f"Warning: {text}", style="yellow", markup=False, soft_wrap=True)


def error(text: str) -> None:
    err_console.print(f"Error: {text}", style="bold red", markup=False, soft_wrap=True)


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )
