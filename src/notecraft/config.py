from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EnvConfig:
    tags_file: str
    editor_command: str
    pdftotext_command: str
    skim_lines: int
    log_level: str


def load_env() -> EnvConfig:
    load_dotenv()
    return EnvConfig(
        tags_file=os.getenv("NOTECRAFT_TAGS_FILE", "all_tags.json"),
        editor_command=os.getenv("NOTECRAFT_EDITOR", "code"),
        pdftotext_command=os.getenv("NOTECRAFT_PDFTOTEXT", "pdftotext"),
        skim_lines=_int_env("NOTECRAFT_SKIM_LINES", 6),
        log_level=os.getenv("NOTECRAFT_LOG_LEVEL", "WARNING").upper(),
    )


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d.", name, value, default)
        return default
