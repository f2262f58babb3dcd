from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Sequence

from strif import atomic_output_file

from notecraft.models import STATUS_OPTIONS, NoteRecord, Status, TagNode, sanitize_filename
from notecraft.prompts import InputSource
from notecraft.selector import parse_choice, select_tags
from notecraft.terminal import say, warn
from notecraft.tools import MissingDependencyError, find_command

logger = logging.getLogger(__name__)


def markdown_filename(base: str) -> str:
    return f"{sanitize_filename(base)}.md"


def select_status(source: InputSource) -> Status:
    say("--- Select Status ---")
    for idx, status in enumerate(STATUS_OPTIONS, 1):
        say(f"{idx}). {status}")

    count = len(STATUS_OPTIONS)
    while True:
        choice = source.read("Choose a status (enter number): ").strip()
        index = parse_choice(choice, count)
        if index is not None:
            status = STATUS_OPTIONS[index]
            say(f"Selected Status: {status}")
            say()
            return status
        say(f"Invalid selection. Please enter a number from 1 to {count}.")


def format_wiki_tags(tags: Sequence[str]) -> str:
    return " ".join(f"[[{tag}]]" for tag in tags)


def format_yaml_tags(tags: Sequence[str]) -> str:
    return "[" + ", ".join(tags) + "]"


def render_note(note: NoteRecord, now: datetime) -> str:
    if note.status is None:
        raise ValueError("A status must be selected before rendering the note.")
    lines = [
        "---",
        f"id: {now:%Y%m%d%H%M}",
        f"created_date: {now:%Y-%m-%d}",
        f"updated_date: {now:%Y-%m-%d}",
        "---",
        f"Status: {note.status}",
        f"Tags: {format_wiki_tags(note.tags)}",
        "---",
        f"## {note.title}",
        note.description,
        "",
        f"[url]({note.url})",
        "_______",
        "",
        "References",
        "",
        "```yaml",
        "data:",
        f'  title: "{note.title}"',
        "  type: note",
        f"  tags: {format_yaml_tags(note.tags)}",
        f"  status: {note.status}",
        "  notes: |",
        f"    # {note.title}",
        "    ",
        f"    {note.description}",
        "```",
    ]
    return "\n".join(lines) + "\n"


def write_note(path: Path, content: str) -> None:
    with atomic_output_file(path) as tmp:
        Path(tmp).write_text(content, encoding="utf-8")


def check_editor(command: str, open_editor: bool) -> bool:
    if find_command(command):
        return True
    if open_editor:
        raise MissingDependencyError(f"'{command}' command not found. Please ensure it's in your PATH.")
    warn(f"'{command}' command not found; the note will not be opened in an editor.")
    return False


def launch_editor(command: str, path: Path) -> None:
    proc = subprocess.run([command, str(path)], check=False)
    if proc.returncode != 0:
        raise RuntimeError(f"Editor command '{command}' exited with status {proc.returncode}.")


def create_note(
    note: NoteRecord,
    source: InputSource,
    tags: Sequence[TagNode],
    directory: Path = Path("."),
    now: datetime | None = None,
) -> Path:
    if not note.sanitized_filename:
        warn(f"Filename '{note.filename_base}' has no usable characters; writing '{note.markdown_filename}'.")

    note.status = select_status(source)
    note.tags = select_tags(tags, source).as_list()

    path = directory / note.markdown_filename
    write_note(path, render_note(note, now or datetime.now()))
    logger.info("Wrote %s (status=%s, tags=%d)", path, note.status, len(note.tags))
    return path
