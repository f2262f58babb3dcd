from __future__ import annotations

import logging
import re
from typing import Sequence

from notecraft.models import SelectionState, TagNode
from notecraft.prompts import InputSource
from notecraft.terminal import say

logger = logging.getLogger(__name__)

MENU_COLUMNS = 5
DONE = "done"

_NUMBER = re.compile(r"[0-9]+")


def render_menu(names: Sequence[str], per_line: int = MENU_COLUMNS) -> list[str]:
    lines: list[str] = []
    for start in range(0, len(names), per_line):
        row = names[start : start + per_line]
        lines.append("".join(f"{start + i + 1:2d}). {name:<12} " for i, name in enumerate(row)))
    return lines


def is_done(line: str) -> bool:
    return line.strip().lower() == DONE


def parse_choice(token: str, count: int) -> int | None:
    """Return the 0-based index for a 1-based menu token, or None if invalid."""
    if not _NUMBER.fullmatch(token):
        return None
    value = int(token)
    if value < 1 or value > count:
        return None
    return value - 1


class TagSelector:
    """
    Two-level numbered menu over the tag store.

    Top-level choices are read line by line until 'done'. Choosing a tag
    that carries subtags records the parent and opens a single sub-menu
    round before returning to the top level.
    """

    def __init__(self, tags: Sequence[TagNode], source: InputSource) -> None:
        self.tags = list(tags)
        self.source = source
        self.selected = SelectionState()

    def run(self) -> SelectionState:
        names = [node.name for node in self.tags]
        while True:
            say("--- Select Tags (enter numbers separated by spaces, or 'done') ---")
            for line in render_menu(names):
                say(line)
            say()
            say(f"Currently selected: {self.selected.summary()}")
            line = self.source.read("Choose tags: ")
            if is_done(line):
                break
            for token in line.split():
                index = parse_choice(token, len(self.tags))
                if index is None:
                    say(f"Invalid choice: '{token}'.")
                    continue
                node = self.tags[index]
                self.selected.add(node.name)
                if node.is_parent:
                    self._select_subtags(node)
        logger.debug("Tag selection finished: %s", self.selected.as_line())
        return self.selected

    def _select_subtags(self, parent: TagNode) -> None:
        subtags = list(parent.subtags or ())
        say(f"--- Select Sub-Tags for '{parent.name}' (enter numbers separated by spaces, or 'done') ---")
        for line in render_menu(subtags):
            say(line)
        say()

        line = self.source.read(f"Choose sub-tags for '{parent.name}': ")
        if is_done(line):
            return
        for token in line.split():
            index = parse_choice(token, len(subtags))
            if index is None:
                say(f"Invalid sub-tag choice: '{token}'")
                continue
            self.selected.add(parent.name)
            self.selected.add(subtags[index])
        say(f"Currently selected: {self.selected.summary()}")


def select_tags(tags: Sequence[TagNode], source: InputSource) -> SelectionState:
    return TagSelector(tags, source).run()
