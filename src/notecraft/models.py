from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class TagNode:
    name: str
    subtags: tuple[str, ...] | None = None

    @property
    def is_parent(self) -> bool:
        return self.subtags is not None


class SelectionState:
    """Ordered set of tag names picked during one selection session."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: dict[str, None] = {}
        for name in names:
            self.add(name)

    def add(self, name: str) -> bool:
        if name in self._names:
            return False
        self._names[name] = None
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"SelectionState({list(self._names)!r})"

    def as_list(self) -> list[str]:
        return list(self._names)

    def as_line(self) -> str:
        return ",".join(self._names)

    def summary(self) -> str:
        return " ".join(self._names)

    @classmethod
    def from_line(cls, line: str) -> SelectionState:
        return cls(part for part in line.strip().split(",") if part)


class Status(str, Enum):
    IDEA = "idea"
    READ = "read"
    PLAN = "plan"
    PROGRESS = "progress"
    IMPLEMENT = "implement"

    def __str__(self) -> str:
        return self.value


STATUS_OPTIONS: tuple[Status, ...] = tuple(Status)

_DISALLOWED_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9 _-]")


def sanitize_filename(base: str) -> str:
    return _DISALLOWED_FILENAME_CHARS.sub("", base).replace(" ", "_")


@dataclass(slots=True)
class NoteRecord:
    title: str
    filename_base: str
    description: str
    url: str
    open_editor: bool = True
    status: Status | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def sanitized_filename(self) -> str:
        return sanitize_filename(self.filename_base)

    @property
    def markdown_filename(self) -> str:
        return f"{self.sanitized_filename}.md"
