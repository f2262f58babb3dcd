from __future__ import annotations

import logging
import subprocess
import sys
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Sequence

from notecraft.terminal import say
from notecraft.tools import require_command

logger = logging.getLogger(__name__)

SKIM_FIRST_PAGE = 1
SKIM_LAST_PAGE = 2
DEFAULT_NLINES = 6
STDOUT_TARGET = "-"


@dataclass(frozen=True, slots=True)
class SkimRule:
    """Lines around a case-sensitive substring, or the head of the text when needle is None."""

    needle: str | None
    context: int = 5

    def window(self, lines: Sequence[str]) -> list[str]:
        if self.needle is None:
            return list(lines)
        return grep_after(lines, self.needle, self.context)


# Needles omit the first letter so either capitalisation of the heading matches.
SKIM_RULES: tuple[SkimRule, ...] = (
    SkimRule("ntroduction"),
    SkimRule("bstract"),
    SkimRule("ummary"),
    SkimRule(None),
)


def grep_after(lines: Sequence[str], needle: str, after: int) -> list[str]:
    """Matching lines plus `after` trailing lines, '--' between disjoint groups."""
    out: list[str] = []
    last_emitted = -1
    until = -1
    for idx, line in enumerate(lines):
        if needle in line:
            if last_emitted >= 0 and idx > last_emitted + 1:
                out.append("--")
            until = idx + after
        if idx <= until:
            out.append(line)
            last_emitted = idx
    return out


def split_lines(text: str) -> list[str]:
    """Split on newlines only; form feeds between pages stay inside their line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def apply_rule(rule: SkimRule, text: str, nlines: int) -> str:
    window = rule.window(split_lines(text))[: max(nlines, 0)]
    return "\n".join(window).rstrip("\n")


def find_summary(text: str, nlines: int = DEFAULT_NLINES, rules: Sequence[SkimRule] = SKIM_RULES) -> str:
    for rule in rules:
        found = apply_rule(rule, text, nlines)
        if found:
            logger.debug("Summary found with rule %r", rule.needle)
            return found
    return ""


def extract_text(pdf: Path, first: int, last: int, command: str = "pdftotext") -> str:
    require_command(command, "It is required to read PDF text; install poppler.")
    cmd = [command, "-f", str(first), "-l", str(last), str(pdf), "-"]
    logger.debug("Running %s", " ".join(cmd))
    proc = subprocess.run(cmd, capture_output=True, encoding="utf-8", errors="replace", check=False)
    if proc.returncode != 0:
        msg = (proc.stderr or proc.stdout or "").strip()
        raise RuntimeError(f"pdftotext failed for '{pdf}': {msg}")
    return proc.stdout.replace("\x00", "")


def skim_pdf(path: Path, nlines: int = DEFAULT_NLINES, command: str = "pdftotext") -> str:
    if not path.is_file():
        raise FileNotFoundError(f"File '{path}' not found.")
    text = extract_text(path, SKIM_FIRST_PAGE, SKIM_LAST_PAGE, command=command)
    return find_summary(text, nlines)


def find_matching(pattern: str, root: Path = Path(".")) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file() and fnmatch(p.name, pattern))


def extract_matching(
    pattern: str,
    first: int,
    last: int,
    output: str = STDOUT_TARGET,
    root: Path = Path("."),
    command: str = "pdftotext",
) -> list[Path]:
    matches = find_matching(pattern, root)
    for path in matches:
        label = f"./{path.relative_to(root).as_posix()}"
        say(f"Processing {label}")
        text = extract_text(path, first, last, command=command)
        _append(output, label + "\n" + text)
    return matches


def _append(output: str, chunk: str) -> None:
    if output == STDOUT_TARGET:
        sys.stdout.write(chunk)
        sys.stdout.flush()
        return
    target = Path(output)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a", encoding="utf-8") as fh:
        fh.write(chunk)
