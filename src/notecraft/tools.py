from __future__ import annotations

import shutil


class MissingDependencyError(RuntimeError):
    pass


def find_command(command: str) -> str | None:
    return shutil.which(command)


def require_command(command: str, hint: str) -> str:
    path = find_command(command)
    if path is None:
        raise MissingDependencyError(f"'{command}' command not found. {hint}")
    return path
