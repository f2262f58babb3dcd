from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from notecraft.terminal import err_console, say


class ResponsesExhaustedError(RuntimeError):
    pass


class InputSource(ABC):
    @abstractmethod
    def read(self, prompt: str) -> str:
        raise NotImplementedError


class ConsoleInput(InputSource):
    def read(self, prompt: str) -> str:
        return err_console.input(prompt, markup=False)


class ScriptedInput(InputSource):
    """Replays canned answers in order, for deterministic runs."""

    def __init__(self, responses: Sequence[str]) -> None:
        self.responses = list(responses)
        self.index = 0

    def read(self, prompt: str) -> str:
        del prompt
        if self.index >= len(self.responses):
            raise ResponsesExhaustedError("Test responses exhausted in TEST_MODE.")
        value = self.responses[self.index]
        say(f"TEST_MODE Input [{self.index}]: {value}")
        self.index += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.responses) - self.index


def parse_responses(text: str) -> list[str]:
    return text.split(",")


def create_input_source(test_mode: bool, responses: str | None = None) -> InputSource:
    if not test_mode:
        return ConsoleInput()
    if not responses:
        raise ValueError("--test-responses is required when --test-mode is active.")
    return ScriptedInput(parse_responses(responses))
