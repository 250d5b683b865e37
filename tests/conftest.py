"""Shared fixtures for the Obsidian MCP tests."""

from datetime import datetime
from typing import Optional, Sequence

import pytest

from core.handlers import ToolDispatcher
from core.validation import clear_schema_cache


class FakeRunner:
    """ProcessRunner stand-in that records argument lists.

    Queued outputs are returned (or raised, if they are exceptions) in
    order; once the queue is empty every call returns `default`.
    """

    def __init__(self, outputs: Sequence[object] = (), default: str = "mock output") -> None:
        self.outputs = list(outputs)
        self.default = default
        self.calls: list[list[str]] = []
        self.vaults: list[Optional[str]] = []

    def run(self, args, *, timeout=None, vault=None) -> str:
        self.calls.append(list(args))
        self.vaults.append(vault)
        if self.outputs:
            out = self.outputs.pop(0)
            if isinstance(out, Exception):
                raise out
            return out
        return self.default

    @property
    def last(self) -> list[str]:
        assert self.calls, "runner was never called"
        return self.calls[-1]


FIXED_NOW = datetime(2025, 7, 14, 9, 30)


@pytest.fixture(autouse=True)
def _fresh_schema_cache():
    clear_schema_cache()
    yield
    clear_schema_cache()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def dispatcher(runner: FakeRunner) -> ToolDispatcher:
    return ToolDispatcher(runner, clock=lambda: FIXED_NOW)
