"""Shared fakes for tests that drive git, gh and claude through the executor."""

import subprocess
from typing import Any, Callable, Dict, List, Tuple, Union

import pytest

from gh_claude_tools.executor import CommandExecutor


Response = Union[subprocess.CompletedProcess, BaseException, Callable[..., Any]]


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    """Build a subprocess result with the given output."""

    return subprocess.CompletedProcess(args="", returncode=returncode, stdout=stdout, stderr=stderr)


class FakeRunner:
    """Stand-in for subprocess.run that records calls and replays scripted results.

    Commands are matched exactly first, then by prefix. Unmatched commands
    succeed with empty output.
    """

    def __init__(self, responses: Dict[str, Response] = None) -> None:
        self.responses: Dict[str, Response] = dict(responses or {})
        self.prefixes: List[Tuple[str, Response]] = []
        self.calls: List[Tuple[Any, Dict[str, Any]]] = []

    def on_prefix(self, prefix: str, response: Response) -> "FakeRunner":
        self.prefixes.append((prefix, response))
        return self

    @property
    def commands(self) -> List[str]:
        return [args if isinstance(args, str) else " ".join(args) for args, _ in self.calls]

    def kwargs_for(self, prefix: str) -> Dict[str, Any]:
        for args, kwargs in self.calls:
            command = args if isinstance(args, str) else " ".join(args)
            if command.startswith(prefix):
                return kwargs
        raise AssertionError(f"No call starting with {prefix!r}: {self.commands}")

    def __call__(self, args: Any, **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append((args, kwargs))
        command = args if isinstance(args, str) else " ".join(args)

        response = self.responses.get(command)
        if response is None:
            response = next(
                (resp for prefix, resp in self.prefixes if command.startswith(prefix)),
                None,
            )
        if response is None:
            return completed()
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(command, **kwargs)
        return response


@pytest.fixture
def make_completed() -> Callable[..., subprocess.CompletedProcess]:
    return completed


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def executor(runner: FakeRunner) -> CommandExecutor:
    return CommandExecutor(run_process=runner)
