"""Shell command tool with a basic guard against destructive commands."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from vega.base import CommandError, InvalidInputError, ToolDefinition

DEFAULT_TIMEOUT_SECONDS = 30

DANGEROUS_PATTERNS = (
    "rm -rf /",
    ":(){ :|:& };:",  # fork bomb
    "dd if=/dev/zero",
    "mkfs",
    "format",
    "> /dev/",
    "shutdown",
    "reboot",
    "halt",
)


@dataclass
class BashArgs:
    """Arguments for a shell command invocation."""

    command: str
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    working_directory: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BashArgs:
        """Build arguments from a JSON-like mapping; an empty directory means none."""
        command = data.get("command")
        if not isinstance(command, str):
            raise InvalidInputError("missing or invalid field `command`")

        timeout = data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        if timeout is None:
            timeout = DEFAULT_TIMEOUT_SECONDS
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
            raise InvalidInputError("invalid field `timeout_seconds`")

        directory = data.get("working_directory")
        if directory is not None and not isinstance(directory, str):
            raise InvalidInputError("invalid field `working_directory`")

        return cls(
            command=command,
            timeout_seconds=timeout,
            working_directory=directory or None,
        )


@dataclass
class BashOutput:
    """Captured result of a shell command."""

    stdout: str
    stderr: str
    exit_code: int
    command: str
    success: bool


def _check_safety(command: str) -> None:
    lowered = command.lower()
    for pattern in DANGEROUS_PATTERNS:
        if pattern in lowered:
            raise InvalidInputError(
                f"Command contains potentially dangerous pattern: {pattern}"
            )


def _shell_argv(command: str) -> list[str]:
    if sys.platform == "win32":
        return ["cmd", "/C", command]
    return ["/bin/sh", "-c", command]


class BashTool:
    """Executes shell commands and returns their output."""

    NAME = "bash"

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Executes shell commands and returns the output. Includes basic "
                "safety checks to prevent dangerous operations."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "command": {
                        "type": "string",
                        "description": "The shell command to execute",
                    },
                    "timeout_seconds": {
                        "type": "number",
                        "description": "Timeout in seconds (default: 30)",
                        "default": DEFAULT_TIMEOUT_SECONDS,
                    },
                    "working_directory": {
                        "type": "string",
                        "description": "Working directory for the command (optional)",
                    },
                },
                "required": ["command"],
            },
        )

    def call(self, args: BashArgs | Mapping[str, Any]) -> BashOutput:
        """Run the command after the safety check and capture its output."""
        if isinstance(args, Mapping):
            args = BashArgs.from_dict(args)

        _check_safety(args.command)

        try:
            completed = subprocess.run(
                _shell_argv(args.command),
                cwd=args.working_directory or None,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(f"Command execution failed: {exc}") from exc

        code = completed.returncode
        exit_code = code if code >= 0 else -1
        return BashOutput(
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
            exit_code=exit_code,
            command=args.command,
            success=code == 0,
        )