"""Wrappers that ask the user before running a potentially destructive tool."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from vega.base import PermissionDeniedError, ToolDefinition, ToolIOError
from vega.bash import BashArgs, BashTool
from vega.edit_file import EditFileArgs, EditFileTool

PROMPT = "Do you want to proceed? (y/N): "


class ConfirmedTool:
    """Wraps a tool so that each call must be approved unless in yolo mode."""

    def __init__(
        self,
        inner: Any,
        yolo: bool = False,
        ask: Callable[[str], str] | None = None,
    ) -> None:
        self.inner = inner
        self.yolo = yolo
        self.ask = ask if ask is not None else input

    @property
    def NAME(self) -> str:  # noqa: N802 - mirrors the class attribute of tools
        return self.inner.NAME

    def confirm(self, description: str) -> bool:
        """Ask the user whether to go ahead; yolo mode always approves."""
        if self.yolo:
            return True
        print("\n🔧 Tool Execution Request:")
        print(f"Tool: {self.NAME}")
        print(f"Action: {description}")
        try:
            answer = self.ask(PROMPT)
        except EOFError:
            return False
        except OSError as exc:
            raise ToolIOError(exc) from exc
        return answer.strip().lower() in ("y", "yes")

    def describe(self, args: Any) -> str:
        """Describe the requested action for the confirmation prompt."""
        return f"Call {self.NAME} with {args!r}"

    def definition(self, prompt: str) -> ToolDefinition:
        """Return the wrapped tool's definition."""
        return self.inner.definition(prompt)

    def call(self, args: Any) -> Any:
        """Ask for approval, then delegate to the wrapped tool."""
        description = self.describe(args)
        if not self.confirm(description):
            raise PermissionDeniedError("User denied tool execution")
        return self.inner.call(args)


class ConfirmedBashTool(ConfirmedTool):
    """Shell command tool that asks before running a command."""

    def __init__(
        self, yolo: bool = False, ask: Callable[[str], str] | None = None
    ) -> None:
        super().__init__(BashTool(), yolo, ask)

    def describe(self, args: BashArgs | Mapping[str, Any]) -> str:
        """Describe the command to be run."""
        if isinstance(args, Mapping):
            args = BashArgs.from_dict(args)
        return f"Execute command: {args.command}"


class ConfirmedEditFileTool(ConfirmedTool):
    """File editing tool that asks before writing."""

    def __init__(
        self, yolo: bool = False, ask: Callable[[str], str] | None = None
    ) -> None:
        super().__init__(EditFileTool(), yolo, ask)

    def describe(self, args: EditFileArgs | Mapping[str, Any]) -> str:
        """Describe the file to be written."""
        if isinstance(args, Mapping):
            args = EditFileArgs.from_dict(args)
        return f"Edit/create file: {args.path}"