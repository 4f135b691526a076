"""Shared error types and the tool definition record used by every tool."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


class ToolError(Exception):
    """Base class for every failure a tool reports."""

    prefix = "Tool error"

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class ToolIOError(ToolError):
    """A file-system or other I/O operation failed."""

    prefix = "IO error"


class ToolHTTPError(ToolError):
    """An HTTP request failed or its response could not be decoded."""

    prefix = "HTTP error"


class ToolJSONError(ToolError):
    """JSON parsing or serialisation failed."""

    prefix = "JSON error"


class CommandError(ToolError):
    """An external command could not be run."""

    prefix = "Command execution failed"


class ToolFileNotFoundError(ToolError):
    """A requested file or directory does not exist."""

    prefix = "File not found"


class PermissionDeniedError(ToolError):
    """The operation was refused."""

    prefix = "Permission denied"


class InvalidInputError(ToolError):
    """The arguments given to a tool were not acceptable."""

    prefix = "Invalid input"


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and JSON-schema parameters that describe a tool."""

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the definition as a plain JSON-ready dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": copy.deepcopy(self.parameters),
        }