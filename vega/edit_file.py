"""File editing tool with optional backups and line-range replacement."""

from __future__ import annotations

import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vega.base import (
    InvalidInputError,
    PermissionDeniedError,
    ToolDefinition,
    ToolIOError,
)

SENSITIVE_PREFIXES = (
    "/etc",
    "/usr/bin",
    "/usr/sbin",
    "/bin",
    "/sbin",
    "/System",
    "/Library",
    "/Applications",
)

BACKUP_SUFFIX = ".backup"


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _optional_flag(data: Mapping[str, Any], name: str) -> bool:
    value = data.get(name, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidInputError(f"invalid field `{name}`")
    return value


def _parse_line_range(value: Any) -> tuple[int, int] | None:
    if value is None:
        return None
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(_is_count(item) for item in value)
    ):
        raise InvalidInputError("invalid field `line_range`")
    return (value[0], value[1])


@dataclass
class EditFileArgs:
    """Arguments for editing or creating a file."""

    path: str
    content: str
    create_if_missing: bool = False
    backup: bool = False
    encoding: str | None = None
    line_range: tuple[int, int] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EditFileArgs:
        """Build arguments from a JSON-like mapping."""
        path = data.get("path")
        if not isinstance(path, str):
            raise InvalidInputError("missing or invalid field `path`")
        content = data.get("content")
        if not isinstance(content, str):
            raise InvalidInputError("missing or invalid field `content`")
        encoding = data.get("encoding")
        if encoding is not None and not isinstance(encoding, str):
            raise InvalidInputError("invalid field `encoding`")
        return cls(
            path=path,
            content=content,
            create_if_missing=_optional_flag(data, "create_if_missing"),
            backup=_optional_flag(data, "backup"),
            encoding=encoding,
            line_range=_parse_line_range(data.get("line_range")),
        )


@dataclass
class EditFileOutput:
    """Outcome of an edit."""

    path: str
    success: bool
    bytes_written: int
    backup_path: str | None
    created_new_file: bool
    lines_modified: tuple[int, int] | None


def validate_path(path: str) -> None:
    """Reject path traversal and paths inside sensitive system directories."""
    if ".." in path:
        raise InvalidInputError("Path traversal (..) is not allowed")
    for sensitive in SENSITIVE_PREFIXES:
        if path.startswith(sensitive):
            raise PermissionDeniedError(f"Access to {sensitive} is not allowed")


def _lines(text: str) -> list[str]:
    if not text:
        return []
    pieces = text.split("\n")
    last = pieces.pop()
    lines = [piece[:-1] if piece.endswith("\r") else piece for piece in pieces]
    if last:
        lines.append(last)
    return lines


def _splice(
    original: str, replacement: str, line_range: tuple[int, int]
) -> tuple[str, tuple[int, int]]:
    start_line, end_line = line_range
    lines = _lines(original)
    total = len(lines)
    if start_line == 0 or start_line > total + 1:
        raise InvalidInputError(
            f"Invalid start line: {start_line}. File has {total} lines (1-indexed)"
        )
    end = min(end_line, total)
    new_lines = _lines(replacement)
    result = lines[: start_line - 1] + new_lines + lines[end:]
    return "\n".join(result), (start_line, start_line + len(new_lines) - 1)


class EditFileTool:
    """Edits or creates files, with full replacement or line-range edits."""

    NAME = "edit_file"

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Edits or creates a file with the specified content. Automatically "
                "creates the file if it doesn't exist. Supports full file "
                "replacement or line range editing with optional backup."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The path to the file to edit or create",
                    },
                    "content": {
                        "type": "string",
                        "description": "The content to write to the file",
                    },
                    "create_if_missing": {
                        "type": "boolean",
                        "description": "Whether to create the file if it doesn't exist (default: false)",
                        "default": False,
                    },
                    "backup": {
                        "type": "boolean",
                        "description": "Whether to create a backup of the existing file (default: false)",
                        "default": False,
                    },
                    "encoding": {
                        "type": "string",
                        "description": "Text encoding to use (default: UTF-8)",
                    },
                    "line_range": {
                        "type": "array",
                        "description": "Optional line range [start_line, end_line] to replace (1-indexed, inclusive)",
                        "items": {"type": "number"},
                        "minItems": 2,
                        "maxItems": 2,
                    },
                },
                "required": ["path", "content"],
            },
        )

    def call(self, args: EditFileArgs | Mapping[str, Any]) -> EditFileOutput:
        """Validate the path, then write the new content."""
        if isinstance(args, Mapping):
            args = EditFileArgs.from_dict(args)
        validate_path(args.path)
        return self._edit(args)

    def _edit(self, args: EditFileArgs) -> EditFileOutput:
        path = Path(args.path)
        existed = path.exists()

        if not existed:
            print(f"File '{args.path}' does not exist, creating it...")
        elif not path.is_file():
            raise InvalidInputError(f"Path '{args.path}' exists but is not a file")

        parent = path.parent
        try:
            if not parent.exists():
                parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ToolIOError(exc) from exc

        backup_path = None
        original = ""
        if existed:
            try:
                original = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise ToolIOError(exc) from exc
            if args.backup:
                backup_path = f"{args.path}{BACKUP_SUFFIX}"
                try:
                    shutil.copyfile(path, backup_path)
                except OSError as exc:
                    raise ToolIOError(exc) from exc

        if args.line_range is None:
            final_content, lines_modified = args.content, None
        else:
            final_content, lines_modified = _splice(
                original, args.content, args.line_range
            )

        try:
            path.write_bytes(final_content.encode("utf-8"))
            bytes_written = path.stat().st_size
        except OSError as exc:
            raise ToolIOError(exc) from exc

        return EditFileOutput(
            path=args.path,
            success=True,
            bytes_written=bytes_written,
            backup_path=backup_path,
            created_new_file=not existed,
            lines_modified=lines_modified,
        )