"""File reading tool with size limits, binary detection and line ranges."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vega.base import (
    InvalidInputError,
    ToolDefinition,
    ToolFileNotFoundError,
    ToolIOError,
)

DEFAULT_MAX_SIZE_MB = 10
HEX_PREVIEW_BYTES = 1024
HEX_BYTES_PER_ROW = 16
PRINTABLE_RATIO_THRESHOLD = 0.7


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


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
class ReadFileArgs:
    """Arguments for reading a file."""

    path: str
    encoding: str | None = None
    max_size_mb: int | None = None
    line_range: tuple[int, int] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReadFileArgs:
        """Build arguments from a JSON-like mapping."""
        path = data.get("path")
        if not isinstance(path, str):
            raise InvalidInputError("missing or invalid field `path`")
        encoding = data.get("encoding")
        if encoding is not None and not isinstance(encoding, str):
            raise InvalidInputError("invalid field `encoding`")
        max_size_mb = data.get("max_size_mb")
        if max_size_mb is not None and not _is_count(max_size_mb):
            raise InvalidInputError("invalid field `max_size_mb`")
        return cls(
            path=path,
            encoding=encoding,
            max_size_mb=max_size_mb,
            line_range=_parse_line_range(data.get("line_range")),
        )


@dataclass
class ReadFileOutput:
    """Content of a file and facts about it."""

    content: str
    path: str
    size_bytes: int
    line_count: int
    encoding_used: str
    is_binary: bool
    truncated: bool


def is_binary_content(content: bytes) -> bool:
    """Guess whether bytes are binary: any NUL byte, or under 70% printable."""
    if not content:
        return False
    if 0 in content:
        return True
    printable = sum(1 for b in content if 32 <= b <= 126 or b in (9, 10, 13))
    return printable / len(content) < PRINTABLE_RATIO_THRESHOLD


def _lines(text: str) -> list[str]:
    if not text:
        return []
    pieces = text.split("\n")
    last = pieces.pop()
    lines = [piece[:-1] if piece.endswith("\r") else piece for piece in pieces]
    if last:
        lines.append(last)
    return lines


def _hex_preview(data: bytes) -> str:
    preview = data[:HEX_PREVIEW_BYTES]
    rows = (
        " ".join(f"{b:02x}" for b in preview[start : start + HEX_BYTES_PER_ROW])
        for start in range(0, len(preview), HEX_BYTES_PER_ROW)
    )
    dump = "\n".join(rows)
    if len(data) > len(preview):
        return (
            f"{dump}\n... (binary file truncated, showing first "
            f"{len(preview)} bytes as hex)"
        )
    return f"{dump}\n(binary file, {len(data)} bytes shown as hex)"


def _decode(data: bytes) -> tuple[str, str]:
    try:
        return data.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        return data.decode("latin-1"), "latin-1"


class ReadFileTool:
    """Reads files with safety checks and optional line range selection."""

    NAME = "read_file"

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Reads the contents of a file from the filesystem with safety "
                "checks and optional line range selection."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "The path to the file to read",
                    },
                    "encoding": {
                        "type": "string",
                        "description": "Text encoding to use (auto-detected if not specified)",
                    },
                    "max_size_mb": {
                        "type": "number",
                        "description": "Maximum file size in MB (default: 10)",
                        "default": DEFAULT_MAX_SIZE_MB,
                    },
                    "line_range": {
                        "type": "array",
                        "description": "Optional line range [start_line, end_line] (1-indexed, inclusive)",
                        "items": {"type": "number"},
                        "minItems": 2,
                        "maxItems": 2,
                    },
                },
                "required": ["path"],
            },
        )

    def call(self, args: ReadFileArgs | Mapping[str, Any]) -> ReadFileOutput:
        """Read the file, checking existence, kind and size first."""
        if isinstance(args, Mapping):
            args = ReadFileArgs.from_dict(args)

        path = Path(args.path)
        if not path.exists():
            raise ToolFileNotFoundError(args.path)
        if not path.is_file():
            raise InvalidInputError(f"Path '{args.path}' is not a file")

        try:
            file_size = path.stat().st_size
        except OSError as exc:
            raise ToolIOError(exc) from exc

        max_size_mb = (
            DEFAULT_MAX_SIZE_MB if args.max_size_mb is None else args.max_size_mb
        )
        max_size_bytes = max_size_mb * 1024 * 1024
        if file_size > max_size_bytes:
            raise InvalidInputError(
                f"File size ({file_size} bytes) exceeds maximum allowed size "
                f"({max_size_bytes} bytes)"
            )

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ToolIOError(exc) from exc

        binary = is_binary_content(data)
        if binary:
            content, encoding_used = _hex_preview(data), "binary-hex"
        else:
            content, encoding_used = _decode(data)

        lines = _lines(content)
        total = len(lines)
        if args.line_range is None:
            final_content, truncated = content, False
        else:
            start_line, end_line = args.line_range
            if start_line == 0 or start_line > total:
                raise InvalidInputError(
                    f"Invalid start line: {start_line}. "
                    f"File has {total} lines (1-indexed)"
                )
            end = min(end_line, total)
            if end < start_line - 1:
                raise InvalidInputError(
                    f"Invalid line range: end line {end_line} is before "
                    f"start line {start_line}"
                )
            final_content = "\n".join(lines[start_line - 1 : end])
            truncated = end_line < total

        return ReadFileOutput(
            content=final_content,
            path=args.path,
            size_bytes=file_size,
            line_count=total,
            encoding_used=encoding_used,
            is_binary=binary,
            truncated=truncated,
        )