"""Code search tool that runs ripgrep and parses its output."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from vega.base import CommandError, InvalidInputError, ToolDefinition

DEFAULT_MAX_RESULTS = 50

_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass
class CodeSearchArgs:
    """Arguments for a ripgrep search."""

    pattern: str
    path: str
    case_sensitive: bool = False
    whole_word: bool = False
    file_type: str | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    context_lines: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CodeSearchArgs:
        """Build arguments from a JSON-like mapping."""
        pattern = data.get("pattern")
        if not isinstance(pattern, str):
            raise InvalidInputError("missing or invalid field `pattern`")
        path = data.get("path")
        if not isinstance(path, str):
            raise InvalidInputError("missing or invalid field `path`")

        flags = {}
        for name in ("case_sensitive", "whole_word"):
            value = data.get(name, False)
            if value is None:
                value = False
            if not isinstance(value, bool):
                raise InvalidInputError(f"invalid field `{name}`")
            flags[name] = value

        file_type = data.get("file_type")
        if file_type is not None and not isinstance(file_type, str):
            raise InvalidInputError("invalid field `file_type`")

        max_results = data.get("max_results", DEFAULT_MAX_RESULTS)
        if max_results is None:
            max_results = DEFAULT_MAX_RESULTS
        if not _is_count(max_results):
            raise InvalidInputError("invalid field `max_results`")

        context_lines = data.get("context_lines")
        if context_lines is not None and not _is_count(context_lines):
            raise InvalidInputError("invalid field `context_lines`")

        return cls(
            pattern=pattern,
            path=path,
            case_sensitive=flags["case_sensitive"],
            whole_word=flags["whole_word"],
            file_type=file_type,
            max_results=max_results,
            context_lines=context_lines,
        )


@dataclass
class CodeSearchMatch:
    """One matching line reported by ripgrep."""

    file_path: str
    line_number: int
    line_content: str
    column: int | None = None


@dataclass
class CodeSearchOutput:
    """All matches of a search together with summary counts."""

    matches: list[CodeSearchMatch] = field(default_factory=list)
    pattern: str = ""
    path: str = ""
    total_matches: int = 0
    files_searched: int = 0


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_unsigned(text: str) -> int | None:
    if _UNSIGNED.fullmatch(text):
        return int(text)
    return None


def _lines(text: str) -> Iterator[str]:
    if not text:
        return
    pieces = text.split("\n")
    last = pieces.pop()
    for piece in pieces:
        yield piece[:-1] if piece.endswith("\r") else piece
    if last:
        yield last


def parse_ripgrep_line(line: str) -> CodeSearchMatch | None:
    """Parse one `file:line:column:content` line; return None if it does not fit."""
    parts = line.split(":", 3)
    if len(parts) < 3:
        return None

    line_number = _parse_unsigned(parts[1])
    if line_number is None:
        return None

    if len(parts) >= 4:
        column = _parse_unsigned(parts[2])
        content = parts[3]
    else:
        column = None
        content = parts[2]

    return CodeSearchMatch(
        file_path=parts[0],
        line_number=line_number,
        line_content=content,
        column=column,
    )


def _ripgrep_argv(args: CodeSearchArgs) -> list[str]:
    argv = [
        "rg",
        args.pattern,
        args.path,
        "--line-number",
        "--column",
        "--no-heading",
        "--with-filename",
    ]
    if not args.case_sensitive:
        argv.append("--ignore-case")
    if args.whole_word:
        argv.append("--word-regexp")
    if args.file_type is not None:
        argv.extend(["--type", args.file_type])
    if args.context_lines is not None:
        argv.extend(["--context", str(args.context_lines)])
    argv.extend(["--max-count", str(args.max_results)])
    return argv


class CodeSearchTool:
    """Searches code with ripgrep, with regex, file type and context options."""

    NAME = "code_search"

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Searches code using ripgrep with support for regex patterns, "
                "file type filtering, and context lines."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "pattern": {
                        "type": "string",
                        "description": "The regex pattern to search for",
                    },
                    "path": {
                        "type": "string",
                        "description": "The file or directory path to search in",
                    },
                    "case_sensitive": {
                        "type": "boolean",
                        "description": "Whether the search should be case sensitive (default: false)",
                        "default": False,
                    },
                    "whole_word": {
                        "type": "boolean",
                        "description": "Whether to match whole words only (default: false)",
                        "default": False,
                    },
                    "file_type": {
                        "type": "string",
                        "description": "File type to filter by (e.g., 'rust', 'js', 'py')",
                    },
                    "max_results": {
                        "type": "number",
                        "description": "Maximum number of results to return (default: 50)",
                        "default": DEFAULT_MAX_RESULTS,
                    },
                    "context_lines": {
                        "type": "number",
                        "description": "Number of context lines to show around matches",
                    },
                },
                "required": ["pattern", "path"],
            },
        )

    def call(self, args: CodeSearchArgs | Mapping[str, Any]) -> CodeSearchOutput:
        """Run ripgrep and collect up to `max_results` parsed matches."""
        if isinstance(args, Mapping):
            args = CodeSearchArgs.from_dict(args)

        try:
            subprocess.run(
                ["rg", "--version"],
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(
                "ripgrep (rg) is not installed or not available in PATH"
            ) from exc

        try:
            completed = subprocess.run(
                _ripgrep_argv(args),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(f"Ripgrep execution failed: {exc}") from exc

        stdout = completed.stdout.decode("utf-8", errors="replace")
        matches: list[CodeSearchMatch] = []
        files: set[str] = set()
        for line in _lines(stdout):
            found = parse_ripgrep_line(line)
            if found is None:
                continue
            files.add(found.file_path)
            matches.append(found)
            if len(matches) >= args.max_results:
                break

        return CodeSearchOutput(
            matches=matches,
            pattern=args.pattern,
            path=args.path,
            total_matches=len(matches),
            files_searched=len(files),
        )