"""Directory listing tool with filtering and optional file metadata."""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from vega.base import (
    InvalidInputError,
    ToolDefinition,
    ToolError,
    ToolFileNotFoundError,
    ToolIOError,
)

DEFAULT_MAX_FILES = 1000
MODIFIED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _optional_flag(data: Mapping[str, Any], name: str) -> bool:
    value = data.get(name, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidInputError(f"invalid field `{name}`")
    return value


@dataclass
class ListFilesArgs:
    """Arguments for listing a directory."""

    directory: str
    recursive: bool = False
    include_hidden: bool = False
    file_types: list[str] | None = None
    max_files: int = DEFAULT_MAX_FILES
    include_size: bool = False
    include_modified: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListFilesArgs:
        """Build arguments from a JSON-like mapping."""
        directory = data.get("directory")
        if not isinstance(directory, str):
            raise InvalidInputError("missing or invalid field `directory`")

        file_types = data.get("file_types")
        if file_types is not None:
            if not isinstance(file_types, (list, tuple)) or not all(
                isinstance(item, str) for item in file_types
            ):
                raise InvalidInputError("invalid field `file_types`")
            file_types = list(file_types)

        max_files = data.get("max_files", DEFAULT_MAX_FILES)
        if max_files is None:
            max_files = DEFAULT_MAX_FILES
        if not _is_count(max_files):
            raise InvalidInputError("invalid field `max_files`")

        return cls(
            directory=directory,
            recursive=_optional_flag(data, "recursive"),
            include_hidden=_optional_flag(data, "include_hidden"),
            file_types=file_types,
            max_files=max_files,
            include_size=_optional_flag(data, "include_size"),
            include_modified=_optional_flag(data, "include_modified"),
        )


@dataclass
class FileInfo:
    """One entry of a directory listing."""

    name: str
    path: str
    is_directory: bool
    size_bytes: int | None = None
    modified: str | None = None
    extension: str | None = None


@dataclass
class ListFilesOutput:
    """Entries found together with summary counts."""

    files: list[FileInfo] = field(default_factory=list)
    directory: str = ""
    total_files: int = 0
    total_directories: int = 0
    truncated: bool = False


def _extension(name: str) -> str | None:
    if name == "..":
        return None
    dot = name.rfind(".")
    if dot <= 0:
        return None
    return name[dot + 1 :].lower()


def _format_modified(mtime: float) -> str | None:
    seconds = int(mtime)
    if mtime < 0:
        return None
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.strftime(MODIFIED_FORMAT)


class _Collector:
    """Accumulates entries and counts while walking directories."""

    def __init__(self, args: ListFilesArgs) -> None:
        self.args = args
        self.files: list[FileInfo] = []
        self.total_files = 0
        self.total_directories = 0

    def _full(self) -> bool:
        return len(self.files) >= self.args.max_files

    def _info(self, entry: os.DirEntry[str]) -> FileInfo | None:
        args = self.args
        name = entry.name
        if not args.include_hidden and name.startswith("."):
            return None

        try:
            info = entry.stat(follow_symlinks=False)
        except OSError as exc:
            raise ToolIOError(exc) from exc

        is_directory = stat.S_ISDIR(info.st_mode)
        extension = None if is_directory else _extension(name)

        if args.file_types is not None and not is_directory:
            if extension is None:
                return None
            if not any(kind.lower() == extension for kind in args.file_types):
                return None

        return FileInfo(
            name=name,
            path=entry.path,
            is_directory=is_directory,
            size_bytes=info.st_size if args.include_size and not is_directory else None,
            modified=_format_modified(info.st_mtime) if args.include_modified else None,
            extension=extension,
        )

    def _record(self, info: FileInfo) -> None:
        if info.is_directory:
            self.total_directories += 1
        else:
            self.total_files += 1
        self.files.append(info)

    def collect(self, directory: str, recursive: bool) -> None:
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if self._full():
                        break
                    info = self._info(entry)
                    if info is None:
                        continue
                    self._record(info)
                    if recursive and info.is_directory and not self._full():
                        try:
                            self.collect(entry.path, recursive=True)
                        except ToolError as exc:
                            print(
                                f"Warning: Failed to read directory {entry.path}: {exc}",
                                file=sys.stderr,
                            )
        except OSError as exc:
            raise ToolIOError(exc) from exc


class ListFilesTool:
    """Lists files and directories with filtering and metadata options."""

    NAME = "list_files"

    def definition(self, prompt: str) -> ToolDefinition:
        """Describe the tool and its parameters."""
        return ToolDefinition(
            name=self.NAME,
            description=(
                "Lists files and directories in a specified directory with "
                "filtering and metadata options."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "directory": {
                        "type": "string",
                        "description": "The directory path to list files from",
                    },
                    "recursive": {
                        "type": "boolean",
                        "description": "Whether to list files recursively (default: false)",
                        "default": False,
                    },
                    "include_hidden": {
                        "type": "boolean",
                        "description": "Whether to include hidden files (starting with .) (default: false)",
                        "default": False,
                    },
                    "file_types": {
                        "type": "array",
                        "description": "File extensions to filter by (e.g., ['rs', 'toml', 'md'])",
                        "items": {"type": "string"},
                    },
                    "max_files": {
                        "type": "number",
                        "description": "Maximum number of files to return (default: 1000)",
                        "default": DEFAULT_MAX_FILES,
                    },
                    "include_size": {
                        "type": "boolean",
                        "description": "Whether to include file sizes (default: false)",
                        "default": False,
                    },
                    "include_modified": {
                        "type": "boolean",
                        "description": "Whether to include modification timestamps (default: false)",
                        "default": False,
                    },
                },
                "required": ["directory"],
            },
        )

    def call(self, args: ListFilesArgs | Mapping[str, Any]) -> ListFilesOutput:
        """List the directory, sorted by name and limited to `max_files`."""
        if isinstance(args, Mapping):
            args = ListFilesArgs.from_dict(args)

        path = Path(args.directory)
        if not path.exists():
            raise ToolFileNotFoundError(args.directory)
        if not path.is_dir():
            raise InvalidInputError(f"Path '{args.directory}' is not a directory")

        collector = _Collector(args)
        collector.collect(args.directory, recursive=args.recursive)

        files = sorted(collector.files, key=lambda info: info.name)
        truncated = len(files) > args.max_files
        if truncated:
            files = files[: args.max_files]

        return ListFilesOutput(
            files=files,
            directory=args.directory,
            total_files=collector.total_files,
            total_directories=collector.total_directories,
            truncated=truncated,
        )