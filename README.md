# vega

A set of tools an AI agent can call to work with a machine: run shell
commands, search code, read, edit and list files, and look things up on
the web. Each tool has a `NAME`, describes itself through
`definition(prompt)`, which returns a `ToolDefinition` (name, description
and JSON-schema parameters; `to_dict()` gives a plain dictionary), and
runs through `call(args)`. `call` takes either the tool's typed arguments
object or a plain mapping, which is checked by the arguments class's
`from_dict`. Failures are raised as subclasses of `vega.base.ToolError`.

## Installation

```
pip install .
```

The code search tool runs `rg` (ripgrep), which must be on the `PATH`.

## Tools

| Module | Tool | Name | What it does |
| --- | --- | --- | --- |
| `vega.bash` | `BashTool` | `bash` | Runs a command with `/bin/sh -c` (`cmd /C` on Windows), refusing commands that contain patterns such as `rm -rf /`, `mkfs` or `shutdown` |
| `vega.code_search` | `CodeSearchTool` | `code_search` | Runs ripgrep and parses `file:line:column:content` lines into matches |
| `vega.web_search` | `WebSearchTool` | `web_search` | Asks the DuckDuckGo instant answer API; returns a manual-search link when nothing is found |
| `vega.read_file` | `ReadFileTool` | `read_file` | Reads a file up to a size limit (10 MB by default), shows binary files as a hex preview, supports 1-indexed line ranges |
| `vega.edit_file` | `EditFileTool` | `edit_file` | Writes a file (creating it and its parent directories if needed), or replaces a line range, with an optional `.backup` copy |
| `vega.list_files` | `ListFilesTool` | `list_files` | Lists a directory, optionally recursively, filtered by extension, with sizes and modification times |

Helpers available on their own: `parse_ripgrep_line` in
`vega.code_search`, `parse_instant_answer` in `vega.web_search`,
`is_binary_content` in `vega.read_file` and `validate_path` in
`vega.edit_file` (which rejects `..` and paths under system directories
such as `/etc` or `/usr/bin`).

`BashArgs` accepts `timeout_seconds`, but the command is not stopped when
it runs longer. `EditFileArgs` accepts `create_if_missing` and `encoding`,
and `ReadFileArgs` accepts `encoding`; these do not change what the tools
do: missing files are always created, and text is read and written as
UTF-8 (reading falls back to Latin-1).

`WebSearchTool` takes an optional `requests.Session`.

`create_all_tools()` in `vega.registry` returns one fresh instance of each
of the six tools.

## Usage

```python
from vega.base import ToolError
from vega.bash import BashArgs, BashTool
from vega.read_file import ReadFileArgs, ReadFileTool

tool = BashTool()
print(tool.definition("").to_dict()["name"])   # "bash"

output = tool.call(BashArgs(command="echo hello"))
print(output.stdout, output.exit_code, output.success)

reader = ReadFileTool()
try:
    result = reader.call({"path": "notes.txt", "line_range": [1, 10]})
    print(result.content, result.line_count, result.truncated)
except ToolError as exc:
    print(f"failed: {exc}")
```

## Asking before acting

`vega.confirmed` wraps tools so that every call must be approved.
`ConfirmedTool(inner, yolo=False, ask=None)` wraps any tool;
`ConfirmedBashTool` and `ConfirmedEditFileTool` wrap the shell and edit
tools and describe the command or file in the prompt. The question
`Do you want to proceed? (y/N): ` is asked through `ask` (by default
`input`); only `y` or `yes` approves. With `yolo=True` nothing is asked.
A refusal raises `PermissionDeniedError`.

```python
from vega.bash import BashArgs
from vega.confirmed import ConfirmedBashTool

tool = ConfirmedBashTool(ask=lambda prompt: "y")
print(tool.call(BashArgs(command="ls")).stdout)
```

## Errors

All tools raise subclasses of `vega.base.ToolError`: `ToolIOError`,
`ToolHTTPError`, `ToolJSONError`, `CommandError`,
`ToolFileNotFoundError`, `PermissionDeniedError` and
`InvalidInputError`. Each keeps the original detail in `detail`.

## What this package does not do

It holds the tools only. There is no agent or chat loop, no connection to
a language-model provider, no command-line program, no web interface, no
storage of conversations, and no tool for reading the agent's own logs.

## Running the tests

```
pip install ".[test]"
pytest
```