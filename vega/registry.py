"""Construction of the full set of available tools."""

from __future__ import annotations

from typing import Any

from vega.bash import BashTool
from vega.code_search import CodeSearchTool
from vega.edit_file import EditFileTool
from vega.list_files import ListFilesTool
from vega.read_file import ReadFileTool
from vega.web_search import WebSearchTool


def create_all_tools() -> list[Any]:
    """Return a fresh instance of every available tool."""
    return [
        WebSearchTool(),
        BashTool(),
        CodeSearchTool(),
        ReadFileTool(),
        EditFileTool(),
        ListFilesTool(),
    ]