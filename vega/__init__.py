"""Agent tools: shell commands, code search, file reading, editing and listing, web search."""

__version__ = "0.1.0"