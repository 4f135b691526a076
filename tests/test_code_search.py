import subprocess
from unittest.mock import patch

import pytest

from vega.base import CommandError, InvalidInputError
from vega.code_search import (
    CodeSearchArgs,
    CodeSearchTool,
    parse_ripgrep_line,
)


def _fake_run(stdout, calls):
    def run(argv, **kwargs):
        calls.append(list(argv))
        if argv[1:] == ["--version"]:
            return subprocess.CompletedProcess(argv, 0, b"ripgrep 14.0.0\n", b"")
        return subprocess.CompletedProcess(argv, 0, stdout, b"")

    return run


def test_tool_name():
    assert CodeSearchTool().definition("x").name == CodeSearchTool.NAME == "code_search"


def test_default_max_results():
    args = CodeSearchArgs.from_dict({"pattern": "x", "path": "."})
    assert args.max_results == 50
    assert args.case_sensitive is False
    assert args.whole_word is False
    assert args.file_type is None
    assert args.context_lines is None


def test_definition():
    definition = CodeSearchTool().definition("test prompt")
    assert definition.name == "code_search"
    assert definition.description != ""
    assert definition.parameters["required"] == ["pattern", "path"]


def test_parse_ripgrep_line_with_column():
    found = parse_ripgrep_line("src/main.rs:42:15:    let result = calculate();")
    assert found is not None
    assert found.file_path == "src/main.rs"
    assert found.line_number == 42
    assert found.column == 15
    assert found.line_content == "    let result = calculate();"


def test_parse_ripgrep_line_without_column():
    found = parse_ripgrep_line("src/lib.rs:10:pub fn main() {")
    assert found is not None
    assert found.file_path == "src/lib.rs"
    assert found.line_number == 10
    assert found.line_content == "pub fn main() {"
    assert found.column is None


def test_parse_ripgrep_line_rejects_bad_input():
    assert parse_ripgrep_line("no colons here") is None
    assert parse_ripgrep_line("file:abc:1:text") is None


def test_parse_ripgrep_line_non_numeric_column():
    found = parse_ripgrep_line("a.py:3:x:y:z")
    assert found is not None
    assert found.column is None
    assert found.line_content == "y:z"


def test_from_dict_requires_pattern():
    with pytest.raises(InvalidInputError):
        CodeSearchArgs.from_dict({"path": "."})


def test_missing_ripgrep_raises_command_error():
    with patch("vega.code_search.subprocess.run", side_effect=FileNotFoundError("rg")):
        with pytest.raises(CommandError) as info:
            CodeSearchTool().call({"pattern": "x", "path": "."})
    assert "ripgrep (rg) is not installed" in str(info.value)


def test_call_parses_output_and_counts_files():
    stdout = b"a.py:1:5:foo\na.py:3:1:foo bar\nb.py:7:2:foo\n"
    calls = []
    with patch("vega.code_search.subprocess.run", side_effect=_fake_run(stdout, calls)):
        output = CodeSearchTool().call({"pattern": "foo", "path": "src"})
    assert output.total_matches == 3
    assert output.files_searched == 2
    assert output.pattern == "foo"
    assert output.path == "src"
    assert [m.line_number for m in output.matches] == [1, 3, 7]


def test_call_stops_at_max_results():
    stdout = b"a.py:1:1:x\nb.py:2:1:x\nc.py:3:1:x\n"
    calls = []
    with patch("vega.code_search.subprocess.run", side_effect=_fake_run(stdout, calls)):
        output = CodeSearchTool().call(
            CodeSearchArgs(pattern="x", path=".", max_results=2)
        )
    assert output.total_matches == 2
    assert [m.file_path for m in output.matches] == ["a.py", "b.py"]


def test_call_builds_ripgrep_arguments():
    calls = []
    stdout = b"lib/m.py:4:9:needle here\n"
    with patch("vega.code_search.subprocess.run", side_effect=_fake_run(stdout, calls)):
        output = CodeSearchTool().call(
            CodeSearchArgs(
                pattern="needle",
                path="lib",
                case_sensitive=True,
                whole_word=True,
                file_type="py",
                max_results=7,
                context_lines=2,
            )
        )
    assert output.pattern == "needle"
    assert output.path == "lib"
    assert output.total_matches == 1
    assert output.matches[0].column == 9
    argv = calls[-1]
    assert argv[:3] == ["rg", "needle", "lib"]
    assert "--ignore-case" not in argv
    assert "--word-regexp" in argv
    assert argv[argv.index("--type") + 1] == "py"
    assert argv[argv.index("--context") + 1] == "2"
    assert argv[argv.index("--max-count") + 1] == "7"


def test_call_default_ignores_case():
    calls = []
    with patch("vega.code_search.subprocess.run", side_effect=_fake_run(b"", calls)):
        output = CodeSearchTool().call({"pattern": "x", "path": "."})
    assert "--ignore-case" in calls[-1]
    assert output.total_matches == 0