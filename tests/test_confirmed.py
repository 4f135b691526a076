import pytest

from vega.base import InvalidInputError, PermissionDeniedError, ToolIOError
from vega.bash import BashArgs, BashTool
from vega.confirmed import (
    PROMPT,
    ConfirmedBashTool,
    ConfirmedEditFileTool,
    ConfirmedTool,
)
from vega.edit_file import EditFileArgs, EditFileTool
from vega.read_file import ReadFileTool


class Recorder:
    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answer


def test_yolo_skips_prompt():
    ask = Recorder("n")
    tool = ConfirmedBashTool(yolo=True, ask=ask)
    output = tool.call(BashArgs(command="echo hello"))
    assert "hello" in output.stdout
    assert ask.prompts == []


@pytest.mark.parametrize("answer", ["y", "Y", "yes", " YES \n"])
def test_approval_runs_command(answer):
    ask = Recorder(answer)
    output = ConfirmedBashTool(ask=ask).call({"command": "echo approved"})
    assert output.success
    assert "approved" in output.stdout
    assert ask.prompts == [PROMPT]


@pytest.mark.parametrize("answer", ["n", "", "no", "yep"])
def test_refusal_raises(answer):
    with pytest.raises(PermissionDeniedError) as info:
        ConfirmedBashTool(ask=Recorder(answer)).call({"command": "echo x"})
    assert "User denied tool execution" in str(info.value)


def test_refused_edit_writes_nothing(tmp_path):
    target = tmp_path / "file.txt"
    with pytest.raises(PermissionDeniedError):
        ConfirmedEditFileTool(ask=Recorder("n")).call(
            EditFileArgs(path=str(target), content="data")
        )
    assert not target.exists()


def test_approved_edit_writes(tmp_path):
    target = tmp_path / "file.txt"
    output = ConfirmedEditFileTool(ask=Recorder("y")).call(
        {"path": str(target), "content": "data"}
    )
    assert output.created_new_file
    assert target.read_text() == "data"


def test_describe_messages():
    assert ConfirmedBashTool().describe({"command": "ls"}) == "Execute command: ls"
    assert (
        ConfirmedEditFileTool().describe(EditFileArgs(path="a.txt", content=""))
        == "Edit/create file: a.txt"
    )


def test_prompt_shows_tool_and_action(capsys):
    tool = ConfirmedBashTool(ask=Recorder("y"))
    tool.call({"command": "echo shown"})
    out = capsys.readouterr().out
    assert "Tool: bash" in out
    assert "Action: Execute command: echo shown" in out


def test_definitions_match_inner_tools():
    assert ConfirmedBashTool().definition("p") == BashTool().definition("p")
    assert ConfirmedEditFileTool().definition("p") == EditFileTool().definition("p")
    assert ConfirmedBashTool().NAME == "bash"
    assert ConfirmedEditFileTool().NAME == "edit_file"


def test_end_of_input_means_no():
    def ask(prompt):
        raise EOFError

    assert ConfirmedBashTool(ask=ask).confirm("anything") is False


def test_io_failure_raises_tool_io_error():
    def ask(prompt):
        raise OSError("stdin closed")

    with pytest.raises(ToolIOError):
        ConfirmedBashTool(ask=ask).confirm("anything")


def test_dangerous_command_still_blocked_after_approval():
    with pytest.raises(InvalidInputError) as info:
        ConfirmedBashTool(ask=Recorder("y")).call({"command": "rm -rf /"})
    assert "dangerous pattern" in str(info.value)


def test_invalid_args_fail_before_prompt():
    ask = Recorder("y")
    with pytest.raises(InvalidInputError):
        ConfirmedBashTool(ask=ask).call({})
    assert ask.prompts == []


def test_generic_wrapper_delegates(tmp_path):
    target = tmp_path / "read.txt"
    target.write_text("content here\n")
    ask = Recorder("yes")
    tool = ConfirmedTool(ReadFileTool(), ask=ask)
    output = tool.call({"path": str(target)})
    assert output.content == "content here\n"
    assert tool.NAME == "read_file"
    assert len(ask.prompts) == 1