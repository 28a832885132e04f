"""Unit tests for server/workspace.py"""

import asyncio

import pytest

from trydocs.server.models import CompletionRequest, File, RunRequest
from trydocs.server.workspace import (
    ScriptingWorkspaceServer,
    UnknownWorkspaceError,
    WorkspaceServerRegistry,
    default_registry,
)


def _run(code: str, timeout: float = 10.0):
    request = RunRequest(files=[File(name="main.py", text=code)])
    return asyncio.run(ScriptingWorkspaceServer(timeout=timeout).run(request))


def test_run_captures_output():
    result = _run("print(1 + 1)\nprint('done')")
    assert result.succeeded
    assert result.output == ["2", "done"]
    assert result.exception is None


def test_run_concatenates_files():
    request = RunRequest(files=[File(name="a.py", text="x = 5"), File(name="b.py", text="print(x)")])
    result = asyncio.run(ScriptingWorkspaceServer().run(request))
    assert result.output == ["5"]


def test_run_reports_exception():
    result = _run("print('before')\nraise ValueError('boom')")
    assert not result.succeeded
    assert result.output == ["before"]
    assert result.exception == "ValueError: boom"


def test_run_times_out():
    result = _run("import time\ntime.sleep(5)", timeout=0.5)
    assert not result.succeeded
    assert "timed out" in result.exception


def _completions(code: str, position: int = None):
    request = CompletionRequest(code=code, position=len(code) if position is None else position)
    result = asyncio.run(ScriptingWorkspaceServer().get_completion_list(request))
    return {item.display_text: item.kind for item in result.items}


def test_completions_builtins_and_keywords():
    items = _completions("pri")
    assert items["print"] == "builtin"
    assert "property" not in items


def test_completions_names_from_code():
    items = _completions("counter = 1\ncou")
    assert items["counter"] == "variable"
    assert "cou" not in items


def test_completions_keyword_kind():
    assert _completions("whi")["while"] == "keyword"


def test_completions_uses_position():
    items = _completions("imp = 1\nprint(imp)", position=3)
    assert "import" in items
    assert "print" not in items


def test_registry_lookup_is_case_insensitive():
    registry = WorkspaceServerRegistry()
    registry.register("Python", ScriptingWorkspaceServer)
    server = asyncio.run(registry.get_workspace_server("PYTHON"))
    assert isinstance(server, ScriptingWorkspaceServer)


def test_registry_unknown_name():
    with pytest.raises(UnknownWorkspaceError):
        asyncio.run(WorkspaceServerRegistry().get_workspace_server("nope"))


def test_default_registry_applies_timeout():
    server = asyncio.run(default_registry(timeout=2.5).get_workspace_server("python"))
    assert server.timeout == 2.5
