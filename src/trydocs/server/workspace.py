"""Workspace servers: run snippets and produce completions, plus a name-keyed registry"""

import asyncio
import builtins
import keyword
import logging
import re
import sys
from typing import Callable, Dict

from trydocs.server.models import CompletionItem, CompletionRequest, CompletionResult, RunRequest, RunResult


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
IDENTIFIER_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
PREFIX_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*$')


class UnknownWorkspaceError(LookupError):
    """No workspace server is registered under the requested name."""


class WorkspaceServer:
    """Base interface for workspace servers."""

    async def run(self, request: RunRequest) -> RunResult:  # pragma: no cover - interface
        raise NotImplementedError

    async def get_completion_list(self, request: CompletionRequest) -> CompletionResult:  # pragma: no cover - interface
        raise NotImplementedError


class ScriptingWorkspaceServer(WorkspaceServer):
    """Runs Python snippets in an isolated interpreter subprocess."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @staticmethod
    def _source(request: RunRequest) -> str:
        return "\n".join(f.text for f in request.files)

    async def run(self, request: RunRequest) -> RunResult:
        proc = await asyncio.create_subprocess_exec(
            sys.executable, "-I", "-c", self._source(request),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning("Snippet run timed out after %.1fs", self.timeout)
            return RunResult(succeeded=False, exception=f"Run timed out after {self.timeout} seconds")

        output = stdout.decode("utf-8", errors="replace").splitlines()
        if proc.returncode != 0:
            err_lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
            return RunResult(succeeded=False, output=output, exception=err_lines[-1] if err_lines else None)
        return RunResult(succeeded=True, output=output)

    async def get_completion_list(self, request: CompletionRequest) -> CompletionResult:
        """Complete the identifier ending at request.position."""
        before = request.code[:request.position]
        m = PREFIX_RE.search(before)
        prefix = m.group(0) if m else ""

        candidates: Dict[str, str] = {}
        for name in IDENTIFIER_RE.findall(request.code):
            if name != prefix and not keyword.iskeyword(name):
                candidates.setdefault(name, "variable")
        for name in keyword.kwlist:
            candidates.setdefault(name, "keyword")
        for name in dir(builtins):
            if not name.startswith("_"):
                candidates.setdefault(name, "builtin")

        items = [
            CompletionItem(display_text=name, kind=kind, insert_text=name)
            for name, kind in sorted(candidates.items())
            if name.startswith(prefix)
        ]
        return CompletionResult(items=items)


class WorkspaceServerRegistry:
    """Maps workspace type names (case-insensitive) to server factories."""

    def __init__(self):
        self._factories: Dict[str, Callable[[], WorkspaceServer]] = {}

    def register(self, name: str, factory: Callable[[], WorkspaceServer]) -> None:
        self._factories[name.lower()] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    async def get_workspace_server(self, name: str | None) -> WorkspaceServer:
        factory = self._factories.get((name or "").lower())
        if factory is None:
            raise UnknownWorkspaceError(f"Unknown workspace type: {name!r}")
        return factory()


def default_registry(timeout: float = DEFAULT_TIMEOUT) -> WorkspaceServerRegistry:
    registry = WorkspaceServerRegistry()
    registry.register("python", lambda: ScriptingWorkspaceServer(timeout=timeout))
    return registry
