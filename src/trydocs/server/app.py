"""FastAPI workspace controller: dispatch run and completion requests to workspace servers.

``POST /workspace/run`` and ``POST /workspace/{workspace_type}/compile`` run
code. The workspace type comes from the path when present, else from the
request body. ``snippet`` is always served by a fresh
:class:`ScriptingWorkspaceServer`; every other type is looked up in the
registry stored on ``app.state``.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, HTTPException, Request

from trydocs.config import Settings
from trydocs.server.models import CompletionRequest, CompletionResult, RunRequest, RunResult
from trydocs.server.workspace import (
    ScriptingWorkspaceServer,
    UnknownWorkspaceError,
    WorkspaceServerRegistry,
    default_registry,
)


logger = logging.getLogger(__name__)

SNIPPET_WORKSPACE = "snippet"


@contextmanager
def _logged_operation(name: str) -> Iterator[None]:
    """Log completion (or failure) of a request with its elapsed time."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        logger.exception("%s failed after %.1f ms", name, (time.perf_counter() - start) * 1000)
        raise
    logger.info("%s succeeded in %.1f ms", name, (time.perf_counter() - start) * 1000)


def create_app(
    registry: WorkspaceServerRegistry | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(title="trydocs workspace server")
    app.state.registry = registry or default_registry(settings.snippet_timeout)
    app.state.settings = settings

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok", "workspaces": [SNIPPET_WORKSPACE, *app.state.registry.names()]}

    @app.post("/workspace/run", response_model=RunResult)
    @app.post("/workspace/{workspace_type}/compile", response_model=RunResult)
    async def run(request: Request, body: RunRequest, workspace_type: Optional[str] = None) -> RunResult:
        workspace_type = workspace_type or body.workspace_type
        with _logged_operation(f"run[{workspace_type}]"):
            if (workspace_type or "").lower() == SNIPPET_WORKSPACE:
                server = ScriptingWorkspaceServer(timeout=request.app.state.settings.snippet_timeout)
            else:
                try:
                    server = await request.app.state.registry.get_workspace_server(workspace_type)
                except UnknownWorkspaceError as e:
                    raise HTTPException(status_code=404, detail=str(e)) from e
            return await server.run(body)

    @app.post("/workspace/{workspace_id}/getCompletionItems", response_model=CompletionResult)
    async def get_completion_items(request: Request, workspace_id: str, body: CompletionRequest) -> CompletionResult:
        with _logged_operation(f"completions[{workspace_id}]"):
            server = ScriptingWorkspaceServer(timeout=request.app.state.settings.snippet_timeout)
            return await server.get_completion_list(body)

    return app


app = create_app()
