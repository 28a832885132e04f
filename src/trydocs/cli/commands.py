"""CLI command implementations"""

from typing import Annotated, Optional

import typer

from trydocs.config import Settings, load_config
from trydocs.core.directory import DirectoryAccessor
from trydocs.core.models import PublishFormat, PublishOptions
from trydocs.core.project import MarkdownProject
from trydocs.core.publish import PublishError, run_publish


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def publish_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Directory to scan for Markdown files")] = None,
    target: Annotated[Optional[str], typer.Option("--target-dir", help="Directory to write published files into")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="Output format: markdown or html")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Render annotated Markdown files to normalized Markdown or static HTML."""
    settings = _settings(overrides={
        "source_dir": source, "target_dir": target,
        "output_format": fmt, "parser_config": parser,
    })
    source_dir = DirectoryAccessor(settings.source_dir)
    options = PublishOptions(
        source=source_dir,
        target=DirectoryAccessor(settings.target_dir),
        format=PublishFormat(settings.output_format),
    )
    project = MarkdownProject(source_dir, settings.parser_config, settings.language_list)

    try:
        status = run_publish(options, typer.echo, project)
    except PublishError as e:
        _fail(str(e), e.__cause__)
    if status != 0:
        raise typer.Exit(status)


def serve_cmd(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind host")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
    ):
    """Serve the workspace run/completion API."""
    import uvicorn

    from trydocs.server.app import create_app

    settings = _settings(overrides={"host": host, "port": port})
    typer.echo(f"Serving workspace API on http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)
