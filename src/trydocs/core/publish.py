"""Publish pipeline: parse -> initialize annotated blocks -> render -> write"""

import asyncio
import logging
from pathlib import Path
from typing import Callable

from trydocs.core.annotations import AnnotatedCodeBlock
from trydocs.core.directory import DirectoryAccessor
from trydocs.core.models import PublishFormat, PublishOptions
from trydocs.core.parse import parse_markdown_document
from trydocs.core.project import MarkdownFile, MarkdownProject
from trydocs.core.render import render
from trydocs.core.utils.paths import is_child_of, is_subdirectory_of


logger = logging.getLogger(__name__)

Echo = Callable[..., None]


class PublishError(RuntimeError):
    """A single file failed to parse, initialize, render, or write."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"Failed to publish {path}: {cause}")
        self.path = path


async def initialize_blocks(blocks: list[AnnotatedCodeBlock]) -> None:
    """Initialize blocks concurrently; wait for all, then raise the first failure."""
    results = await asyncio.gather(*(b.initialize() for b in blocks), return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result


def target_relative_path(relative: Path, fmt: PublishFormat) -> Path:
    """Keep the source's relative path; HTML output always ends in .html."""
    return relative.with_suffix(".html") if fmt == PublishFormat.html else relative


async def publish_file(markdown_file: MarkdownFile, options: PublishOptions) -> Path:
    """Publish one file and return the absolute target path."""
    document = parse_markdown_document(markdown_file)
    blocks = document.annotated_blocks()
    await initialize_blocks(blocks)
    for block in blocks:
        for diagnostic in block.diagnostics:
            logger.warning("%s, block %d: %s", markdown_file.path, block.order, diagnostic)
    rendered = render(options.format, document)

    relative = target_relative_path(markdown_file.path, options.format)
    options.target.ensure_parent_exists(relative)
    target_path = options.target.get_fully_qualified_path(relative)
    await asyncio.to_thread(target_path.write_text, rendered, encoding="utf-8")
    logger.debug("Wrote %s (%d annotated blocks)", target_path, len(blocks))
    return target_path


async def publish(
    options: PublishOptions,
    echo: Echo,
    project: MarkdownProject | None = None,
    ) -> int:
    """Publish every Markdown file under options.source into options.target.

    Returns 0 on success, -1 when no Markdown files exist. Per-file failures
    raise PublishError; files already written stay on disk.
    """
    source: DirectoryAccessor = options.source
    project = project or MarkdownProject(source)
    markdown_files = project.get_all_markdown_files()
    if not markdown_files:
        echo(f"No markdown files found under {source.get_fully_qualified_root()}", err=True)
        return -1

    target = options.target
    target_is_subdirectory_of_source = is_subdirectory_of(target, source)

    for markdown_file in markdown_files:
        full_source_path = source.get_fully_qualified_path(markdown_file.path)
        if target_is_subdirectory_of_source and is_child_of(full_source_path, target):
            logger.debug("Skipping previously published %s", full_source_path)
            continue
        try:
            target_path = await publish_file(markdown_file, options)
        except Exception as e:
            raise PublishError(full_source_path, e) from e
        echo(f"Published '{full_source_path}' to {target_path}")

    return 0


def run_publish(options: PublishOptions, echo: Echo, project: MarkdownProject | None = None) -> int:
    """Synchronous entry point for the CLI."""
    return asyncio.run(publish(options, echo, project))
