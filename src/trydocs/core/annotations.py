"""Annotated code blocks: fence info-string parsing, markdown-it plugin, async initialization"""

import asyncio
import logging
import re
import shlex
import textwrap
from pathlib import Path
from typing import Iterable, Optional

import click
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token

from trydocs.core.directory import DirectoryAccessor
from trydocs.core.models import CodeBlockAnnotations
from trydocs.core.utils.paths import is_base_of


logger = logging.getLogger(__name__)

DEFAULT_LANGUAGES = ("python", "py")
REGION_START_RE = r'^\s*#\s*region\s+{name}\s*$'
REGION_END_RE = re.compile(r'^\s*#\s*endregion\b')

# Fence info strings share the CLI's option parser.
_ANNOTATION_COMMAND = click.Command(
    "annotation",
    params=[
        click.Argument(["language"]),
        click.Option(["--source-file"], default=None),
        click.Option(["--region"], default=None),
        click.Option(["--session"], default=None),
        click.Option(["--editable"], is_flag=True, default=False),
        click.Option(["--hidden"], is_flag=True, default=False),
    ],
    add_help_option=False,
)


class AnnotationError(Exception):
    """Raised for malformed annotations or sources that cannot be resolved."""


def parse_annotations(info: str) -> CodeBlockAnnotations:
    """Parse a fence info string such as ``python --source-file ./a.py --region main``."""
    try:
        args = shlex.split(info)
        ctx = _ANNOTATION_COMMAND.make_context("annotation", args)
    except ValueError as e:
        raise AnnotationError(f"Invalid code block annotation {info!r}: {e}") from e
    except click.ClickException as e:
        raise AnnotationError(f"Invalid code block annotation {info!r}: {e.format_message()}") from e
    annotations = CodeBlockAnnotations(**ctx.params)
    if annotations.region and not annotations.source_file:
        raise AnnotationError(f"--region requires --source-file in {info!r}")
    return annotations


def extract_region(text: str, region: str) -> str:
    """Return the dedented lines between ``# region <name>`` and the next ``# endregion``."""
    start_re = re.compile(REGION_START_RE.format(name=re.escape(region)))
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if start_re.match(line):
            body = []
            for inner in lines[i + 1:]:
                if REGION_END_RE.match(inner):
                    return textwrap.dedent("\n".join(body)).strip("\n") + "\n"
                body.append(inner)
            raise AnnotationError(f"Region {region!r} is never closed")
    raise AnnotationError(f"Region {region!r} not found")


class AnnotatedCodeBlock:
    """A fenced code block carrying annotations; must be initialized before rendering."""

    def __init__(
        self,
        annotations: CodeBlockAnnotations,
        code: str,
        order: int,
        markdown_path: Optional[Path] = None,
        directory: Optional[DirectoryAccessor] = None,
        ):
        self.annotations = annotations
        self.code = code
        self.order = order
        self.markdown_path = markdown_path
        self.directory = directory
        self.source_code: Optional[str] = None
        self.diagnostics: list[str] = []
        self.initialized = False

    def __repr__(self) -> str:
        return f"AnnotatedCodeBlock(order={self.order}, info={self.annotations.to_info_string()!r})"

    @property
    def language(self) -> str:
        return self.annotations.language

    def _resolve_source_file(self) -> Path:
        if self.directory is None:
            raise AnnotationError(f"--source-file {self.annotations.source_file} used outside a project")
        base = self.markdown_path.parent if self.markdown_path else Path(".")
        path = self.directory.get_fully_qualified_path(base / self.annotations.source_file)
        if not is_base_of(self.directory.get_fully_qualified_root(), path, self_is_child=True):
            raise AnnotationError(f"Source file {self.annotations.source_file} is outside the project root")
        if not path.is_file():
            raise AnnotationError(f"Source file not found: {path}")
        return path

    async def initialize(self) -> None:
        """Resolve the code this block displays; idempotent."""
        if self.initialized:
            return
        if self.annotations.source_file:
            path = self._resolve_source_file()
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            if self.annotations.region:
                text = extract_region(text, self.annotations.region)
            if self.code.strip():
                self.diagnostics.append(f"Inline content replaced by {self.annotations.source_file}")
            self.source_code = text
        else:
            self.source_code = self.code
        logger.debug("Initialized %r", self)
        self.initialized = True


def _annotate_fences(state: StateCore, languages: frozenset[str]) -> None:
    order = 0
    for token in state.tokens:
        if token.type != "fence" or not token.info.strip():
            continue
        language = token.info.split(maxsplit=1)[0]
        if language not in languages:
            continue
        try:
            annotations = parse_annotations(token.info)
        except AnnotationError as e:
            # Left as a plain fence.
            logger.warning("%s: %s", state.env.get("markdown_path", "<string>"), e)
            continue
        block = AnnotatedCodeBlock(
            annotations=annotations,
            code=token.content,
            order=order,
            markdown_path=state.env.get("markdown_path"),
            directory=state.env.get("directory"),
        )
        token.meta["annotated_block"] = block
        order += 1


def code_block_annotations_plugin(md: MarkdownIt, languages: Iterable[str] = DEFAULT_LANGUAGES) -> None:
    """markdown-it plugin attaching an AnnotatedCodeBlock to each fence in one of languages."""
    allowed = frozenset(languages)
    md.core.ruler.push("code_block_annotations", lambda state: _annotate_fences(state, allowed))


def annotated_blocks(tokens: list[Token]) -> list[AnnotatedCodeBlock]:
    """Return every annotated block in tokens, sorted by order."""
    blocks = [t.meta["annotated_block"] for t in tokens if "annotated_block" in t.meta]
    return sorted(blocks, key=lambda b: b.order)
