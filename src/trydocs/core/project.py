"""Markdown project: file discovery and per-file parse pipelines"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from markdown_it import MarkdownIt

from trydocs.core.annotations import DEFAULT_LANGUAGES, code_block_annotations_plugin
from trydocs.core.directory import DirectoryAccessor


MD_EXTENSIONS = {'.md', '.markdown'}


@dataclass(frozen=True)
class MarkdownFile:
    """A Markdown file identified by its path relative to the project root."""
    path: Path
    project: "MarkdownProject"

    def read_all_text(self) -> str:
        return self.project.directory.read_all_text(self.path)


class MarkdownProject:
    """Enumerates Markdown files under a directory and supplies their parse pipelines."""

    def __init__(
        self,
        directory: DirectoryAccessor,
        parser_config: str = 'commonmark',
        languages: Iterable[str] = DEFAULT_LANGUAGES,
        ):
        self.directory = directory
        self.parser_config = parser_config
        self.languages = tuple(languages)
        self._pipelines: dict[str, MarkdownIt] = {}

    def get_all_markdown_files(self) -> list[MarkdownFile]:
        """Return Markdown files under the root, sorted by relative path."""
        return [
            MarkdownFile(path=p, project=self)
            for p in self.directory.get_all_files_recursively()
            if p.suffix.lower() in MD_EXTENSIONS
        ]

    def get_markdown_pipeline_for(self, path: Path) -> MarkdownIt:
        """Return the parse pipeline for path, cached per file extension."""
        key = Path(path).suffix.lower()
        if key not in self._pipelines:
            md = MarkdownIt(self.parser_config, options_update={"linkify": False, "store_labels": True})
            md.use(code_block_annotations_plugin, languages=self.languages)
            self._pipelines[key] = md
        return self._pipelines[key]
