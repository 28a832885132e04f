"""Parse a MarkdownFile into a MarkdownDocument using its project's pipeline"""

from dataclasses import dataclass, field
from typing import Any

from markdown_it.token import Token

from trydocs.core.annotations import AnnotatedCodeBlock, annotated_blocks
from trydocs.core.project import MarkdownFile


@dataclass
class MarkdownDocument:
    """Parsed token stream of one file; discarded after rendering."""
    tokens: list[Token]
    env: dict[str, Any] = field(default_factory=dict)

    def annotated_blocks(self) -> list[AnnotatedCodeBlock]:
        return annotated_blocks(self.tokens)


def parse_markdown_document(markdown_file: MarkdownFile) -> MarkdownDocument:
    pipeline = markdown_file.project.get_markdown_pipeline_for(markdown_file.path)
    env = {"markdown_path": markdown_file.path, "directory": markdown_file.project.directory}
    tokens = pipeline.parse(markdown_file.read_all_text(), env)
    return MarkdownDocument(tokens=tokens, env=env)
