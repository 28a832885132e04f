"""Data models shared by the parse, render, and publish steps"""

import shlex
from enum import Enum

from pydantic import BaseModel, ConfigDict

from trydocs.core.directory import DirectoryAccessor


class PublishFormat(str, Enum):
    markdown = "markdown"
    html = "html"


class PublishOptions(BaseModel):
    """Immutable configuration for a single publish run."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: DirectoryAccessor
    target: DirectoryAccessor
    format: PublishFormat = PublishFormat.html


class CodeBlockAnnotations(BaseModel):
    """Options parsed from an annotated fence's info string."""
    language: str
    source_file: str | None = None
    region: str | None = None
    session: str | None = None
    editable: bool = False
    hidden: bool = False

    def to_info_string(self) -> str:
        """Canonical info string: language first, then options in a fixed order."""
        parts = [self.language]
        if self.source_file:
            parts += ["--source-file", self.source_file]
        if self.region:
            parts += ["--region", self.region]
        if self.session:
            parts += ["--session", self.session]
        if self.editable:
            parts.append("--editable")
        if self.hidden:
            parts.append("--hidden")
        return shlex.join(parts)
