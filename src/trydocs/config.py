"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    source_dir:      str = Field(default=".",          description="Directory scanned for Markdown files")
    target_dir:      str = Field(default="published",  description="Directory published files are written to")
    output_format:   str = Field(default="html", pattern="^(markdown|html)$", description="markdown or html")
    parser_config:   str = Field(default="commonmark", pattern="^(commonmark|default|gfm-like|js-default|zero)$", description="MarkdownIt parser preset name")
    languages:       str = Field(default="python,py",  description="Comma-separated fence languages treated as annotated")
    snippet_timeout: float = Field(default=10.0, gt=0, description="Seconds a snippet run may take")
    host:            str = Field(default="127.0.0.1",  description="Workspace server bind host")
    port:            int = Field(default=4242, ge=1, le=65535, description="Workspace server bind port")

    @property
    def language_list(self) -> list[str]:
        return [lang.strip() for lang in self.languages.split(",") if lang.strip()]


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then TRYDOCS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"TRYDOCS_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
