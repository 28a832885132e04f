"""Request/response models for the workspace API"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class RequestDescriptorProperty(BaseModel):
    name: str
    value: Any = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Value cannot be null or whitespace.")
        return v


class File(BaseModel):
    name: str
    text: str = ""


class RunRequest(BaseModel):
    workspace_type: Optional[str] = None
    files: List[File] = Field(default_factory=list)
    active_buffer_id: Optional[str] = None
    properties: List[RequestDescriptorProperty] = Field(default_factory=list)


class RunResult(BaseModel):
    succeeded: bool
    output: List[str] = Field(default_factory=list)
    exception: Optional[str] = None


class CompletionRequest(BaseModel):
    code: str
    position: int = Field(..., ge=0)


class CompletionItem(BaseModel):
    display_text: str
    kind: str
    insert_text: str


class CompletionResult(BaseModel):
    items: List[CompletionItem] = Field(default_factory=list)
