"""Pydantic request DTOs for the API boundary.

Field names are camelCase on the wire and snake_case in Python.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from code_assist_gateway.domain.entities import (
    FileEntry,
    FolderEntry,
    GenerationRequest,
    TreeNode,
    Turn,
)


class MessageSchema(BaseModel):
    """One conversation turn."""

    role: str
    content: str

    def to_domain(self) -> Turn:
        return Turn(role=self.role, content=self.content)


class FileSchema(BaseModel):
    type: Literal["file"]
    name: str

    def to_domain(self) -> TreeNode:
        return FileEntry(name=self.name)


class FolderSchema(BaseModel):
    type: Literal["folder"]
    name: str
    children: list[TreeNodeSchema] = Field(default_factory=list)

    def to_domain(self) -> TreeNode:
        return FolderEntry(
            name=self.name,
            children=tuple(child.to_domain() for child in self.children),
        )


TreeNodeSchema = Annotated[Union[FileSchema, FolderSchema], Field(discriminator="type")]

FolderSchema.model_rebuild()


def _lenient_node(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict) or not isinstance(value.get("name"), str):
        return None
    if value.get("type") == "file":
        return value
    if value.get("type") == "folder":
        return {**value, "children": _lenient_tree(value.get("children")) or []}
    return None


def _lenient_tree(value: Any) -> list[dict[str, Any]] | None:
    """Drop unrecognised nodes; anything that is not a list means no tree."""
    if not isinstance(value, list):
        return None
    nodes = (_lenient_node(item) for item in value)
    return [node for node in nodes if node is not None]


class GenerateRequest(BaseModel):
    """Request body for ``POST /api/ai``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    messages: list[MessageSchema] = Field(min_length=1)
    context: str | None = None
    active_file_content: str | None = None
    is_edit_mode: bool = False
    file_name: str | None = None
    line: int | None = None
    template_type: str | None = None
    files: Annotated[list[TreeNodeSchema] | None, BeforeValidator(_lenient_tree)] = None
    project_name: str | None = None

    def to_domain(self) -> GenerationRequest:
        return GenerationRequest(
            messages=tuple(m.to_domain() for m in self.messages),
            context=self.context,
            active_file_content=self.active_file_content,
            is_edit_mode=self.is_edit_mode,
            file_name=self.file_name,
            line=self.line,
            template_type=self.template_type,
            project_name=self.project_name,
            files=(
                None
                if self.files is None
                else tuple(node.to_domain() for node in self.files)
            ),
        )
