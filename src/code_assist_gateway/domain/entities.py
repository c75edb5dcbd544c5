"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union


class BackendKind(str, Enum):
    """The two interchangeable LLM backends."""

    REMOTE_MANAGED_RUNTIME = "bedrock"
    DIRECT_PROVIDER_API = "anthropic"


class ChunkKind(str, Enum):
    """Normalised classification of one backend chunk."""

    IGNORE = "ignore"
    TEXT_DELTA = "text_delta"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class BackendChunk:
    """A provider-specific chunk reduced to what the gateway cares about."""

    kind: ChunkKind
    text: str = ""
    cause: str | None = None


IGNORED_CHUNK = BackendChunk(ChunkKind.IGNORE)


# ── Conversation ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Turn:
    """One conversation turn; ``role`` is ``human`` or ``assistant``."""

    role: str
    content: str

    @property
    def backend_role(self) -> str:
        return "user" if self.role == "human" else "assistant"


# ── Project file tree ───────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FileEntry:
    name: str


@dataclass(frozen=True, slots=True)
class FolderEntry:
    name: str
    children: tuple[TreeNode, ...] = ()


TreeNode = Union[FileEntry, FolderEntry]


# ── Request / prompt inputs ─────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Everything the caller sends for one generation."""

    messages: tuple[Turn, ...]
    context: str | None = None
    active_file_content: str | None = None
    is_edit_mode: bool = False
    file_name: str | None = None
    line: int | None = None
    template_type: str | None = None
    project_name: str | None = None
    files: tuple[TreeNode, ...] | None = None

    @property
    def instruction(self) -> str:
        """The first turn's text, used as the user instruction."""
        if not self.messages:
            raise ValueError("A generation request needs at least one message.")
        return self.messages[0].content


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Project template metadata supplied by the template registry."""

    id: str
    name: str
    conventions: tuple[str, ...] = ()
    dependencies: dict[str, Any] = field(default_factory=dict)
    scripts: dict[str, Any] = field(default_factory=dict)


# ── Quota ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TierSettings:
    """Per-tier generation allowance and model selection."""

    name: str
    generations: int
    max_tokens: int
    anthropic_model: str

    def __post_init__(self) -> None:
        if self.generations < 0:
            raise ValueError(f"Tier {self.name}: generation limit must be >= 0")
        if self.max_tokens <= 0:
            raise ValueError(f"Tier {self.name}: max_tokens must be positive")


@dataclass(frozen=True, slots=True)
class Admission:
    """A caller the quota gate let through, with their resolved tier."""

    user_id: str
    tier: TierSettings


@dataclass(frozen=True, slots=True)
class UsageRecord:
    """Usage snapshot owned by the external profile store."""

    user_id: str
    tier: str | None
    generations: int = 0
    last_reset: datetime | None = None


# ── Backend call ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """A fully-assembled backend call."""

    system_prompt: str
    turns: tuple[Turn, ...]
    model: str
    max_tokens: int
    temperature: float
