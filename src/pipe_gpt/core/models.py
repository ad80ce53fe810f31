"""Core data models for pipe-gpt."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pipe_gpt.core.errors import TransportError


# --- Enums ---


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


_DEFAULT_PROMPT = "You are a helpful assistant."
_CODE_REVIEW_PROMPT = (
    "You are a helpful assistant. How would you improve this code? "
    "Include line numbers in your comments so I can tell where you mean. "
)


class AssistantPurpose(str, Enum):
    """Which fixed system prompt opens the conversation."""

    DEFAULT = "default"
    CODE_REVIEWER = "code_reviewer"

    @property
    def system_prompt(self) -> str:
        if self is AssistantPurpose.CODE_REVIEWER:
            return _CODE_REVIEW_PROMPT
        return _DEFAULT_PROMPT


# --- Models ---


@dataclass(frozen=True)
class Message:
    """A single role-tagged message in a conversation."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


Conversation = tuple[Message, ...]


@dataclass(frozen=True)
class RequestSettings:
    """Resolved request parameters, read-only once built."""

    api_url: str
    model: str
    max_tokens: int
    temperature: float
    top_p: float
    render_markdown: bool = False
    stream: bool = False

    def __post_init__(self) -> None:
        if self.stream:
            raise ValueError("Streaming responses are not supported")


@dataclass(frozen=True)
class ChatOutcome:
    """Result of one chat-completion exchange: a reply or a transport error."""

    reply: str = ""
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, reply: str) -> ChatOutcome:
        return cls(reply=reply)

    @classmethod
    def failure(cls, error: TransportError) -> ChatOutcome:
        return cls(error=error)
