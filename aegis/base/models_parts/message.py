"""
Message DTO used across providers.

Defines the `Message` dataclass and the closed `Role` enumeration. A
conversation is an ordered sequence of messages owned by the caller; adapters
only read it for the duration of one call.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Union


class Role(str, Enum):
    """Message author roles. Serialized as plain text on the wire."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Message:
    """A single conversational turn.

    Attributes:
        role: Author role. Plain strings are coerced to :class:`Role`; unknown
            values raise ``ValueError``.
        content: Text payload. Non-empty for well-formed requests; may be empty
            in streamed fragments or when a provider returns an empty reply.
    """

    role: Union[Role, str]
    content: str

    def __post_init__(self) -> None:
        self.role = Role(self.role)
        if not isinstance(self.content, str):
            raise TypeError(f"message content must be str, got {type(self.content).__name__}")

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(Role.ASSISTANT, content)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(Role.SYSTEM, content)

    def to_dict(self) -> Dict[str, str]:
        """Return the role/content pair with the role as text."""
        return {"role": self.role.value, "content": self.content}

    def __str__(self) -> str:
        return self.content


Conversation = Sequence[Message]


__all__ = [
    "Conversation",
    "Message",
    "Role",
]
