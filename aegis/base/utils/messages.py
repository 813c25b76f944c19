"""Conversation helpers shared across provider adapters.

Helpers here are pure: they read the caller-owned conversation and never
reorder, deduplicate or retain it.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from ..errors import ErrorKind, ProviderError
from ..models import Conversation, Message, Role


def validate_conversation(conversation: Conversation, *, provider: str = "unknown", model: Optional[str] = None) -> None:
    """Reject conversations no provider could accept.

    Raises:
        TypeError: an element is not a :class:`Message` (programmer error).
        ProviderError: ``INVALID_REQUEST`` for an empty conversation.
    """
    if isinstance(conversation, (str, bytes)):
        raise TypeError("conversation must be a sequence of Message, not text")
    for item in conversation:
        if not isinstance(item, Message):
            raise TypeError(f"conversation items must be Message, got {type(item).__name__}")
    if len(conversation) == 0:
        raise ProviderError(
            kind=ErrorKind.INVALID_REQUEST,
            message="conversation is empty",
            provider=provider,
            model=model,
        )


def split_system(conversation: Conversation) -> Tuple[Optional[str], List[Message]]:
    """Separate system messages from the dialogue turns.

    Returns ``(system_text, turns)`` where ``system_text`` joins every system
    message with a blank line (``None`` when there are none) and ``turns``
    keeps the remaining messages in their original order.
    """
    system_parts: List[str] = []
    turns: List[Message] = []
    for message in conversation:
        if message.role is Role.SYSTEM:
            system_parts.append(message.content)
        else:
            turns.append(message)
    return ("\n\n".join(system_parts) if system_parts else None), turns


__all__ = ["split_system", "validate_conversation"]
