"""OpenAIAdapter.

Translates the unified message model to and from the OpenAI chat-completions
API (``POST {base_url}/chat/completions``) with bearer authentication.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..base.errors import ProviderError
from ..base.interfaces import ProviderAdapter, StreamItem
from ..base.models import Conversation, Message, ProviderType, WireRequest, WireResponse
from ..base.streaming import SseEvent
from ..base.utils.messages import validate_conversation
from ..base.utils.payloads import decode_json_object, error_from_payload, in_band_error
from .openai_chat import CHAT_PATH, ERROR_TYPE_MAP, PROVIDER_NAME, build_body, extract_text
from .openai_streaming import translate_stream_event

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config.settings import ProviderSettings


class OpenAIAdapter(ProviderAdapter):
    """Adapter for OpenAI chat completions."""

    provider = ProviderType.OPENAI

    def build_request(
        self,
        conversation: Conversation,
        settings: "ProviderSettings",
        api_key: str,
        *,
        stream: bool = False,
    ) -> WireRequest:
        validate_conversation(conversation, provider=PROVIDER_NAME, model=settings.model)
        headers = dict(settings.headers)
        headers.update(
            {
                "authorization": f"Bearer {api_key}",
                "content-type": "application/json",
                "accept": "text/event-stream" if stream else "application/json",
            }
        )
        return WireRequest(
            method="POST",
            url=f"{settings.base_url}{CHAT_PATH}",
            headers=headers,
            body=build_body(
                conversation,
                model=settings.model,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
                stream=stream,
            ),
            stream=stream,
        )

    def parse_response(self, response: WireResponse, *, model: Optional[str] = None) -> Message:
        if response.is_error:
            raise self.map_error_response(response, model=model)
        if not response.body.strip():
            return Message.assistant("")
        data = decode_json_object(response.body, provider=PROVIDER_NAME, model=model)
        if "error" in data and "choices" not in data:
            raise in_band_error(data, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)
        return Message.assistant(extract_text(data, model=model))

    def map_error_response(self, response: WireResponse, *, model: Optional[str] = None) -> ProviderError:
        return error_from_payload(response, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)

    def parse_stream_chunk(self, event: SseEvent, *, model: Optional[str] = None) -> StreamItem:
        return translate_stream_event(event, model=model)


__all__ = ["OpenAIAdapter"]
