"""AnthropicAdapter.

Translates the unified message model to and from the Anthropic Messages API
(``POST {base_url}/v1/messages``) without any SDK: the adapter only builds
``WireRequest`` values and decodes ``WireResponse`` bodies and stream events.
The HTTP exchange itself belongs to the executor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..base.errors import ProviderError
from ..base.interfaces import ProviderAdapter, StreamItem
from ..base.models import Conversation, Message, ProviderType, WireRequest, WireResponse
from ..base.streaming import SseEvent
from ..base.utils.messages import validate_conversation
from ..base.utils.payloads import decode_json_object, error_from_payload, in_band_error
from ..config.defaults import ANTHROPIC_API_VERSION
from .helpers import ERROR_TYPE_MAP, MESSAGES_PATH, PROVIDER_NAME, build_body, extract_text
from .stream_helpers import translate_stream_event

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..config.settings import ProviderSettings


class AnthropicAdapter(ProviderAdapter):
    """Adapter for Anthropic's Messages API."""

    provider = ProviderType.ANTHROPIC

    def build_request(
        self,
        conversation: Conversation,
        settings: "ProviderSettings",
        api_key: str,
        *,
        stream: bool = False,
    ) -> WireRequest:
        validate_conversation(conversation, provider=PROVIDER_NAME, model=settings.model)
        body = build_body(
            conversation,
            model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            stream=stream,
        )
        headers = dict(settings.headers)
        headers.update(
            {
                "x-api-key": api_key,
                "anthropic-version": settings.api_version or ANTHROPIC_API_VERSION,
                "content-type": "application/json",
                "accept": "text/event-stream" if stream else "application/json",
            }
        )
        return WireRequest(
            method="POST",
            url=f"{settings.base_url}{MESSAGES_PATH}",
            headers=headers,
            body=body,
            stream=stream,
        )

    def parse_response(self, response: WireResponse, *, model: Optional[str] = None) -> Message:
        if response.is_error:
            raise self.map_error_response(response, model=model)
        if not response.body.strip():
            return Message.assistant("")
        data = decode_json_object(response.body, provider=PROVIDER_NAME, model=model)
        if data.get("type") == "error":
            raise in_band_error(data, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)
        return Message.assistant(extract_text(data, model=model))

    def map_error_response(self, response: WireResponse, *, model: Optional[str] = None) -> ProviderError:
        return error_from_payload(response, provider=PROVIDER_NAME, model=model, type_map=ERROR_TYPE_MAP)

    def parse_stream_chunk(self, event: SseEvent, *, model: Optional[str] = None) -> StreamItem:
        return translate_stream_event(event, model=model)


__all__ = ["AnthropicAdapter"]
