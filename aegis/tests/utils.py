"""Constants and log capture helpers shared across test modules."""

from __future__ import annotations

import json
import logging
from typing import List

ANTHROPIC_KEY = "sk-ant-test-0123456789"
OPENAI_KEY = "sk-openai-test-9876543210"


class ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    @property
    def messages(self) -> List[str]:
        return [r.getMessage() for r in self.records]

    def events(self) -> List[dict]:
        """Decoded ``log_event`` payloads, in emission order."""
        out = []
        for message in self.messages:
            try:
                payload = json.loads(message)
            except ValueError:
                continue
            if isinstance(payload, dict) and "event" in payload:
                out.append(payload)
        return out
