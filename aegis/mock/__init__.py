"""Mock transport package exposing a scripted executor for tests and offline CLI runs."""

from .client import MockExecutor, MockStream, echo_response, echo_stream, sse_lines

__all__ = ["MockExecutor", "MockStream", "echo_response", "echo_stream", "sse_lines"]
