"""
Anthropic provider package.

Exports:
- AnthropicAdapter: ProviderAdapter for the Anthropic Messages API
"""

from .client import AnthropicAdapter

__all__ = ["AnthropicAdapter"]
