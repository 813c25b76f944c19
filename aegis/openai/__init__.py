"""
OpenAI provider package.

Exports:
- OpenAIAdapter: ProviderAdapter for OpenAI chat completions
"""

from .client import OpenAIAdapter

__all__ = ["OpenAIAdapter"]
