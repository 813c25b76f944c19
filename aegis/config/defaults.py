"""aegis.config.defaults
=====================

Central place for the stable default values used by the provider adapters
and the CLI. Only plain constants live here (no I/O, no package imports) so
any module can import it without creating cycles.
"""

from __future__ import annotations

# ---- Anthropic ----
ANTHROPIC_DEFAULT_MODEL = "claude-3-sonnet-20240229"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# ---- OpenAI ----
OPENAI_DEFAULT_MODEL = "gpt-4-turbo-preview"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MAX_TOKENS = 2048
OPENAI_DEFAULT_TEMPERATURE = 0.7

# ---- CLI ----
# .env file the `aegis config` command writes keys into.
CLI_DEFAULT_ENV_FILE = ".env"
