"""CLI parser construction for the ``aegis`` command.

Wires subparsers only; handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ... import __version__
from ...base.errors import ProviderError
from ...base.models import ProviderType
from ...config.defaults import CLI_DEFAULT_ENV_FILE


def _provider_arg(value: str) -> ProviderType:
    """argparse ``type=`` hook turning free text into a :class:`ProviderType`."""
    try:
        return ProviderType.parse(value)
    except ProviderError as exc:
        raise argparse.ArgumentTypeError(exc.message) from None


def _non_empty(value: str) -> str:
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``config`` and ``chat`` subcommands.

    Usage errors (unknown provider, missing or empty ``--content``) make
    argparse exit with status 2.
    """
    p = argparse.ArgumentParser(prog="aegis", description="AI provider CLI interface")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--log-level",
        default=None,
        help="log level for stderr diagnostics (default: AEGIS_LOG_LEVEL or WARNING)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # config
    p_cfg = sub.add_parser("config", help="Configure API keys")
    p_cfg.add_argument("-s", "--show", action="store_true", help="show which keys are set")
    p_cfg.add_argument("-p", "--provider", type=_provider_arg, default=None)
    p_cfg.add_argument("-k", "--key", default=None, help="API key to store (prompted when omitted)")
    p_cfg.add_argument("--env-file", default=CLI_DEFAULT_ENV_FILE)

    # chat
    p_chat = sub.add_parser("chat", help="Chat with an AI model")
    p_chat.add_argument("-p", "--provider", type=_provider_arg, required=True)
    mode = p_chat.add_mutually_exclusive_group(required=True)
    mode.add_argument("-c", "--content", type=_non_empty, help="one-shot message")
    mode.add_argument("-i", "--interactive", action="store_true", help="multi-turn session on stdin")
    p_chat.add_argument("-m", "--model", default=None)
    p_chat.add_argument("--system", default=None, help="system prompt")
    p_chat.add_argument("--stream", action="store_true", help="print the reply as it arrives")
    p_chat.add_argument("--config-file", default=None, help="YAML/JSON settings file")
    p_chat.add_argument("--env-file", default=CLI_DEFAULT_ENV_FILE)
    return p


__all__ = ["build_parser"]
