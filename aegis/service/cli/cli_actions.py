"""CLI action handlers.

Purpose
-------
Subcommand handlers for the ``aegis`` CLI, kept apart from argument parsing
so tests can call them directly with injected prompts and a mock executor.

Fallback & Error Semantics
--------------------------
- ``chat`` performs exactly one dispatcher call per user turn. Success prints
  ``Response: <text>`` to stdout; failure prints ``Error: <message>`` to
  stderr and returns 1. Messages derive from the error kind and never include
  the key or the raw provider payload.
- ``config`` writes keys into a ``.env`` file with python-dotenv and never
  echoes them back.
- Unreadable or invalid config (missing file, bad YAML, out-of-range value)
  prints ``Error: invalid configuration: ...`` and returns 1 before any
  request is built. Input values are never echoed.
- ``AEGIS_USE_MOCKS=1`` swaps the HTTP executor for the scripted echo
  executor so the CLI can run offline.
"""

from __future__ import annotations

import argparse
import getpass
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

import yaml
from dotenv import set_key
from pydantic import ValidationError

from ...base.errors import ProviderError
from ...base.interfaces import CredentialSource, HttpExecutor
from ...base.logging import LogContext, get_logger, log_event
from ...base.models import Message, ProviderType
from ...config import load_config
from ...config.credentials import ChainedCredentialSource, EnvCredentialSource, StaticCredentialSource
from ...config.env import ENV_MAP, use_mocks
from ...dispatcher import Aegis

_logger = get_logger("aegis.cli")

Prompt = Callable[[str], str]

# Raised while reading config or .env files; reported as ``Error: ...``.
_CONFIG_ERRORS = (OSError, ValueError, yaml.YAMLError, ValidationError)


def describe_config_error(exc: BaseException) -> str:
    """One-line description of a config failure that never echoes input values."""
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}" for error in exc.errors()
        )
    if isinstance(exc, yaml.MarkedYAMLError) and exc.problem_mark is not None:
        mark = exc.problem_mark
        return f"{exc.problem or 'malformed YAML'} (line {mark.line + 1}, column {mark.column + 1})"
    if isinstance(exc, yaml.YAMLError):
        return "malformed YAML"
    if isinstance(exc, OSError) and exc.strerror:
        return f"{exc.strerror}: {exc.filename}" if exc.filename else exc.strerror
    return str(exc) or type(exc).__name__


# ---- config ----------------------------------------------------------------
def show_config(env_file: str, out: TextIO) -> int:
    """Print ``[SET]`` / ``[NOT SET]`` per provider (environment, then ``env_file``)."""
    source = ChainedCredentialSource(EnvCredentialSource(dotenv_path=env_file))
    print("Current configuration:", file=out)
    for provider in ProviderType:
        resolution = source.resolution(provider)
        status = "[SET]" if resolution.found else "[NOT SET]"
        print(f"{provider.display_name} API key ({provider.env_var}): {status}", file=out)
    return 0


def save_key(provider: ProviderType, key: str, env_file: str) -> None:
    """Persist ``key`` as ``<PROVIDER>_API_KEY`` in ``env_file`` (created if missing)."""
    path = Path(env_file)
    path.touch(exist_ok=True)
    set_key(str(path), ENV_MAP[provider], key)
    log_event(_logger, "cli.config.saved", LogContext(provider=provider.value), env_file=str(path))


def _choose_provider(prompt: Prompt, out: TextIO) -> Optional[ProviderType]:
    choices = list(ProviderType)
    for index, provider in enumerate(choices, start=1):
        print(f"  {index}) {provider.display_name}", file=out)
    answer = prompt("Select provider to configure [1]: ").strip() or "1"
    if answer.isdigit() and 1 <= int(answer) <= len(choices):
        return choices[int(answer) - 1]
    try:
        return ProviderType.parse(answer)
    except ProviderError:
        return None


def handle_config(
    args: argparse.Namespace,
    *,
    prompt: Prompt = input,
    secret_prompt: Prompt = getpass.getpass,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Show or store API keys. Prompts for whatever was not given on the command line."""
    out = out or sys.stdout
    err = err or sys.stderr
    if args.show:
        try:
            return show_config(args.env_file, out)
        except OSError as exc:
            print(f"Error: cannot read {args.env_file}: {describe_config_error(exc)}", file=err)
            return 1

    provider = args.provider or _choose_provider(prompt, out)
    if provider is None:
        print("Error: unknown provider selection", file=err)
        return 2
    key = args.key if args.key is not None else secret_prompt(f"Enter {provider.display_name} API key: ")
    key = (key or "").strip()
    if not key:
        print("Error: API key must not be empty", file=err)
        return 2
    try:
        save_key(provider, key, args.env_file)
    except OSError as exc:
        print(f"Error: cannot write {args.env_file}: {describe_config_error(exc)}", file=err)
        return 1
    print(f"{provider.display_name} API key saved to {args.env_file}", file=out)
    return 0


# ---- chat ------------------------------------------------------------------
def build_client(args: argparse.Namespace, *, executor: Optional[HttpExecutor] = None) -> Aegis:
    """Dispatcher for a CLI run: file/env config, keys from env then ``.env``."""
    config = load_config(args.config_file) if args.config_file else load_config()
    if args.model:
        config = config.with_tunables(args.provider, model=args.model)
    credentials: CredentialSource = ChainedCredentialSource(
        StaticCredentialSource.from_config(config),
        EnvCredentialSource(dotenv_path=args.env_file),
    )
    if executor is None and use_mocks():
        from ...mock import MockExecutor

        executor = MockExecutor()
        credentials = ChainedCredentialSource(
            credentials, StaticCredentialSource({p: "mock-key" for p in ProviderType})
        )
    return Aegis(config, credentials=credentials, executor=executor)


async def _reply(client: Aegis, provider: ProviderType, conversation: List[Message], stream: bool, out: TextIO) -> Message:
    """Run one turn, printing ``Response: ...``; raises ``ProviderError``."""
    if not stream:
        reply = await client.send_message(provider, conversation)
        print(f"Response: {reply.content}", file=out)
        return reply
    parts: List[str] = []
    print("Response: ", end="", file=out, flush=True)
    async with client.stream_message(provider, conversation) as chunks:
        async for chunk in chunks:
            if chunk.error is not None:
                print(file=out)
                raise chunk.error
            if chunk.content:
                parts.append(chunk.content)
                print(chunk.content, end="", file=out, flush=True)
    print(file=out)
    return Message.assistant("".join(parts))


async def run_chat(
    args: argparse.Namespace,
    *,
    executor: Optional[HttpExecutor] = None,
    prompt: Prompt = input,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Execute the ``chat`` subcommand.

    One-shot mode sends ``--content`` once. Interactive mode keeps the
    conversation across turns until ``exit``/``quit`` or end of input; a
    failed turn is reported and dropped from the history.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    provider: ProviderType = args.provider
    conversation: List[Message] = [Message.system(args.system)] if args.system else []
    try:
        client = build_client(args, executor=executor)
    except _CONFIG_ERRORS as exc:
        log_event(_logger, "cli.config.invalid", error_type=type(exc).__name__)
        print(f"Error: invalid configuration: {describe_config_error(exc)}", file=err)
        return 1
    async with client:
        if not args.interactive:
            conversation.append(Message.user(args.content))
            try:
                await _reply(client, provider, conversation, args.stream, out)
            except ProviderError as exc:
                print(f"Error: {exc.user_message()}", file=err)
                return 1
            return 0

        print(f"Chatting with {provider.display_name} (type 'exit' to quit)", file=out)
        failures = 0
        while True:
            try:
                text = prompt("You: ")
            except EOFError:
                break
            if text.strip().lower() in {"exit", "quit"}:
                break
            if not text.strip():
                continue
            conversation.append(Message.user(text))
            try:
                conversation.append(await _reply(client, provider, conversation, args.stream, out))
            except ProviderError as exc:
                conversation.pop()
                failures += 1
                print(f"Error: {exc.user_message()}", file=err)
        return 1 if failures else 0


__all__ = ["build_client", "describe_config_error", "handle_config", "run_chat", "save_key", "show_config"]
