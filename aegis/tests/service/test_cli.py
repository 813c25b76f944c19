"""CLI tests for the ``aegis`` command.

No network I/O: chat runs either use ``AEGIS_USE_MOCKS=1`` or an injected
``MockExecutor``; failure paths stop before any request is sent.
"""

from __future__ import annotations

import io
from typing import Iterator, List

import pytest
from dotenv import dotenv_values

from aegis.base.models import WireResponse
from aegis.mock import MockExecutor
from aegis.service.cli import main
from aegis.service.cli.cli_actions import handle_config, run_chat
from aegis.service.cli.cli_parser import build_parser


def _prompts(answers: List[str]):
    it: Iterator[str] = iter(answers)

    def prompt(_text: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return prompt


# ---- usage errors -----------------------------------------------------------
@pytest.mark.parametrize(
    "argv",
    [
        ["chat", "--provider", "gemini", "--content", "hi"],
        ["chat", "--provider", "openai"],
        ["chat", "--provider", "openai", "--content", "   "],
        ["chat", "--content", "hi"],
        [],
    ],
)
def test_usage_errors_exit_2(argv, capsys):
    assert main(argv) == 2  # nosec B101
    assert "usage" in capsys.readouterr().err  # nosec B101


def test_version_exits_zero(capsys):
    assert main(["--version"]) == 0  # nosec B101
    assert "aegis" in capsys.readouterr().out  # nosec B101


# ---- chat -------------------------------------------------------------------
def test_chat_with_mocks_prints_response(monkeypatch, capsys):
    monkeypatch.setenv("AEGIS_USE_MOCKS", "1")
    code = main(["chat", "--provider", "anthropic", "--content", "What is the capital of Vietnam?"])
    out = capsys.readouterr().out
    assert code == 0  # nosec B101
    assert "Response: [mock] What is the capital of Vietnam?" in out  # nosec B101


def test_chat_stream_with_mocks(monkeypatch, capsys):
    monkeypatch.setenv("AEGIS_USE_MOCKS", "1")
    assert main(["chat", "-p", "openai", "-c", "hello there", "--stream"]) == 0  # nosec B101
    assert "Response: [mock] hello there\n" in capsys.readouterr().out  # nosec B101


def test_chat_missing_key_reports_error(capsys):
    code = main(["chat", "--provider", "openai", "--content", "hi"])
    captured = capsys.readouterr()
    assert code == 1  # nosec B101
    assert "Error: No API key is configured" in captured.err  # nosec B101
    assert "Response:" not in captured.out  # nosec B101


async def test_chat_reads_key_from_env_file(tmp_path):
    env_file = tmp_path / "keys.env"
    env_file.write_text("OPENAI_API_KEY=sk-from-dotenv\n", encoding="utf-8")
    args = build_parser().parse_args(
        ["chat", "-p", "openai", "-c", "hi", "-m", "gpt-4o", "--system", "terse", "--env-file", str(env_file)]
    )
    executor = MockExecutor()
    out = io.StringIO()

    assert await run_chat(args, executor=executor, out=out, err=io.StringIO()) == 0  # nosec B101
    sent = executor.requests[0]
    assert sent.headers["authorization"] == "Bearer sk-from-dotenv"  # nosec B101
    assert sent.body["model"] == "gpt-4o"  # nosec B101
    assert sent.body["messages"][0] == {"role": "system", "content": "terse"}  # nosec B101
    assert out.getvalue() == "Response: [mock] hi\n"  # nosec B101


async def test_chat_provider_error_is_user_message(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env-key")
    args = build_parser().parse_args(["chat", "-p", "openai", "-c", "hi"])
    executor = MockExecutor([WireResponse(status_code=429, body="{}", headers={"retry-after": "30"})])
    err = io.StringIO()

    assert await run_chat(args, executor=executor, out=io.StringIO(), err=err) == 1  # nosec B101
    assert err.getvalue().startswith("Error: The provider is rate limiting requests")  # nosec B101
    assert "sk-env-key" not in err.getvalue()  # nosec B101


async def test_interactive_keeps_history(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-a")
    args = build_parser().parse_args(["chat", "-p", "anthropic", "-i"])
    executor = MockExecutor()
    out = io.StringIO()

    code = await run_chat(args, executor=executor, prompt=_prompts(["hello", "  ", "again", "exit"]), out=out)
    assert code == 0  # nosec B101
    assert executor.calls == 2  # nosec B101
    roles = [m["role"] for m in executor.requests[1].body["messages"]]
    assert roles == ["user", "assistant", "user"]  # nosec B101
    assert out.getvalue().count("Response: [mock]") == 2  # nosec B101


async def test_interactive_drops_failed_turn_and_stops_on_eof(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-o")
    args = build_parser().parse_args(["chat", "-p", "openai", "--interactive"])
    executor = MockExecutor([WireResponse(status_code=500, body="")])
    err = io.StringIO()

    code = await run_chat(args, executor=executor, prompt=_prompts(["first", "second"]), out=io.StringIO(), err=err)
    assert code == 1  # nosec B101
    assert "Error: The provider is temporarily unavailable" in err.getvalue()  # nosec B101
    assert [m["content"] for m in executor.requests[1].body["messages"]] == ["second"]  # nosec B101


# ---- config -----------------------------------------------------------------
def test_config_saves_key_and_show_masks_it(tmp_path, capsys):
    env_file = tmp_path / ".env"
    assert main(["config", "--provider", "openai", "--key", "sk-saved-123", "--env-file", str(env_file)]) == 0  # nosec B101
    assert dotenv_values(env_file)["OPENAI_API_KEY"] == "sk-saved-123"  # nosec B101
    saved_out = capsys.readouterr().out
    assert "sk-saved-123" not in saved_out  # nosec B101

    assert main(["config", "--show", "--env-file", str(env_file)]) == 0  # nosec B101
    out = capsys.readouterr().out
    assert "OpenAI API key (OPENAI_API_KEY): [SET]" in out  # nosec B101
    assert "Anthropic API key (ANTHROPIC_API_KEY): [NOT SET]" in out  # nosec B101
    assert "sk-saved-123" not in out  # nosec B101


def test_config_updates_existing_key(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("ANTHROPIC_API_KEY=old\nOTHER=keep\n", encoding="utf-8")
    assert main(["config", "-p", "anthropic", "-k", "new", "--env-file", str(env_file)]) == 0  # nosec B101
    values = dotenv_values(env_file)
    assert values["ANTHROPIC_API_KEY"] == "new" and values["OTHER"] == "keep"  # nosec B101


def test_config_prompts_for_missing_values(tmp_path):
    env_file = tmp_path / ".env"
    args = build_parser().parse_args(["config", "--env-file", str(env_file)])
    code = handle_config(
        args,
        prompt=_prompts(["2"]),
        secret_prompt=_prompts(["sk-typed"]),
        out=io.StringIO(),
        err=io.StringIO(),
    )
    assert code == 0  # nosec B101
    assert dotenv_values(env_file)["OPENAI_API_KEY"] == "sk-typed"  # nosec B101


@pytest.mark.parametrize("selection,key", [("9", "sk-x"), ("1", "   ")])
def test_config_rejects_bad_input(tmp_path, selection, key):
    env_file = tmp_path / ".env"
    args = build_parser().parse_args(["config", "--env-file", str(env_file)])
    err = io.StringIO()
    code = handle_config(args, prompt=_prompts([selection]), secret_prompt=_prompts([key]), out=io.StringIO(), err=err)
    assert code == 2  # nosec B101
    assert err.getvalue().startswith("Error:")  # nosec B101
    assert not env_file.exists()  # nosec B101


# ---- invalid configuration --------------------------------------------------
def test_chat_missing_config_file_is_reported(tmp_path, capsys):
    missing = tmp_path / "nope.yaml"
    code = main(["chat", "-p", "openai", "-c", "hi", "--config-file", str(missing)])
    err = capsys.readouterr().err
    assert code == 1  # nosec B101
    assert err.startswith("Error: invalid configuration: No such file or directory")  # nosec B101
    assert "nope.yaml" in err and "Traceback" not in err  # nosec B101


@pytest.mark.parametrize(
    "text,expected",
    [
        ("openai:\n  temperature: 5\n", "temperature: Input should be less than or equal to 2"),
        ("gemini:\n  model: x\n", "unknown provider section 'gemini'"),
        ("openai: [unclosed\n", "line "),
    ],
)
def test_chat_invalid_config_values_are_reported(tmp_path, capsys, text, expected):
    path = tmp_path / "aegis.yaml"
    path.write_text(text, encoding="utf-8")
    code = main(["chat", "-p", "openai", "-c", "hi", "--config-file", str(path)])
    err = capsys.readouterr().err
    assert code == 1  # nosec B101
    assert err.startswith("Error: invalid configuration: ")  # nosec B101
    assert expected in err  # nosec B101


async def test_invalid_config_never_echoes_the_key(tmp_path):
    path = tmp_path / "aegis.yaml"
    path.write_text("openai:\n  api_key: sk-in-file-123\n  max_tokens: -1\n", encoding="utf-8")
    args = build_parser().parse_args(["chat", "-p", "openai", "-c", "hi", "--config-file", str(path)])
    executor = MockExecutor()
    err = io.StringIO()

    assert await run_chat(args, executor=executor, out=io.StringIO(), err=err) == 1  # nosec B101
    assert "max_tokens" in err.getvalue() and "sk-in-file-123" not in err.getvalue()  # nosec B101
    assert executor.calls == 0  # nosec B101


def test_config_save_into_missing_directory_is_reported(tmp_path, capsys):
    env_file = tmp_path / "missing" / ".env"
    code = main(["config", "-p", "openai", "-k", "sk-unsaved", "--env-file", str(env_file)])
    err = capsys.readouterr().err
    assert code == 1  # nosec B101
    assert err.startswith(f"Error: cannot write {env_file}: No such file or directory")  # nosec B101
    assert "sk-unsaved" not in err  # nosec B101
