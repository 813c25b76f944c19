"""Aegis CLI (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``. Performs no
provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable (console script ``aegis``)
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import Optional

from ...base.logging import LOG_LEVEL_ENV, configure_logger
from .cli_actions import handle_config, run_chat
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code: 0 success, 1 provider failure, 2 usage error.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 2

    configure_logger(level=args.log_level or os.getenv(LOG_LEVEL_ENV) or "WARNING")
    if args.cmd == "config":
        return handle_config(args)
    try:
        return asyncio.run(run_chat(args))
    except KeyboardInterrupt:
        return 130


__all__ = ["main"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
