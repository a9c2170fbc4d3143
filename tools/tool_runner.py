"""
tools/tool_runner.py
--------------------
run-rulu: launch one external program with the file path as its only
argument and wait for it.

The argument list goes straight to the OS (no shell), so the path is never
interpreted. No timeout, no streaming, no cancellation: one call, one result.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from typing import List, Optional

from core.models import EXIT_FALLBACK, EXIT_NOT_FOUND, ExecutionResult

logger = logging.getLogger(__name__)


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def not_found_message(executable: str) -> str:
    return (
        f"Executable not found: {executable}. "
        f"Make sure '{executable}' is on PATH or provide the full path."
    )


def working_directory_for(file_path: str) -> str:
    """Directory holding file_path, or the current directory if it has none."""
    return os.path.dirname(file_path) or os.getcwd()


async def execute(executable: str, params: List[str], cwd: Optional[str] = None) -> ExecutionResult:
    """Run executable with params in cwd and capture its outcome."""
    # A missing cwd also surfaces as FileNotFoundError; keep it apart from a missing executable.
    if cwd is not None and not os.path.isdir(cwd):
        return ExecutionResult(exit_code=EXIT_FALLBACK, stdout="", stderr=f"Working directory not found: {cwd}")
    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *params,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError:
        logger.warning("executable not found: %s", executable)
        return ExecutionResult(exit_code=EXIT_NOT_FOUND, stdout="", stderr=not_found_message(executable))
    except OSError as e:
        logger.warning("could not launch %s: %s", executable, e)
        return ExecutionResult(exit_code=EXIT_FALLBACK, stdout="", stderr=str(e))

    out, err = await proc.communicate()
    stdout = _decode(out)
    stderr = _decode(err)

    code = proc.returncode
    if code == 0:
        return ExecutionResult(exit_code=0, stdout=stdout, stderr=stderr)

    # Killed by a signal: no exit code of its own.
    if code is None or code < 0:
        exit_code = EXIT_FALLBACK
        message = stderr or f"{executable} terminated by signal {-code if code else '?'}"
    else:
        exit_code = code
        message = stderr or f"{executable} exited with code {code}"
    logger.debug("%s exited with %s", executable, code)
    return ExecutionResult(exit_code=exit_code, stdout=stdout, stderr=message)


async def run_tool(file_path: str, executable: str) -> ExecutionResult:
    """run-rulu entry point."""
    try:
        cwd = working_directory_for(file_path)
    except OSError as e:
        # os.getcwd() fails if the current directory was removed
        return ExecutionResult(exit_code=EXIT_FALLBACK, stdout="", stderr=str(e))
    return await execute(executable, [file_path], cwd)
