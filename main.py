"""
main.py
-------
Entry point for the Rulu editor bridge.

Two ways to run it:

- Console (default): type requests by name, e.g.
    open-file /home/me/project/a.rulu
    get-files /home/me/project
    run-rulu /home/me/project/a.rulu
    save-file-silent notes.txt --dir /home/me/project
  Dialogs are asked on the terminal.

- Serve (--serve): a JSON-lines channel on stdin/stdout for a front end.
    -> {"id": 1, "method": "open-file", "params": {"filePath": "/a.rulu"}}
    <- {"id": 1, "result": {...}, "faults": []}
  A message without "id" is a one-way send; its answer is pushed as
    <- {"notification": "file-opened", "data": {...}}
  Prompts (save destination, directory) are asked on the controlling
  terminal; without one they are cancelled.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shlex
import sys
from typing import Any, Dict, List, Optional, TextIO

from core.bridge import Bridge
from core.channels import SEND_NOTIFICATIONS, RequestKind, UnknownRequestError
from core.dialogs import ConsoleDialogs, Dialogs, ServeDialogs, terminal_dialogs
from core.env import BridgeConfig
from core.log import setup_logging

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


# -----------------------------
# Serve mode
# -----------------------------

def _error(req_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"id": req_id, "error": {"code": code, "message": message}}


async def dispatch_message(
    bridge: Bridge, line: str, chooser: Optional[Dialogs] = None
) -> Optional[Dict[str, Any]]:
    """
    Handle one channel message and return what should be written back
    (None when nothing is owed to the front end).

    chooser answers the prompts the request needs (save destination,
    directory); without one they are cancelled.
    """
    try:
        msg = json.loads(line)
    except json.JSONDecodeError as e:
        return _error(None, PARSE_ERROR, f"Invalid JSON: {e}")

    if not isinstance(msg, dict) or "method" not in msg:
        return _error(msg.get("id") if isinstance(msg, dict) else None, INVALID_REQUEST, "Missing 'method'.")

    is_send = "id" not in msg
    req_id = msg.get("id")

    try:
        kind = RequestKind.parse(msg["method"])
    except UnknownRequestError as e:
        logger.warning("rejected request %r", e.name)
        return None if is_send else _error(req_id, METHOD_NOT_FOUND, str(e))

    if is_send and kind not in SEND_NOTIFICATIONS:
        logger.warning("rejected send %r: not a send channel", kind.value)
        return None

    dialogs = ServeDialogs(chooser)
    try:
        result = await bridge.handle(kind, msg.get("params"), dialogs=dialogs)
    except Exception as e:
        logger.exception("request %s failed", kind.value)
        return None if is_send else _error(req_id, INTERNAL_ERROR, str(e))

    if is_send:
        return {"notification": SEND_NOTIFICATIONS[kind].value, "data": result}
    return {"id": req_id, "result": result, "faults": [f.to_dict() for f in dialogs.faults]}


def _write(out: TextIO, payload: Dict[str, Any]) -> None:
    out.write(json.dumps(payload) + "\n")
    out.flush()


async def serve(
    bridge: Bridge,
    inp: TextIO = sys.stdin,
    out: TextIO = sys.stdout,
    chooser: Optional[Dialogs] = None,
) -> None:
    """Read requests until EOF. Each one runs as its own task; replies go out as they finish."""
    pending = set()

    async def _one(line: str) -> None:
        reply = await dispatch_message(bridge, line, chooser)
        if reply is not None:
            _write(out, reply)

    while True:
        line = await asyncio.to_thread(inp.readline)
        if not line:
            break
        if not line.strip():
            continue
        task = asyncio.create_task(_one(line))
        pending.add(task)
        task.add_done_callback(pending.discard)

    if pending:
        await asyncio.gather(*pending)


# -----------------------------
# Console mode
# -----------------------------

HELP_TEXT = (
    "Requests:\n"
    "  open-file <path>\n"
    "  save-file <source>                      (asks where to save)\n"
    "  save-file-silent <source> [--to P] [--dir D]\n"
    "  open-project\n"
    "  get-files [dir]\n"
    "  run-rulu <path>\n"
    "Other:\n"
    "  help | exit\n"
    "<source> is a local file whose text is saved.\n"
)


def _parse_save_args(args: List[str]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    rest: List[str] = []
    i = 0
    while i < len(args):
        if args[i] in ("--to", "--dir") and i + 1 < len(args):
            params["filePath" if args[i] == "--to" else "defaultDir"] = args[i + 1]
            i += 2
            continue
        rest.append(args[i])
        i += 1
    if len(rest) != 1:
        raise ValueError("Usage: save-file-silent <source> [--to P] [--dir D]")
    with open(rest[0], "r", encoding="utf-8", newline="") as f:
        params["content"] = f.read()
    return params


def build_console_params(kind: RequestKind, args: List[str]) -> Any:
    """Turn typed arguments into the params a request expects."""
    if kind in (RequestKind.SAVE_FILE, RequestKind.SAVE_FILE_SILENT):
        params = _parse_save_args(args)
        if kind == RequestKind.SAVE_FILE:
            return {"content": params["content"]}
        return params
    if kind == RequestKind.OPEN_PROJECT:
        return None
    if kind == RequestKind.GET_FILES:
        return {"dir": args[0]} if args else None
    if not args:
        raise ValueError(f"Usage: {kind.value} <path>")
    return {"filePath": args[0]}


def format_result(kind: RequestKind, result: Any) -> str:
    if result is None:
        return "(nothing)"
    if kind == RequestKind.OPEN_FILE:
        return f"{result['filePath']}:\n{result['content']}"
    if kind == RequestKind.GET_FILES:
        if not result:
            return "(empty)"
        return "\n".join(
            f"{'D' if e['hasChildren'] else ' '} {e['text']}" for e in result
        )
    if kind == RequestKind.RUN_RULU:
        lines = [f"exit code: {result['exitCode']}"]
        if result["stdout"]:
            lines.append(result["stdout"].rstrip("\n"))
        if result["stderr"]:
            lines.append(result["stderr"].rstrip("\n"))
        return "\n".join(lines)
    return str(result)


def handle_command(bridge: Bridge, text: str) -> Optional[str]:
    """Run one typed line. Returns the text to print."""
    try:
        parts = shlex.split(text)
    except ValueError as e:
        return f"Could not parse input: {e}"
    if not parts:
        return None

    name, args = parts[0].lower(), parts[1:]
    if name == "help":
        return HELP_TEXT

    try:
        kind = RequestKind.parse(name)
    except UnknownRequestError:
        return f"Unknown request: {name}. Type 'help'."

    try:
        params = build_console_params(kind, args)
    except (ValueError, OSError) as e:
        return str(e)

    try:
        result = asyncio.run(bridge.handle(kind, params))
    except Exception as e:
        logger.exception("request %s failed", kind.value)
        return f"{kind.value} failed: {e}"
    return format_result(kind, result)


def run_console(bridge: Bridge) -> None:
    print("Rulu bridge console. Type 'help' for requests, 'exit' to quit.\n")
    while True:
        try:
            text = input("> ").strip()
        except EOFError:
            print()
            break
        if text.lower() in ("exit", "quit"):
            break
        msg = handle_command(bridge, text)
        if msg:
            print(msg)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rulu-bridge", description="Rulu editor host bridge")
    parser.add_argument("--serve", action="store_true", help="JSON-lines channel on stdin/stdout")
    parser.add_argument("--executable", help="tool launched by run-rulu (default: $RULU_EXECUTABLE or 'rulu')")
    parser.add_argument("--log-level", help="default: $RULU_LOG_LEVEL or INFO")
    ns = parser.parse_args(argv)

    try:
        config = BridgeConfig.from_env({"executable": ns.executable, "log_level": ns.log_level})
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        return 2
    setup_logging(config.log_level)

    if ns.serve:
        chooser = terminal_dialogs()
        if chooser is None:
            logger.warning("No terminal available; prompts in serve mode will be cancelled.")
        asyncio.run(serve(Bridge(ServeDialogs(chooser), config), chooser=chooser))
    else:
        run_console(Bridge(ConsoleDialogs(), config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
