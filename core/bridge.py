"""
core/bridge.py
--------------
The bridge: one typed handler per RequestKind.

The handler table is built once and must cover every kind, so a request name
either parses to a kind with a handler or is rejected by RequestKind.parse.

Each handler takes the request params (a dict, or None) and returns a value
that is already safe to send over the channel (dicts, lists, str or None).
File-system work is moved off the event loop with asyncio.to_thread; the tool
runs as an asyncio subprocess. Nothing is shared between calls.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from core.channels import RequestKind
from core.dialogs import Dialogs
from core.env import BridgeConfig
from core.models import PresentationFault, SaveRequest
from tools.file_access import open_file
from tools.file_persistence import save_file, save_file_silent
from tools.project_enum import get_files, open_project
from tools.tool_runner import run_tool

logger = logging.getLogger(__name__)

Handler = Callable[[Optional[Dict[str, Any]], Dialogs], Awaitable[Any]]


def _param(params: Optional[Dict[str, Any]], *names: str) -> Any:
    """First non-empty value among names; params may also be a bare string."""
    if isinstance(params, str):
        return params
    if not params:
        return None
    for name in names:
        value = params.get(name)
        if value not in (None, ""):
            return value
    return None


class Bridge:
    def __init__(self, dialogs: Dialogs, config: Optional[BridgeConfig] = None) -> None:
        self.dialogs = dialogs
        self.config = config or BridgeConfig()
        self._handlers: Dict[RequestKind, Handler] = {
            RequestKind.OPEN_FILE: self._open_file,
            RequestKind.SAVE_FILE: self._save_file,
            RequestKind.SAVE_FILE_SILENT: self._save_file_silent,
            RequestKind.OPEN_PROJECT: self._open_project,
            RequestKind.GET_FILES: self._get_files,
            RequestKind.RUN_RULU: self._run_rulu,
        }
        missing = [k.value for k in RequestKind if k not in self._handlers]
        if missing:
            raise RuntimeError(f"Bridge has no handler for: {', '.join(missing)}")

    async def handle(
        self,
        kind: Any,
        params: Optional[Dict[str, Any]] = None,
        dialogs: Optional[Dialogs] = None,
    ) -> Any:
        """
        Dispatch one request. kind may be a RequestKind or its wire name.

        dialogs overrides the bridge's own for this call only (serve mode uses
        a fresh one per request to keep faults apart).
        """
        request_kind = RequestKind.parse(kind)
        logger.debug("request %s", request_kind.value)
        return await self._handlers[request_kind](params, dialogs or self.dialogs)

    # -----------------------------
    # Handlers
    # -----------------------------

    async def _open_file(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        file_path = _param(params, "filePath", "path")
        if not file_path:
            dialogs.show_error(PresentationFault(
                kind="not_found",
                title="Error",
                message="Failed to open file: no path given",
            ))
            return None
        handle = await asyncio.to_thread(open_file, file_path, dialogs)
        return handle.to_dict() if handle else None

    async def _save_file(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        content = _param(params, "content") or ""
        return await asyncio.to_thread(save_file, content, dialogs, self.config)

    async def _save_file_silent(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        request = SaveRequest.from_params(params if isinstance(params, dict) else {})
        return await asyncio.to_thread(save_file_silent, request, dialogs, self.config)

    async def _open_project(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        return await asyncio.to_thread(open_project, dialogs)

    async def _get_files(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        directory = _param(params, "dir", "directory")
        entries = await asyncio.to_thread(get_files, directory, dialogs, self.config.extension)
        return [e.to_dict() for e in entries]

    async def _run_rulu(self, params: Optional[Dict[str, Any]], dialogs: Dialogs) -> Any:
        file_path = _param(params, "filePath", "path") or ""
        result = await run_tool(file_path, self.config.executable)
        if result.error_kind:
            logger.info("run-rulu %s: %s exited %d", result.error_kind, file_path, result.exit_code)
        return result.to_dict()
