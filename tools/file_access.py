"""
tools/file_access.py
--------------------
open-file: read a whole file as text.

Failures never reach the caller as exceptions. The user gets a blocking
error and the caller gets None.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.dialogs import Dialogs
from core.models import FileHandle, PresentationFault

logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    """Read text from a file (strict UTF-8, line endings untouched)."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def open_file(file_path: str, dialogs: Dialogs) -> Optional[FileHandle]:
    try:
        content = read_text(file_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("open-file failed for %s: %s", file_path, e)
        dialogs.show_error(PresentationFault(
            kind="not_found",
            title="Error",
            message=f"Failed to open file: {e}",
        ))
        return None
    return FileHandle(content=content, file_path=file_path)
