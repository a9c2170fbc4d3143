"""
tools/file_persistence.py
-------------------------
save-file and save-file-silent.

Destination priority for a silent save:
1) explicit file_path: write there, no prompt, overwrite.
2) default_directory: first free name of untitled.<ext>, untitled-1.<ext>, ...
   (bounded search).
3) otherwise, or if the search ran out: ask the user where to save.

The untitled search checks existence and then writes; another writer creating
the same name in between is not guarded against (no lock is taken). Two
overlapping silent saves into one directory can therefore pick the same name,
and the later write wins.
"""

from __future__ import annotations

import logging
import os
from typing import Iterator, Optional

from core.dialogs import Dialogs
from core.env import BridgeConfig
from core.models import PresentationFault, SaveRequest

logger = logging.getLogger(__name__)

FILTER_NAME = "Rulu Files"


def write_text(path: str, content: str) -> None:
    """Write text to a file (overwrites existing, line endings untouched)."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def untitled_names(extension: str, attempts: int) -> Iterator[str]:
    """untitled.rulu, untitled-1.rulu, ... (attempts names in total)."""
    for i in range(attempts):
        yield f"untitled{extension}" if i == 0 else f"untitled-{i}{extension}"


def find_untitled_path(directory: str, extension: str, attempts: int) -> Optional[str]:
    """First non-existing untitled name in directory, or None when all are taken."""
    for name in untitled_names(extension, attempts):
        candidate = os.path.join(directory, name)
        if not os.path.lexists(candidate):
            return candidate
    return None


def _report_write_failure(dialogs: Dialogs, err: OSError) -> None:
    logger.warning("save failed: %s", err)
    dialogs.show_error(PresentationFault(
        kind="write_failed",
        title="Error",
        message=f"Failed to save file: {err}",
    ))


def _save_interactive(content: str, dialogs: Dialogs, config: BridgeConfig) -> Optional[str]:
    chosen = dialogs.choose_save_path(FILTER_NAME, [config.extension_name])
    if not chosen:
        logger.debug("save dialog cancelled")
        return None
    write_text(chosen, content)
    return chosen


def save_file(content: str, dialogs: Dialogs, config: BridgeConfig) -> Optional[str]:
    """Save-as: always prompts. Returns the path written, or None."""
    try:
        return _save_interactive(content, dialogs, config)
    except OSError as e:
        _report_write_failure(dialogs, e)
        return None


def save_file_silent(request: SaveRequest, dialogs: Dialogs, config: BridgeConfig) -> Optional[str]:
    """Save without prompting when the destination can be worked out."""
    try:
        if request.file_path:
            write_text(request.file_path, request.content)
            return request.file_path

        if request.default_directory:
            candidate = find_untitled_path(
                request.default_directory, config.extension, config.untitled_attempts
            )
            if candidate is not None:
                write_text(candidate, request.content)
                return candidate
            logger.info(
                "No free untitled name in %s after %d attempts; asking the user.",
                request.default_directory,
                config.untitled_attempts,
            )

        return _save_interactive(request.content, dialogs, config)
    except OSError as e:
        _report_write_failure(dialogs, e)
        return None
