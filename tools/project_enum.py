"""
tools/project_enum.py
---------------------
open-project and get-files.

get-files lists exactly one level: every subdirectory, plus files ending in
the reserved extension. Nothing is cached; each call reads the directory again.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from core.dialogs import Dialogs
from core.models import DirectoryEntry, PresentationFault

logger = logging.getLogger(__name__)


def open_project(dialogs: Dialogs) -> Optional[str]:
    """Ask the user for a project directory."""
    return dialogs.choose_directory()


def list_entries(directory: str, extension: str) -> List[DirectoryEntry]:
    """Filtered children of directory, in the order the OS lists them."""
    entries: List[DirectoryEntry] = []
    with os.scandir(directory) as it:
        for item in it:
            # A symlink is never listed as a directory.
            is_dir = item.is_dir(follow_symlinks=False)
            if not is_dir and not item.name.endswith(extension):
                continue
            entries.append(DirectoryEntry.for_child(directory, item.name, is_dir))
    return entries


def get_files(directory: Optional[str], dialogs: Dialogs, extension: str) -> List[DirectoryEntry]:
    base_dir = directory or dialogs.choose_directory()
    if not base_dir:
        return []
    try:
        return list_entries(base_dir, extension)
    except OSError as e:
        logger.warning("get-files failed for %s: %s", base_dir, e)
        dialogs.show_error(PresentationFault(
            kind="enumeration_failed",
            title="Error",
            message=f"Failed to read directory: {e}",
        ))
        return []
