"""
core/models.py
--------------
Values that cross the bridge.

All of them are one-shot: produced per request, handed to the caller, never
cached. to_dict() gives the wire shape the front end expects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


ErrorKind = Literal[
    "not_found",
    "write_failed",
    "enumeration_failed",
    "tool_not_found",
    "tool_nonzero",
]

EntryType = Literal["file", "directory"]

FOLDER_ICON = "jstree-folder"
FILE_ICON = "jstree-file"

EXIT_NOT_FOUND = 127
EXIT_FALLBACK = 1


@dataclass
class FileHandle:
    content: str
    file_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "filePath": self.file_path}


@dataclass
class DirectoryEntry:
    id: str
    text: str
    type: EntryType
    has_children: bool
    icon: str

    @classmethod
    def for_child(cls, parent: str, name: str, is_dir: bool) -> "DirectoryEntry":
        # id is a plain join, not a resolved path
        return cls(
            id=os.path.join(parent, name),
            text=name,
            type="directory" if is_dir else "file",
            has_children=is_dir,
            icon=FOLDER_ICON if is_dir else FILE_ICON,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type,
            "hasChildren": self.has_children,
            "icon": self.icon,
        }


@dataclass
class ExecutionResult:
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.exit_code == 0:
            return None
        if self.exit_code == EXIT_NOT_FOUND:
            return "tool_not_found"
        return "tool_nonzero"

    def to_dict(self) -> Dict[str, Any]:
        return {"exitCode": self.exit_code, "stdout": self.stdout, "stderr": self.stderr}


@dataclass
class SaveRequest:
    content: str
    file_path: Optional[str] = None
    default_directory: Optional[str] = None

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "SaveRequest":
        """Accepts both 'defaultDir' (front end) and 'defaultDirectory' keys."""
        default_dir = params.get("defaultDir") or params.get("defaultDirectory")
        return cls(
            content=params.get("content") or "",
            file_path=params.get("filePath") or None,
            default_directory=default_dir or None,
        )


@dataclass
class PresentationFault:
    """A blocking diagnostic shown to the user; separate from any result value."""

    kind: ErrorKind
    title: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "title": self.title, "message": self.message}
