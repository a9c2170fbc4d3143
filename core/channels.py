"""
core/channels.py
----------------
The closed set of names allowed across the trust boundary.

- RequestKind: requests the bridge answers (invoke).
- Notification: pushes the bridge may emit (receive).
- SEND_NOTIFICATIONS: one-way sends, and which push answers each.

Anything outside these sets is rejected here, before a handler is looked up.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class UnknownRequestError(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown request: {name!r}")
        self.name = name


class RequestKind(str, Enum):
    OPEN_FILE = "open-file"
    SAVE_FILE = "save-file"
    SAVE_FILE_SILENT = "save-file-silent"
    OPEN_PROJECT = "open-project"
    GET_FILES = "get-files"
    RUN_RULU = "run-rulu"

    @classmethod
    def parse(cls, name: object) -> "RequestKind":
        if isinstance(name, cls):
            return name
        for kind in cls:
            if kind.value == name:
                return kind
        raise UnknownRequestError(str(name))


class Notification(str, Enum):
    FILE_OPENED = "file-opened"
    PROJECT_OPENED = "project-opened"
    FILES_LIST = "files-list"


SEND_NOTIFICATIONS: Dict[RequestKind, Notification] = {
    RequestKind.OPEN_FILE: Notification.FILE_OPENED,
    RequestKind.OPEN_PROJECT: Notification.PROJECT_OPENED,
    RequestKind.GET_FILES: Notification.FILES_LIST,
}
