"""
core/dialogs.py
---------------
Interactive primitives the bridge needs from whoever hosts it:
- pick a destination to save to
- pick a directory
- show a blocking error

Operations never look at what show_error does; they only report the fault.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Callable, List, Optional, TextIO

from core.models import PresentationFault

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"


class Dialogs:
    """Base interface. Every prompt returns None on cancel."""

    def choose_save_path(self, filter_name: str, extensions: List[str]) -> Optional[str]:
        raise NotImplementedError

    def choose_directory(self) -> Optional[str]:
        raise NotImplementedError

    def show_error(self, fault: PresentationFault) -> None:
        raise NotImplementedError


class ConsoleDialogs(Dialogs):
    """Asks on the terminal. An empty answer (or EOF) cancels."""

    def __init__(self, ask: Callable[[str], str] = input, out: TextIO = sys.stdout) -> None:
        self._ask = ask
        self._out = out
        # Requests run in worker threads; one question on the terminal at a time.
        self._lock = threading.Lock()

    def _prompt(self, question: str) -> Optional[str]:
        with self._lock:
            try:
                answer = self._ask(question)
            except EOFError:
                return None
        answer = (answer or "").strip()
        return answer or None

    def choose_save_path(self, filter_name: str, extensions: List[str]) -> Optional[str]:
        exts = ", ".join(f".{e}" for e in extensions)
        path = self._prompt(f"Save as ({filter_name}: {exts}), empty to cancel: ")
        if path is None:
            return None
        if extensions and not any(path.endswith(f".{e}") for e in extensions):
            path = f"{path}.{extensions[0]}"
        return path

    def choose_directory(self) -> Optional[str]:
        return self._prompt("Directory (empty to cancel): ")

    def show_error(self, fault: PresentationFault) -> None:
        print(f"{fault.title}: {fault.message}", file=self._out)


def terminal_dialogs(path: str = TTY_PATH) -> Optional[ConsoleDialogs]:
    """
    ConsoleDialogs on the controlling terminal, for when stdin/stdout are
    taken by the channel. None if there is no terminal to ask on.
    """
    try:
        reader = open(path, "r", encoding="utf-8")
    except OSError as e:
        logger.info("No terminal at %s: %s", path, e)
        return None
    try:
        writer = open(path, "a", encoding="utf-8")
    except OSError as e:
        reader.close()
        logger.info("No terminal at %s: %s", path, e)
        return None

    def ask(question: str) -> str:
        writer.write(question)
        writer.flush()
        line = reader.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n")

    return ConsoleDialogs(ask=ask, out=writer)


class ServeDialogs(Dialogs):
    """
    Dialogs for one request in serve mode.

    Prompts go to chooser (the terminal, usually); without one they are
    cancelled. Faults are logged and kept on .faults so they can be sent
    back with the response; use one instance per request.
    """

    def __init__(self, chooser: Optional[Dialogs] = None) -> None:
        self.chooser = chooser
        self.faults: List[PresentationFault] = []

    def choose_save_path(self, filter_name: str, extensions: List[str]) -> Optional[str]:
        if self.chooser is None:
            logger.info("No interactive save destination available; cancelling.")
            return None
        return self.chooser.choose_save_path(filter_name, extensions)

    def choose_directory(self) -> Optional[str]:
        if self.chooser is None:
            logger.info("No interactive directory chooser available; cancelling.")
            return None
        return self.chooser.choose_directory()

    def show_error(self, fault: PresentationFault) -> None:
        logger.warning("%s (%s): %s", fault.title, fault.kind, fault.message)
        self.faults.append(fault)
