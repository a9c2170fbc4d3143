from typing import List, Optional

from core.dialogs import Dialogs
from core.models import PresentationFault


class RecordingDialogs(Dialogs):
    """Answers prompts from fixed values and records everything it is asked."""

    def __init__(self, save_path: Optional[str] = None, directory: Optional[str] = None) -> None:
        self.save_path = save_path
        self.directory = directory
        self.save_prompts: List[tuple] = []
        self.directory_prompts = 0
        self.faults: List[PresentationFault] = []

    def choose_save_path(self, filter_name, extensions):
        self.save_prompts.append((filter_name, list(extensions)))
        return self.save_path

    def choose_directory(self):
        self.directory_prompts += 1
        return self.directory

    def show_error(self, fault: PresentationFault) -> None:
        self.faults.append(fault)
