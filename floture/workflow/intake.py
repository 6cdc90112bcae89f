# floture/workflow/intake.py
import logging
from typing import Optional

from floture.models import SelectedFile

logger = logging.getLogger(__name__)

# What the uploader widget lets the user pick; nothing else is validated here
ACCEPTED_TYPES = ["png", "jpg", "jpeg", "gif", "webp", "bmp"]


class FileIntake:
    """Holds the selected file and fans selection changes out to its listeners."""

    def __init__(self, preview, controller_reset):
        self._file: Optional[SelectedFile] = None
        self._preview = preview
        self._controller_reset = controller_reset

    @property
    def file(self) -> Optional[SelectedFile]:
        return self._file

    def select(self, file: Optional[SelectedFile]) -> bool:
        if file is None:
            return False
        self._file = file
        logger.info("Selected %s (%s, %d bytes)", file.name, file.media_type, file.size)
        self._preview.regenerate(file)
        self._controller_reset()
        return True

    def clear(self) -> bool:
        if self._file is None:
            return False
        logger.info("Cleared %s", self._file.name)
        self._file = None
        self._preview.release()
        self._controller_reset()
        return True
