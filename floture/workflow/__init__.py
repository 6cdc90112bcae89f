"""
Upload-and-detect workflow: one owned state container per session.

    workflow = DetectionWorkflow(client)
    workflow.select(SelectedFile.from_upload(uploaded))
    workflow.detect()
    view = present(workflow.wait(), workflow.file is not None)
"""
from typing import Optional

from floture.models import (
    DetectionMetrics,
    DetectionResult,
    DetectionStatus,
    Failure,
    Idle,
    Pending,
    SelectedFile,
    Success,
)
from floture.workflow.controller import DetectionRequestController
from floture.workflow.intake import ACCEPTED_TYPES, FileIntake
from floture.workflow.presenter import ResultView, present
from floture.workflow.preview import PreviewLifecycle, PreviewResource


class DetectionWorkflow:
    def __init__(self, client, preview_max_pixels: int = 1024):
        self.preview = PreviewLifecycle(max_pixels=preview_max_pixels)
        self.controller = DetectionRequestController(client, current_file=lambda: self.intake.file)
        self.intake = FileIntake(self.preview, self.controller.reset)

    @property
    def file(self) -> Optional[SelectedFile]:
        return self.intake.file

    @property
    def status(self) -> DetectionStatus:
        return self.controller.status

    def select(self, file: Optional[SelectedFile]) -> bool:
        return self.intake.select(file)

    def clear(self) -> bool:
        if self.controller.pending:
            return False
        return self.intake.clear()

    def detect(self) -> bool:
        return self.controller.detect()

    def poll(self) -> DetectionStatus:
        return self.controller.poll()

    def wait(self, timeout: Optional[float] = None) -> DetectionStatus:
        return self.controller.wait(timeout)

    def view(self) -> ResultView:
        return present(self.controller.status, self.file is not None)

    def close(self):
        self.controller.close()
        self.preview.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


__all__ = [
    "ACCEPTED_TYPES",
    "DetectionMetrics",
    "DetectionRequestController",
    "DetectionResult",
    "DetectionStatus",
    "DetectionWorkflow",
    "Failure",
    "FileIntake",
    "Idle",
    "Pending",
    "PreviewLifecycle",
    "PreviewResource",
    "ResultView",
    "SelectedFile",
    "Success",
    "present",
]
