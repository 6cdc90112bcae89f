# floture/workflow/presenter.py
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from floture.models import DetectionStatus, Failure, Pending, Success

NO_RESULT_TEXT = "No result yet"
PROCESSING_TEXT = "Processing image…"


@dataclass(frozen=True)
class ResultView:
    kind: str  # "empty" | "pending" | "success" | "failure"
    placeholder: Optional[str] = None
    headline: Optional[str] = None
    detected: Optional[bool] = None
    confidence: Optional[str] = None
    metrics: Tuple[Tuple[str, str], ...] = ()
    error: Optional[str] = None


def confidence_percent(confidence: float) -> str:
    # Halves round up, e.g. 0.125 -> 13%
    return f"{int(math.floor(confidence * 100 + 0.5))}%"


def present(status: DetectionStatus, has_file: bool = True) -> ResultView:
    if isinstance(status, Pending):
        return ResultView(kind="pending", placeholder=PROCESSING_TEXT)
    if isinstance(status, Failure):
        return ResultView(kind="failure", placeholder=NO_RESULT_TEXT, error=status.message)
    if isinstance(status, Success) and has_file:
        result = status.result
        m = result.metrics
        return ResultView(
            kind="success",
            headline="Floture detected" if result.detected else "Floture not detected",
            detected=result.detected,
            confidence=confidence_percent(result.confidence),
            metrics=(
                ("Red ratio", str(m.red_ratio)),
                ("Saturation", str(m.saturation)),
                ("Image size", f"{m.width}×{m.height}"),
                ("Label", result.label),
            ),
        )
    return ResultView(kind="empty", placeholder=NO_RESULT_TEXT)
