# floture/models.py
import hashlib
from dataclasses import dataclass, field
from typing import Union


# ======================================================
# SELECTED FILE
# ======================================================
@dataclass(frozen=True)
class SelectedFile:
    name: str
    media_type: str
    payload: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def digest(self) -> str:
        return hashlib.md5(self.payload).hexdigest()

    @classmethod
    def from_upload(cls, uploaded_file):
        """Snapshot a Streamlit UploadedFile (or any file-like with a name)."""
        if hasattr(uploaded_file, "getvalue"):
            payload = uploaded_file.getvalue()
        else:
            uploaded_file.seek(0)
            payload = uploaded_file.read()
        return cls(
            name=getattr(uploaded_file, "name", None) or "upload.jpg",
            media_type=getattr(uploaded_file, "type", None) or "application/octet-stream",
            payload=payload,
        )


# ======================================================
# DETECTION RESULT
# ======================================================
@dataclass(frozen=True)
class DetectionMetrics:
    red_ratio: float
    saturation: float
    width: int
    height: int


def _ratio(metrics: dict, name: str):
    value = metrics[name]
    # Kept as sent so it renders verbatim; bool is an int subclass but not a ratio
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Detection metric '{name}' is not a number: {value!r}")
    return value


@dataclass(frozen=True)
class DetectionResult:
    detected: bool
    confidence: float
    label: str
    metrics: DetectionMetrics

    @classmethod
    def from_payload(cls, payload) -> "DetectionResult":
        """
        Build a result from the service's JSON body.
        Extra keys are ignored; a missing confidence counts as 0.
        """
        if not isinstance(payload, dict):
            raise ValueError("Detection response is not a JSON object")
        if not isinstance(payload.get("detected"), bool):
            raise ValueError("Detection response has no boolean 'detected' field")

        confidence = payload.get("confidence")
        confidence = 0.0 if confidence is None else float(confidence)
        if not 0.0 <= confidence <= 1.0:
            raise ValueError(f"Confidence {confidence} is outside [0, 1]")

        metrics = payload.get("metrics")
        if not isinstance(metrics, dict):
            raise ValueError("Detection response has no 'metrics' object")
        try:
            parsed_metrics = DetectionMetrics(
                red_ratio=_ratio(metrics, "red_ratio"),
                saturation=_ratio(metrics, "saturation"),
                width=int(metrics["width"]),
                height=int(metrics["height"]),
            )
        except KeyError as e:
            raise ValueError(f"Detection metrics missing {e}") from e
        except TypeError as e:
            raise ValueError(f"Detection metrics malformed: {e}") from e

        label = payload.get("label")
        return cls(
            detected=payload["detected"],
            confidence=confidence,
            label="" if label is None else str(label),
            metrics=parsed_metrics,
        )


# ======================================================
# DETECTION STATUS
# ======================================================
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Success:
    result: DetectionResult


@dataclass(frozen=True)
class Failure:
    message: str


DetectionStatus = Union[Idle, Pending, Success, Failure]

IDLE = Idle()
PENDING = Pending()
