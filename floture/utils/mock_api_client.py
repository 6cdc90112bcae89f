# floture/utils/mock_api_client.py
import io
import logging

from PIL import Image, UnidentifiedImageError

from floture.models import DetectionResult, SelectedFile

logger = logging.getLogger(__name__)

# -----------------------
# Canned response
# -----------------------
MOCK_RESPONSE = {
    "detected": True,
    "confidence": 0.87,
    "label": "floture",
    "metrics": {"red_ratio": 0.41, "saturation": 0.72, "width": 0, "height": 0},
}


def _image_size(payload: bytes):
    try:
        with Image.open(io.BytesIO(payload)) as img:
            return img.size
    except (UnidentifiedImageError, OSError):
        return 0, 0


class MockDetectionClient:
    """Offline stand-in for DetectionClient; never touches the network."""

    def __init__(self, response=None):
        self.response = dict(response or MOCK_RESPONSE)
        self.calls = 0

    def detect(self, file: SelectedFile) -> DetectionResult:
        self.calls += 1
        width, height = _image_size(file.payload)
        payload = dict(self.response)
        payload["metrics"] = dict(payload["metrics"], width=width, height=height)
        payload["detected"] = payload.get("confidence", 0) >= 0.5
        logger.info("Mock detection for %s (%dx%d)", file.name, width, height)
        return DetectionResult.from_payload(payload)

    def health(self) -> bool:
        return True
