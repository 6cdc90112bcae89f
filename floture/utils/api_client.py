import logging

import requests

from floture.models import DetectionResult, SelectedFile

logger = logging.getLogger(__name__)

DETECT_ENDPOINT = "/api/detect"


class DetectionServiceError(Exception):
    """The detection service answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class DetectionClient:
    def __init__(self, base_url: str, timeout=60, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def detect(self, file: SelectedFile) -> DetectionResult:
        files = {"image": (file.name, file.payload, file.media_type)}
        logger.info("POST %s (%s, %d bytes)", self._url(DETECT_ENDPOINT), file.name, file.size)
        resp = self.session.post(self._url(DETECT_ENDPOINT), files=files, timeout=self.timeout)
        if not 200 <= resp.status_code < 300:
            raise DetectionServiceError(
                resp.status_code, resp.text or f"Request failed: {resp.status_code}"
            )
        return DetectionResult.from_payload(resp.json())

    def health(self) -> bool:
        try:
            resp = self.session.get(self._url("/"), timeout=5)
        except requests.RequestException as e:
            logger.debug("Health check failed: %s", e)
            return False
        return resp.ok


def check_health(base_url: str) -> bool:
    """One-off reachability check on a session that is closed afterwards."""
    with requests.Session() as session:
        return DetectionClient(base_url, session=session).health()
