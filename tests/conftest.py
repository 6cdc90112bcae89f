import io
import threading

import pytest
from PIL import Image

from floture.models import DetectionResult, SelectedFile
from floture.workflow import DetectionWorkflow

FLOTURE_PAYLOAD = {
    "detected": True,
    "confidence": 0.87,
    "label": "floture",
    "metrics": {"red_ratio": 0.41, "saturation": 0.72, "width": 800, "height": 600},
}


def png_bytes(size=(32, 24), color=(200, 20, 30)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_file():
    def _make(name="lily.png", size=(32, 24), color=(200, 20, 30)):
        return SelectedFile(name=name, media_type="image/png", payload=png_bytes(size, color))

    return _make


# ------------------------------
# Fake detection clients
# ------------------------------
class StubClient:
    """Returns a fixed result or raises a fixed error."""

    def __init__(self, result=None, error=None):
        self.result = result or DetectionResult.from_payload(FLOTURE_PAYLOAD)
        self.error = error
        self.calls = []

    def detect(self, file):
        self.calls.append(file)
        if self.error is not None:
            raise self.error
        return self.result


class BlockingClient(StubClient):
    """Holds every request until release is set."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = threading.Event()
        self.release = threading.Event()

    def detect(self, file):
        self.calls.append(file)
        self.started.set()
        self.release.wait(5)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def stub_client():
    return StubClient()


@pytest.fixture
def blocking_client():
    client = BlockingClient()
    yield client
    client.release.set()


@pytest.fixture
def workflow_for():
    created = []

    def _make(client):
        wf = DetectionWorkflow(client)
        created.append(wf)
        return wf

    yield _make
    for wf in created:
        wf.close()


# ------------------------------
# Fake requests.Session
# ------------------------------
class FakeResponse:
    def __init__(self, status_code=200, json_body=None, text=""):
        self.status_code = status_code
        self._json = json_body
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(json_body=FLOTURE_PAYLOAD)
        self.error = error
        self.posts = []
        self.gets = []

    def post(self, url, files=None, timeout=None):
        self.posts.append({"url": url, "files": files, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, timeout=None):
        self.gets.append(url)
        if self.error is not None:
            raise self.error
        return self.response
