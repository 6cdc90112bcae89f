import io
import hashlib

import pytest

from conftest import FLOTURE_PAYLOAD
from floture.models import DetectionResult, SelectedFile


def test_from_payload_parses_full_body():
    result = DetectionResult.from_payload(FLOTURE_PAYLOAD)
    assert result.detected is True
    assert result.confidence == 0.87
    assert result.label == "floture"
    assert result.metrics.red_ratio == 0.41
    assert (result.metrics.width, result.metrics.height) == (800, 600)


def test_missing_confidence_counts_as_zero():
    body = dict(FLOTURE_PAYLOAD)
    del body["confidence"]
    assert DetectionResult.from_payload(body).confidence == 0.0


def test_extra_fields_are_ignored():
    body = dict(FLOTURE_PAYLOAD, model="hsv-v2", elapsed_ms=12)
    assert DetectionResult.from_payload(body).label == "floture"


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"confidence": 0.3, "metrics": FLOTURE_PAYLOAD["metrics"]},
        dict(FLOTURE_PAYLOAD, confidence=1.5),
        dict(FLOTURE_PAYLOAD, metrics={"red_ratio": 0.1}),
        dict(FLOTURE_PAYLOAD, metrics=None),
    ],
)
def test_malformed_bodies_are_rejected(body):
    with pytest.raises(ValueError):
        DetectionResult.from_payload(body)


def test_result_is_immutable():
    result = DetectionResult.from_payload(FLOTURE_PAYLOAD)
    with pytest.raises(Exception):
        result.detected = False


def test_selected_file_from_upload_snapshots_bytes():
    upload = io.BytesIO(b"\x89PNG fake")
    upload.name = "flower.png"
    upload.type = "image/png"

    file = SelectedFile.from_upload(upload)

    assert file.name == "flower.png"
    assert file.media_type == "image/png"
    assert file.size == len(b"\x89PNG fake")
    assert file.digest == hashlib.md5(b"\x89PNG fake").hexdigest()


@pytest.mark.parametrize("value", [None, "0.41", True])
def test_non_numeric_ratios_are_rejected(value):
    body = dict(FLOTURE_PAYLOAD, metrics=dict(FLOTURE_PAYLOAD["metrics"], saturation=value))
    with pytest.raises(ValueError, match="saturation"):
        DetectionResult.from_payload(body)


def test_null_dimension_is_rejected():
    body = dict(FLOTURE_PAYLOAD, metrics=dict(FLOTURE_PAYLOAD["metrics"], width=None))
    with pytest.raises(ValueError):
        DetectionResult.from_payload(body)


def test_integer_ratios_are_kept_verbatim():
    body = dict(FLOTURE_PAYLOAD, metrics=dict(FLOTURE_PAYLOAD["metrics"], red_ratio=0))
    assert DetectionResult.from_payload(body).metrics.red_ratio == 0
