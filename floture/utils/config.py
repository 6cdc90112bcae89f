import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BACKEND_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 60.0
DEFAULT_PREVIEW_MAX_PIXELS = 1024

LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    backend_url: str = DEFAULT_BACKEND_URL
    request_timeout: Optional[float] = DEFAULT_TIMEOUT
    use_mock: bool = False
    log_level: str = "INFO"
    preview_max_pixels: int = DEFAULT_PREVIEW_MAX_PIXELS


def _lookup(name: str, environ: Mapping, secrets: Optional[Mapping]):
    # Env var wins; Streamlit Cloud provides secrets in TOML as a fallback
    value = environ.get(name)
    if value in (None, "") and secrets is not None:
        try:
            value = secrets.get(name)
        except Exception:
            # st.secrets raises when no secrets.toml exists
            value = None
    return None if value in (None, "") else str(value)


def _timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return DEFAULT_TIMEOUT
    if raw.strip().lower() in ("0", "none", "off"):
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"FLOTURE_REQUEST_TIMEOUT must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"FLOTURE_REQUEST_TIMEOUT must not be negative, got {raw!r}")
    return value


def _max_pixels(raw: Optional[str]) -> int:
    if raw is None:
        return DEFAULT_PREVIEW_MAX_PIXELS
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"FLOTURE_PREVIEW_MAX_PIXELS must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"FLOTURE_PREVIEW_MAX_PIXELS must be positive, got {raw!r}")
    return value


def load_settings(environ: Optional[Mapping] = None, secrets: Optional[Mapping] = None) -> Settings:
    environ = os.environ if environ is None else environ

    def get(name):
        return _lookup(name, environ, secrets)

    backend_url = (get("FLOTURE_BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/")
    return Settings(
        backend_url=backend_url or DEFAULT_BACKEND_URL,
        request_timeout=_timeout(get("FLOTURE_REQUEST_TIMEOUT")),
        use_mock=(get("FLOTURE_MOCK_BACKEND") or "").strip().lower() in _TRUTHY,
        log_level=(get("FLOTURE_LOG_LEVEL") or "INFO").upper(),
        preview_max_pixels=_max_pixels(get("FLOTURE_PREVIEW_MAX_PIXELS")),
    )


def configure_logging(settings: Settings):
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


def make_client(settings: Settings):
    if settings.use_mock:
        from floture.utils.mock_api_client import MockDetectionClient

        return MockDetectionClient()

    from floture.utils.api_client import DetectionClient

    return DetectionClient(settings.backend_url, timeout=settings.request_timeout)
