# floture/workflow/preview.py
import io
import logging
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from floture.models import SelectedFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_PIXELS = 1024


def load_image_with_orientation(payload: bytes) -> Image.Image:
    """Decode and auto-rotate mobile/desktop images."""
    with Image.open(io.BytesIO(payload)) as raw:
        img = ImageOps.exif_transpose(raw)
        img = img.convert("RGB")
    return img


def resize_for_preview(img: Image.Image, max_pixels: int = DEFAULT_MAX_PIXELS) -> Image.Image:
    """Downscale large images so the preview stays light in the browser."""
    w, h = img.size
    max_dim = max(w, h)
    if max_dim > max_pixels:
        scale = max_pixels / max_dim
        new_size = (max(1, int(w * scale)), max(1, int(h * scale)))
        resized = img.resize(new_size)
        img.close()
        img = resized
    return img


class PreviewResource:
    """A decoded preview image. Released exactly once."""

    def __init__(self, image: Image.Image, source_digest: str):
        self._image = image
        self.source_digest = source_digest
        self.released = False

    @property
    def image(self) -> Image.Image:
        if self.released:
            raise RuntimeError("Preview resource already released")
        return self._image

    def release(self):
        if self.released:
            return
        self._image.close()
        self.released = True


class PreviewLifecycle:
    """
    Owns the single live PreviewResource.

    Release-on-replace happens in regenerate(); release-on-teardown happens in
    close() or when the lifecycle is used as a context manager.
    """

    def __init__(self, max_pixels: int = DEFAULT_MAX_PIXELS):
        self.max_pixels = max_pixels
        self._current: Optional[PreviewResource] = None

    @property
    def current(self) -> Optional[PreviewResource]:
        return self._current

    def regenerate(self, file: SelectedFile) -> Optional[PreviewResource]:
        self.release()
        try:
            img = load_image_with_orientation(file.payload)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("No preview for %s: %s", file.name, e)
            return None
        self._current = PreviewResource(resize_for_preview(img, self.max_pixels), file.digest)
        return self._current

    def release(self):
        if self._current is not None:
            self._current.release()
            self._current = None

    def close(self):
        self.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
