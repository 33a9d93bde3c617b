"""Image decoding for the grid tiles and viewers.

Qt's `QImageReader` is tried first (with EXIF auto-transform); Pillow is the
fallback for files the Qt build cannot decode. No caching is done here.
"""

from __future__ import annotations

from PIL import Image, ImageOps
from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QImage, QImageReader
from loguru import logger


def _bounded_size(width: int, height: int, side: int) -> QSize:
    if width >= height:
        nw = min(side, width)
        nh = int(height * (nw / max(1, width)))
    else:
        nh = min(side, height)
        nw = int(width * (nh / max(1, height)))
    return QSize(max(1, nw), max(1, nh))


class ImageService:
    """Loads `QImage`s bounded to a requested side (0 means full size)."""

    def get_thumbnail(self, path: str, size: int) -> QImage | None:
        """Return thumbnail image for `path` with max side `size`."""
        return self._load(path, size)

    def get_preview(self, path: str, max_side: int = 0) -> QImage | None:
        """Return preview image for `path` bounded by `max_side`."""
        return self._load(path, max_side)

    def _load(self, path: str, requested_side: int) -> QImage | None:
        img = self._load_via_qt(path, requested_side)
        if img is not None:
            return img
        return self._load_via_pillow(path, requested_side)

    def _load_via_qt(self, path: str, requested_side: int) -> QImage | None:
        reader = QImageReader(path)
        reader.setAutoTransform(True)
        if requested_side > 0 and reader.size().isValid():
            orig = reader.size()
            if orig.width() > 0 and orig.height() > 0:
                reader.setScaledSize(_bounded_size(orig.width(), orig.height(), requested_side))
        img = reader.read()
        if img is None or img.isNull():
            logger.debug("QImageReader failed for {}: {}", path, reader.errorString())
            return None
        return img

    def _load_via_pillow(self, path: str, requested_side: int) -> QImage | None:
        try:
            with Image.open(path) as im:
                im = ImageOps.exif_transpose(im)
                if requested_side > 0:
                    im.thumbnail((requested_side, requested_side), Image.Resampling.LANCZOS)
                return self._pil_to_qimage(im)
        except (OSError, ValueError) as ex:
            logger.debug("Pillow load failed for {}: {}", path, ex)
            return None

    def _pil_to_qimage(self, pil_img: Image.Image) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        if pil_img.mode not in ("RGBA", "RGB"):
            pil_img = pil_img.convert("RGBA")
        if pil_img.mode == "RGB":
            data = pil_img.tobytes("raw", "RGB")
            qimg = QImage(data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888)
        else:
            data = pil_img.tobytes("raw", "RGBA")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
            )
        if qimg.isNull():
            return None
        return qimg.copy()


def scaled_for_zoom(image: QImage, fit: QSize, zoom: float) -> QImage:
    """Fit `image` inside `fit` keeping aspect ratio, then apply `zoom`."""
    if image.isNull() or fit.width() <= 0 or fit.height() <= 0:
        return image
    fitted = image.size().scaled(fit, Qt.KeepAspectRatio)
    w = max(1, int(fitted.width() * zoom))
    h = max(1, int(fitted.height() * zoom))
    return image.scaled(w, h, Qt.KeepAspectRatio, Qt.SmoothTransformation)
