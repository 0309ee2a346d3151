import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

import piexif

from gallery.photos.schema import CameraMetadata

logger = logging.getLogger(__name__)

# piexif reads JPEG, WebP and TIFF containers
_JPEG_MAGIC = b"\xff\xd8"
_TIFF_MAGIC = (b"II*\x00", b"MM\x00*")


@dataclass
class ExifSummary:
    camera_metadata: Optional[CameraMetadata] = None
    taken_at: Optional[str] = None


class ExifExtractor:
    """Pulls display-ready camera settings and capture time out of image bytes."""

    def extract(self, content: bytes) -> ExifSummary:
        exif = self._load(content)
        if exif is None:
            return ExifSummary()

        exif_exif = exif.get("Exif", {})
        camera = CameraMetadata(
            aperture=self._format_aperture(exif_exif.get(piexif.ExifIFD.FNumber)),
            shutter_speed=self._format_exposure(exif_exif.get(piexif.ExifIFD.ExposureTime)),
            iso=self._format_iso(exif_exif.get(piexif.ExifIFD.ISOSpeedRatings)),
            focal_length=self._format_focal_length(exif_exif.get(piexif.ExifIFD.FocalLength)),
        )
        return ExifSummary(
            camera_metadata=None if camera.is_empty() else camera,
            taken_at=self._parse_datetime(exif_exif.get(piexif.ExifIFD.DateTimeOriginal)),
        )

    def _load(self, content: bytes) -> Optional[dict]:
        if not self._is_supported(content):
            logger.debug("Skipping EXIF extraction for unsupported image container")
            return None
        try:
            return piexif.load(content)
        except Exception as e:
            logger.warning(f"Failed to load EXIF from upload: {e}")
            return None

    @staticmethod
    def _is_supported(content: bytes) -> bool:
        if content.startswith(_JPEG_MAGIC) or content.startswith(_TIFF_MAGIC):
            return True
        return content[0:4] == b"RIFF" and content[8:12] == b"WEBP"

    def _rational_to_float(self, value: Any) -> Optional[float]:
        if value is None:
            return None
        try:
            if isinstance(value, tuple) and len(value) == 2 and not isinstance(value[0], tuple):
                num, den = value
                if den == 0:
                    return None
                return float(num) / float(den)
            if isinstance(value, (list, tuple)) and len(value) > 0:
                return self._rational_to_float(value[0])
            if isinstance(value, (int, float)):
                return float(value)
        except (ValueError, TypeError, ZeroDivisionError):
            return None
        return None

    def _format_aperture(self, value: Any) -> Optional[str]:
        f_number = self._rational_to_float(value)
        if not f_number:
            return None
        return f"f/{f_number:g}"

    def _format_exposure(self, value: Any) -> Optional[str]:
        seconds = self._rational_to_float(value)
        if not seconds:
            return None
        if seconds < 1:
            return f"1/{round(1 / seconds)}"
        return f"{seconds:g}s"

    def _format_iso(self, value: Any) -> Optional[str]:
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if isinstance(value, int) and value > 0:
            return str(value)
        return None

    def _format_focal_length(self, value: Any) -> Optional[str]:
        focal_length = self._rational_to_float(value)
        if not focal_length:
            return None
        return f"{focal_length:g}mm"

    def _parse_datetime(self, value: Any) -> Optional[str]:
        if not value:
            return None
        try:
            text = value.decode() if isinstance(value, bytes) else str(value)
            taken = datetime.strptime(text.strip("\x00 "), "%Y:%m:%d %H:%M:%S")
        except (UnicodeDecodeError, ValueError):
            return None
        return taken.strftime("%Y-%m-%d %H:%M:%S")
