class GalleryError(Exception):
    """Base error for the gallery. ``status_code`` is the HTTP status it maps to."""

    status_code = 500


class ValidationError(GalleryError, ValueError):
    """Missing or malformed upload input."""

    status_code = 400


class PayloadTooLargeError(ValidationError):
    status_code = 413


class StorageError(GalleryError, IOError):
    """Binary or metadata write failure."""

    status_code = 500
