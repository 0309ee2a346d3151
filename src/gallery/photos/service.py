import logging
import mimetypes
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Union

from core.storage.base import StorageService
from gallery.errors import PayloadTooLargeError, StorageError, ValidationError
from gallery.navigation.clock import CivilClock
from gallery.photos.exif import ExifExtractor
from gallery.photos.schema import CameraMetadata, PhotoRecord
from gallery.photos.store import MetadataStore
from gallery.utils.fileIO import AsyncBytesIO
from gallery.utils.performance import UPLOAD_FAILURES_TOTAL, UPLOADS_TOTAL, track_upload

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EXTENSION_PATTERN = re.compile(r"^[a-z0-9]{1,10}$")
DEFAULT_EXTENSION = "jpg"


def parse_civil_date(value: Union[str, date, None]) -> date:
    """Parse a ``YYYY-MM-DD`` string, rejecting anything else."""
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError("Image and date are required")
    value = value.strip()
    if not DATE_PATTERN.match(value):
        raise ValidationError(f"Date must be formatted YYYY-MM-DD, got '{value}'")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid calendar date '{value}'") from e


def resolve_extension(filename: Optional[str], content_type: Optional[str] = None) -> str:
    suffix = Path(filename or "").suffix.lstrip(".").lower()
    if EXTENSION_PATTERN.match(suffix):
        return suffix
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed:
            return guessed.lstrip(".")
    return DEFAULT_EXTENSION


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class IngestionResult:
    record: PhotoRecord
    replaced: bool = False
    replaced_file_name: Optional[str] = None


class PhotoIngestionService:
    """Stores an uploaded photo and upserts its record by date."""

    def __init__(
        self,
        storage: StorageService,
        store: MetadataStore,
        clock: CivilClock,
        max_upload_size: Optional[int] = None,
        exif_extractor: Optional[ExifExtractor] = None,
    ):
        self.storage = storage
        self.store = store
        self.clock = clock
        self.max_upload_size = max_upload_size
        self.exif_extractor = exif_extractor

    async def ingest(
        self,
        content: bytes,
        original_filename: Optional[str],
        day: Union[str, date, None],
        caption: Optional[str] = "",
        location: Optional[str] = None,
        taken_at: Optional[str] = None,
        camera_metadata: Optional[CameraMetadata] = None,
        content_type: Optional[str] = None,
    ) -> IngestionResult:
        with track_upload("ingest"):
            try:
                return await self._ingest(
                    content, original_filename, day, caption, location,
                    taken_at, camera_metadata, content_type,
                )
            except ValidationError:
                UPLOAD_FAILURES_TOTAL.labels(reason="validation").inc()
                raise
            except StorageError:
                UPLOAD_FAILURES_TOTAL.labels(reason="storage").inc()
                raise

    async def _ingest(
        self,
        content: bytes,
        original_filename: Optional[str],
        day: Union[str, date, None],
        caption: Optional[str],
        location: Optional[str],
        taken_at: Optional[str],
        camera_metadata: Optional[CameraMetadata],
        content_type: Optional[str],
    ) -> IngestionResult:
        if not content:
            raise ValidationError("Image and date are required")
        day = parse_civil_date(day)
        if self.max_upload_size is not None and len(content) > self.max_upload_size:
            raise PayloadTooLargeError(
                f"Image is {len(content)} bytes, the limit is {self.max_upload_size} bytes"
            )

        # 1. Unique file name
        file_name = await self._allocate_file_name(day, resolve_extension(original_filename, content_type))

        # 2. Upsert by date: drop any record already holding this date
        records = await self.store.load()
        previous = [r for r in records if r.date == day]
        records = [r for r in records if r.date != day]

        # 3. Binary first; a failure here leaves the metadata untouched
        try:
            await self.storage.save_file(AsyncBytesIO(content), file_name, content_type)
        except OSError as e:
            logger.error(f"Failed to store binary {file_name}: {e}")
            raise StorageError(f"Failed to store image {file_name}: {e}") from e

        # 4. Record
        if camera_metadata is not None and camera_metadata.is_empty():
            camera_metadata = None
        taken_at = _blank_to_none(taken_at)
        if self.exif_extractor is not None and (camera_metadata is None or taken_at is None):
            exif = self.exif_extractor.extract(content)
            camera_metadata = camera_metadata or exif.camera_metadata
            taken_at = taken_at or exif.taken_at

        record = PhotoRecord(
            file_name=file_name,
            date=day,
            caption=(caption or "").strip(),
            size=len(content),
            uploaded_at=self.clock.now(),
            url=self.storage.get_url(file_name),
            location=_blank_to_none(location),
            taken_at=taken_at,
            camera_metadata=camera_metadata,
        )

        # 5. Persist the collection
        records.append(record)
        try:
            await self.store.save(records)
        except StorageError:
            logger.error(f"Metadata save failed; {file_name} is now an orphaned binary")
            raise

        # 6. The replaced binary is no longer referenced by any record
        for old in previous:
            await self._discard_binary(old.file_name)

        replaced_file_name = previous[-1].file_name if previous else None
        UPLOADS_TOTAL.labels(replaced=str(bool(previous)).lower()).inc()
        logger.info(
            f"Ingested {file_name} for {day.isoformat()}"
            + (f" (replaced {replaced_file_name})" if replaced_file_name else "")
        )
        return IngestionResult(record=record, replaced=bool(previous), replaced_file_name=replaced_file_name)

    async def _allocate_file_name(self, day: date, extension: str) -> str:
        millis = int(self.clock.now().timestamp() * 1000)
        while True:
            file_name = f"{day.isoformat()}-{millis}.{extension}"
            if not await self.storage.exists(file_name):
                return file_name
            millis += 1

    async def _discard_binary(self, file_name: str) -> None:
        try:
            await self.storage.delete_file(file_name)
        except OSError as e:
            logger.warning(f"Could not delete replaced binary {file_name}: {e}")
