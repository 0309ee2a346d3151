import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError

from core.config import configs
from core.dependencies import get_clock, get_photo_store, get_storage
from core.storage import StorageService
from gallery.errors import PayloadTooLargeError, ValidationError
from gallery.navigation.clock import CivilClock
from gallery.photos.exif import ExifExtractor
from gallery.photos.schema import CameraMetadata, UploadResponse
from gallery.photos.service import PhotoIngestionService, parse_civil_date
from gallery.photos.store import MetadataStore

logger = logging.getLogger(__name__)
router = APIRouter()


def get_ingestion_service(
    storage: StorageService = Depends(get_storage),
    store: MetadataStore = Depends(get_photo_store),
    clock: CivilClock = Depends(get_clock),
) -> PhotoIngestionService:
    return PhotoIngestionService(
        storage,
        store,
        clock,
        max_upload_size=configs.MAX_UPLOAD_SIZE,
        exif_extractor=ExifExtractor() if configs.EXTRACT_EXIF else None,
    )


def parse_camera_metadata(raw: Optional[str]) -> Optional[CameraMetadata]:
    if raw is None or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"metadata must be a JSON object: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("metadata must be a JSON object")
    try:
        return CameraMetadata.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid camera metadata: {e.errors()[0]['msg']}") from e


@router.post("", response_model=UploadResponse)
async def upload_photo(
    image: Optional[UploadFile] = File(None),
    date: Optional[str] = Form(None),
    caption: str = Form(""),
    location: Optional[str] = Form(None),
    taken_at: Optional[str] = Form(None, alias="takenAt"),
    metadata: Optional[str] = Form(None),
    service: PhotoIngestionService = Depends(get_ingestion_service),
    clock: CivilClock = Depends(get_clock),
):
    """
    Upload the photo for one day. A second upload for the same date replaces
    the first.
    """
    if image is None or not date:
        raise ValidationError("Image and date are required")

    day = parse_civil_date(date)
    if not configs.ALLOW_FUTURE_DATES and day > clock.today():
        raise ValidationError(f"Date {day.isoformat()} is in the future")

    camera_metadata = parse_camera_metadata(metadata)
    limit = configs.MAX_UPLOAD_SIZE
    if image.size is not None and image.size > limit:
        raise PayloadTooLargeError(f"Image is {image.size} bytes, the limit is {limit} bytes")
    # One byte past the limit is enough for the service to reject it
    content = await image.read(limit + 1)
    logger.info(f"📥 Upload received for {day.isoformat()}: {image.filename} ({len(content)} bytes)")

    result = await service.ingest(
        content,
        image.filename,
        day,
        caption=caption,
        location=location,
        taken_at=taken_at,
        camera_metadata=camera_metadata,
        content_type=image.content_type,
    )
    record = result.record

    return UploadResponse(
        file_path=record.url,
        date=record.date,
        caption=record.caption,
        metadata=record,
        replaced=result.replaced,
        replaced_file_name=result.replaced_file_name,
    )
