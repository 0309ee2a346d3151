import datetime
import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from core.dependencies import get_clock, get_photo_store
from gallery.navigation.clock import CivilClock
from gallery.photos.schema import PhotoListResponse, PhotoRecord
from gallery.photos.store import MetadataStore

logger = logging.getLogger(__name__)
router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("", response_model=PhotoListResponse)
async def list_photos(
    response: Response,
    store: MetadataStore = Depends(get_photo_store),
    clock: CivilClock = Depends(get_clock),
):
    """All photos, newest date first."""
    records = await store.load()
    records.sort(key=lambda r: r.date, reverse=True)

    for key, value in NO_CACHE_HEADERS.items():
        response.headers[key] = value

    return PhotoListResponse(photos=records, timestamp=clock.now())


@router.get("/{day}", response_model=PhotoRecord)
async def get_photo(day: datetime.date, store: MetadataStore = Depends(get_photo_store)):
    for record in await store.load():
        if record.date == day:
            return record
    raise HTTPException(status_code=404, detail=f"No photo for {day.isoformat()}")
