from fastapi import Depends

from core.config import configs
from core.storage import StorageService, get_storage_client
from gallery.navigation.availability import AvailabilityIndex
from gallery.navigation.clock import CivilClock
from gallery.photos.store import MetadataStore


def get_clock() -> CivilClock:
    return CivilClock(configs.TIMEZONE, configs.TODAY_OVERRIDE)


def get_storage() -> StorageService:
    return get_storage_client()


def get_photo_store() -> MetadataStore:
    return MetadataStore(configs.metadata_path)


async def get_availability_index(store: MetadataStore = Depends(get_photo_store)) -> AvailabilityIndex:
    # Rebuilt on every request so it always reflects the latest save
    return AvailabilityIndex(await store.load())
