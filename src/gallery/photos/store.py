import logging
from pathlib import Path
from typing import Iterable, List, Union

from gallery.errors import StorageError
from gallery.photos.schema import PhotoRecord
from gallery.utils.fileIO import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class MetadataStore:
    """
    Flat-file photo "database": the whole record collection lives in one JSON
    document. Single writer only, there is no locking.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self) -> List[PhotoRecord]:
        """
        Return every stored record in insertion order.

        A missing, empty or unreadable document yields an empty list so the
        gallery keeps serving; the failure is only logged.
        """
        if not self.path.exists():
            return []

        try:
            data = await read_json(self.path)
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        except (OSError, ValueError) as e:
            logger.error(f"Error reading metadata from {self.path}: {e}")
            return []

        # One bad row must not hide the rest; the next save would drop them
        records = []
        for position, item in enumerate(data):
            try:
                records.append(PhotoRecord.model_validate(item))
            except ValueError as e:
                logger.warning(f"Skipping unreadable record #{position} in {self.path}: {e}")
        return records

    async def save(self, records: Iterable[PhotoRecord]) -> None:
        """Replace the persisted collection with ``records``."""
        payload = [record.model_dump(mode="json", by_alias=True) for record in records]
        try:
            await write_json_atomic(self.path, payload)
        except OSError as e:
            raise StorageError(f"Failed to write metadata to {self.path}: {e}") from e
        logger.info(f"Saved {len(payload)} photo records to {self.path}")
