from datetime import date
from typing import Dict, FrozenSet, Iterable, Optional

from gallery.photos.schema import PhotoRecord


class AvailabilityIndex:
    """Dates that have a photo, derived from one snapshot of the store."""

    def __init__(self, records: Iterable[PhotoRecord]):
        # Later records win if a damaged document holds duplicates
        self._by_date: Dict[date, PhotoRecord] = {record.date: record for record in records}

    def __len__(self) -> int:
        return len(self._by_date)

    def is_available(self, day: date) -> bool:
        return day in self._by_date

    def all_dates(self) -> FrozenSet[date]:
        return frozenset(self._by_date)

    def record_for(self, day: date) -> Optional[PhotoRecord]:
        return self._by_date.get(day)
