import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.dependencies import get_availability_index, get_clock
from gallery.navigation.availability import AvailabilityIndex
from gallery.navigation.calendar_grid import build_year
from gallery.navigation.clock import CivilClock
from gallery.navigation.schema import CalendarYear

router = APIRouter()


@router.get("", response_model=CalendarYear)
async def get_calendar(
    year: Optional[int] = Query(None, ge=1, le=9999),
    selected: Optional[datetime.date] = Query(None),
    index: AvailabilityIndex = Depends(get_availability_index),
    clock: CivilClock = Depends(get_clock),
):
    today = clock.today()
    return build_year(index, year or today.year, today, selected)
