import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.dependencies import get_availability_index, get_clock
from gallery.navigation.availability import AvailabilityIndex
from gallery.navigation.clock import CivilClock
from gallery.navigation.navigator import navigate, viewer_state
from gallery.navigation.schema import Direction, ViewerState

router = APIRouter()


@router.get("", response_model=ViewerState)
async def view_date(
    date: Optional[datetime.date] = Query(None, description="Selected date, defaults to today"),
    index: AvailabilityIndex = Depends(get_availability_index),
    clock: CivilClock = Depends(get_clock),
):
    return viewer_state(index, date, clock.today())


@router.get("/navigate", response_model=ViewerState)
async def navigate_from(
    direction: Direction,
    date: Optional[datetime.date] = Query(None, description="Currently selected date"),
    index: AvailabilityIndex = Depends(get_availability_index),
    clock: CivilClock = Depends(get_clock),
):
    today = clock.today()
    return viewer_state(index, navigate(index, date, direction, today), today)
