"""
Date navigation shared by the viewer and the calendar.

Everything here is a pure function of an ``AvailabilityIndex`` snapshot, the
selected date and "today"; nothing is cached between calls.
"""

from datetime import date
from typing import Optional

from gallery.navigation.availability import AvailabilityIndex
from gallery.navigation.schema import (
    Direction,
    DisplayState,
    PhotoDisplay,
    PlaceholderDisplay,
    PlaceholderReason,
    ViewerState,
)

TODAY_PLACEHOLDER_CAPTION = "No photo yet for today"


def format_civil_date(day: date) -> str:
    """``2025-02-03`` -> ``February 3, 2025``"""
    return f"{day:%B} {day.day}, {day.year}"


def nearest(index: AvailabilityIndex, day: date, direction: Direction) -> Optional[date]:
    """Closest date with a photo strictly before (prev) or after (next) ``day``."""
    if direction == Direction.PREV:
        candidates = [d for d in index.all_dates() if d < day]
        return max(candidates) if candidates else None
    candidates = [d for d in index.all_dates() if d > day]
    return min(candidates) if candidates else None


def resolve(index: AvailabilityIndex, selected: Optional[date], today: date) -> DisplayState:
    """What the viewer shows for ``selected`` (``None`` means today)."""
    day = selected or today
    record = index.record_for(day)
    if record is not None:
        return PhotoDisplay(date=day, caption=record.caption, url=record.url, record=record)
    if day == today:
        return PlaceholderDisplay(
            date=day,
            reason=PlaceholderReason.TODAY,
            caption=TODAY_PLACEHOLDER_CAPTION,
        )
    return PlaceholderDisplay(
        date=day,
        reason=PlaceholderReason.MISSING,
        caption=f"No photo available for {format_civil_date(day)}",
    )


def is_selectable(index: AvailabilityIndex, day: date, today: date) -> bool:
    """Today is always selectable; other days only if past and photographed."""
    if day == today:
        return True
    return day < today and index.is_available(day)


def navigate(
    index: AvailabilityIndex,
    selected: Optional[date],
    direction: Direction,
    today: date,
) -> date:
    """One prev/next step. Stays put when there is nowhere to go."""
    current = selected or today
    target = nearest(index, current, direction)
    return target if target is not None else current


def viewer_state(index: AvailabilityIndex, selected: Optional[date], today: date) -> ViewerState:
    day = selected or today
    previous_date = nearest(index, day, Direction.PREV)
    next_date = nearest(index, day, Direction.NEXT)
    return ViewerState(
        today=today,
        selected_date=day,
        display=resolve(index, day, today),
        previous_date=previous_date,
        next_date=next_date,
        has_previous=previous_date is not None,
        has_next=next_date is not None,
        selectable=is_selectable(index, day, today),
    )
