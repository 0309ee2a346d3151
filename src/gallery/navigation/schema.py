import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field

from gallery.photos.schema import CamelModel, PhotoRecord


class Direction(str, Enum):
    PREV = "prev"
    NEXT = "next"


class PlaceholderReason(str, Enum):
    TODAY = "today"
    MISSING = "missing"


class PhotoDisplay(CamelModel):
    kind: Literal["photo"] = "photo"
    date: datetime.date
    is_placeholder: Literal[False] = False
    caption: str
    url: str
    record: PhotoRecord


class PlaceholderDisplay(CamelModel):
    kind: Literal["placeholder"] = "placeholder"
    date: datetime.date
    is_placeholder: Literal[True] = True
    reason: PlaceholderReason
    caption: str
    url: Optional[str] = None


DisplayState = Annotated[Union[PhotoDisplay, PlaceholderDisplay], Field(discriminator="kind")]


class ViewerState(CamelModel):
    today: datetime.date
    selected_date: datetime.date
    display: DisplayState
    previous_date: Optional[datetime.date] = None
    next_date: Optional[datetime.date] = None
    has_previous: bool = False
    has_next: bool = False
    selectable: bool = False


class CalendarDay(CamelModel):
    date: datetime.date
    day: int
    is_today: bool
    has_photo: bool
    is_future: bool
    is_missing: bool
    selectable: bool
    selected: bool = False


class CalendarMonth(CamelModel):
    month: int
    name: str
    leading_blanks: int
    days: List[CalendarDay]


class CalendarYear(CamelModel):
    year: int
    today: datetime.date
    months: List[CalendarMonth]
