import calendar
from datetime import date
from typing import Optional

from gallery.navigation.availability import AvailabilityIndex
from gallery.navigation.navigator import is_selectable
from gallery.navigation.schema import CalendarDay, CalendarMonth, CalendarYear

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def build_month(
    index: AvailabilityIndex,
    year: int,
    month: int,
    today: date,
    selected: Optional[date] = None,
) -> CalendarMonth:
    first_weekday, days_in_month = calendar.monthrange(year, month)
    days = []
    for d in range(1, days_in_month + 1):
        day = date(year, month, d)
        has_photo = index.is_available(day)
        is_today = day == today
        is_future = day > today
        days.append(
            CalendarDay(
                date=day,
                day=d,
                is_today=is_today,
                has_photo=has_photo,
                is_future=is_future,
                is_missing=not is_future and not is_today and not has_photo,
                selectable=is_selectable(index, day, today),
                selected=day == selected,
            )
        )

    return CalendarMonth(
        month=month,
        name=MONTH_NAMES[month - 1],
        # Grid columns start on Sunday; monthrange counts from Monday
        leading_blanks=(first_weekday + 1) % 7,
        days=days,
    )


def build_year(
    index: AvailabilityIndex,
    year: int,
    today: date,
    selected: Optional[date] = None,
) -> CalendarYear:
    months = [build_month(index, year, month, today, selected) for month in range(1, 13)]
    return CalendarYear(year=year, today=today, months=months)
