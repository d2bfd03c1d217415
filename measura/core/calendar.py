"""Holiday calendars, business day adjustment, tenors and day counts.

Calendars are reference data: value objects refer to a HolidayCalendarId
and resolve the calendar from ReferenceData when a trade is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Literal, assert_never, final

from dateutil.relativedelta import relativedelta

from measura.core.reference_data import ReferenceData
from measura.core.result import Err, Ok

_WEEKEND: frozenset[int] = frozenset({5, 6})  # Sat, Sun


# ---------------------------------------------------------------------------
# Holiday calendars
# ---------------------------------------------------------------------------


@final
@dataclass(frozen=True, slots=True, order=True)
class HolidayCalendarId:
    """Reference-data key of a holiday calendar, e.g. 'USNY' or 'GBLO+USNY'."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise TypeError("HolidayCalendarId requires non-empty name")

    @property
    def reference_data_type(self) -> type[HolidayCalendar]:
        return HolidayCalendar

    def __str__(self) -> str:
        return self.name


NO_HOLIDAYS = HolidayCalendarId("NoHolidays")
SAT_SUN = HolidayCalendarId("Sat/Sun")
GBLO = HolidayCalendarId("GBLO")
USNY = HolidayCalendarId("USNY")
EUTA = HolidayCalendarId("EUTA")
KRSE = HolidayCalendarId("KRSE")
JPTO = HolidayCalendarId("JPTO")


@final
@dataclass(frozen=True, slots=True)
class HolidayCalendar:
    """Set of holiday dates plus weekend days (0=Mon .. 6=Sun)."""

    id: HolidayCalendarId
    holidays: frozenset[date] = frozenset()
    weekend_days: frozenset[int] = _WEEKEND

    def __post_init__(self) -> None:
        if any(d < 0 or d > 6 for d in self.weekend_days):
            raise TypeError(f"HolidayCalendar weekend_days must be in 0..6, got {sorted(self.weekend_days)}")
        if len(self.weekend_days) == 7:
            raise TypeError("HolidayCalendar must have at least one business day per week")

    def is_holiday(self, d: date) -> bool:
        return d.weekday() in self.weekend_days or d in self.holidays

    def is_business_day(self, d: date) -> bool:
        return not self.is_holiday(d)

    def next_or_same(self, d: date) -> date:
        while self.is_holiday(d):
            d += timedelta(days=1)
        return d

    def previous_or_same(self, d: date) -> date:
        while self.is_holiday(d):
            d -= timedelta(days=1)
        return d

    def shift(self, d: date, business_days: int) -> date:
        """Move by a number of business days (negative moves back)."""
        step = timedelta(days=1 if business_days >= 0 else -1)
        remaining = abs(business_days)
        current = d
        while remaining > 0:
            current += step
            if self.is_business_day(current):
                remaining -= 1
        return current


def standard_calendars() -> tuple[HolidayCalendar, ...]:
    """Weekend-only calendars for the common centres; NoHolidays has no weekend."""
    return (
        HolidayCalendar(id=NO_HOLIDAYS, weekend_days=frozenset()),
        HolidayCalendar(id=SAT_SUN),
        HolidayCalendar(id=GBLO),
        HolidayCalendar(id=USNY),
        HolidayCalendar(id=EUTA),
        HolidayCalendar(id=KRSE),
        HolidayCalendar(id=JPTO),
    )


# ---------------------------------------------------------------------------
# Business day conventions and adjustments
# ---------------------------------------------------------------------------


class BusinessDayConvention(Enum):
    """How a non-business day is moved onto a business day."""

    NO_ADJUST = "NoAdjust"
    FOLLOWING = "Following"
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    PRECEDING = "Preceding"
    MODIFIED_PRECEDING = "ModifiedPreceding"

    def adjust(self, d: date, calendar: HolidayCalendar) -> date:
        """Adjust d according to this convention.

        MODIFIED_FOLLOWING: next business day, unless that crosses a month
        boundary, in which case the previous business day.
        MODIFIED_PRECEDING: the mirror image.
        """
        match self:
            case BusinessDayConvention.NO_ADJUST:
                return d
            case BusinessDayConvention.FOLLOWING:
                return calendar.next_or_same(d)
            case BusinessDayConvention.PRECEDING:
                return calendar.previous_or_same(d)
            case BusinessDayConvention.MODIFIED_FOLLOWING:
                result = calendar.next_or_same(d)
                return result if result.month == d.month else calendar.previous_or_same(d)
            case BusinessDayConvention.MODIFIED_PRECEDING:
                result = calendar.previous_or_same(d)
                return result if result.month == d.month else calendar.next_or_same(d)
            case _never:
                assert_never(_never)


@final
@dataclass(frozen=True, slots=True)
class BusinessDayAdjustment:
    """Convention + calendar used to adjust a date to a good business day."""

    convention: BusinessDayConvention
    calendar: HolidayCalendarId

    NONE: ClassVar[BusinessDayAdjustment]  # Assigned after class definition

    def adjust(self, d: date, ref_data: ReferenceData) -> date:
        """Adjust d, resolving the calendar from reference data."""
        if self.convention is BusinessDayConvention.NO_ADJUST:
            return d
        return self.convention.adjust(d, ref_data.get(self.calendar))


BusinessDayAdjustment.NONE = BusinessDayAdjustment(
    convention=BusinessDayConvention.NO_ADJUST, calendar=NO_HOLIDAYS,
)


@final
@dataclass(frozen=True, slots=True)
class DaysAdjustment:
    """An offset of a number of days, business or calendar, then an adjustment.

    With calendar NO_HOLIDAYS the offset counts calendar days; otherwise it
    counts business days of that calendar. Either way the result is then
    adjusted by `adjustment`.
    """

    days: int
    calendar: HolidayCalendarId = NO_HOLIDAYS
    adjustment: BusinessDayAdjustment = field(default=BusinessDayAdjustment.NONE)

    @staticmethod
    def of_calendar_days(days: int, adjustment: BusinessDayAdjustment | None = None) -> DaysAdjustment:
        return DaysAdjustment(days=days, adjustment=adjustment or BusinessDayAdjustment.NONE)

    @staticmethod
    def of_business_days(days: int, calendar: HolidayCalendarId) -> DaysAdjustment:
        return DaysAdjustment(days=days, calendar=calendar)

    def adjust(self, d: date, ref_data: ReferenceData) -> date:
        if self.calendar == NO_HOLIDAYS:
            shifted = d + relativedelta(days=self.days)
        else:
            shifted = ref_data.get(self.calendar).shift(d, self.days)
        return self.adjustment.adjust(shifted, ref_data)


@final
@dataclass(frozen=True, slots=True)
class AdjustableDate:
    """An unadjusted date that carries its own adjustment rule."""

    unadjusted: date
    adjustment: BusinessDayAdjustment = field(default=BusinessDayAdjustment.NONE)

    def adjusted(self, ref_data: ReferenceData) -> date:
        return self.adjustment.adjust(self.unadjusted, ref_data)


# ---------------------------------------------------------------------------
# Tenors
# ---------------------------------------------------------------------------

type TenorUnit = Literal["D", "W", "M", "Y"]


@final
@dataclass(frozen=True, slots=True)
class Tenor:
    """A time period: amount x unit (e.g. 3M, 1Y, 2W)."""

    amount: int
    unit: TenorUnit

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise TypeError(f"Tenor.amount must be > 0, got {self.amount}")

    @staticmethod
    def parse(raw: str) -> Ok[Tenor] | Err[str]:
        text = raw.strip().upper()
        if len(text) < 2 or text[-1] not in ("D", "W", "M", "Y") or not text[:-1].isdigit():
            return Err(f"Tenor must look like '3M' or '1Y', got '{raw}'")
        amount = int(text[:-1])
        if amount <= 0:
            return Err(f"Tenor amount must be > 0, got '{raw}'")
        unit: TenorUnit = text[-1]  # type: ignore[assignment]
        return Ok(Tenor(amount=amount, unit=unit))

    def add_to(self, d: date) -> date:
        match self.unit:
            case "D":
                return d + relativedelta(days=self.amount)
            case "W":
                return d + relativedelta(weeks=self.amount)
            case "M":
                return d + relativedelta(months=self.amount)
            case "Y":
                return d + relativedelta(years=self.amount)
            case _never:
                assert_never(_never)

    def __str__(self) -> str:
        return f"{self.amount}{self.unit}"


# ---------------------------------------------------------------------------
# Day count
# ---------------------------------------------------------------------------


class DayCount(Enum):
    """Day count conventions for year fraction computation."""

    ACT_360 = "Act/360"
    ACT_365F = "Act/365F"
    THIRTY_360 = "30/360 ISDA"

    def year_fraction(self, start: date, end: date) -> Decimal:
        """Year fraction of [start, end). Raises TypeError if start > end."""
        if start > end:
            raise TypeError(f"year_fraction: start ({start}) must be <= end ({end})")
        match self:
            case DayCount.ACT_360:
                return Decimal((end - start).days) / Decimal(360)
            case DayCount.ACT_365F:
                return Decimal((end - start).days) / Decimal(365)
            case DayCount.THIRTY_360:
                # ISDA 2006 Section 4.16(f) "30/360" (Bond Basis)
                d1 = min(start.day, 30)
                d2 = 30 if (end.day == 31 and d1 >= 30) else end.day
                days = 360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)
                return Decimal(days) / Decimal(360)
            case _never:
                assert_never(_never)

    def relative_year_fraction(self, start: date, end: date) -> Decimal:
        """Year fraction that is negative when end is before start."""
        if end < start:
            return -self.year_fraction(end, start)
        return self.year_fraction(start, end)
