"""
Calendar and Time Conversion Module

This module provides the calendar/time engine:
- Proleptic Julian/Gregorian calendar arithmetic (reform at 1582-10-15)
- Julian Day conversions (Meeus algorithm)
- Unix time conversions anchored at 1970-01-01T00:00:00Z
- Fixed-offset time zones with a DST flag
- LCT <-> UT <-> GST <-> LST conversion chain
- Easter date computation

References:
    Meeus, J. (1998). Astronomical Algorithms, 2nd ed.
    Lawrence, J.L. (2018). Celestial Calculations.
"""

import math
import time
from dataclasses import dataclass, field, replace
from typing import Tuple
import logging

from astrocalc_angle import Angle, HRS_TO_MIN, MIN_TO_SEC

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

JD_GREGORIAN_START = 2299161        # First JD of the Gregorian calendar (1582-10-15)
JD_EPOCH_1900 = 2415020.0           # JD for 1900-01-00 12:00 UT
DAYS_PER_CENTURY = 36525.0
SIDEREAL_RATE = 1.002737909         # Sidereal seconds per UT second
SIDEREAL_DAY_GAIN = 0.0657098       # Hours gained by GST per day

# Absorbs floating-point error in the fractional JD so integer seconds survive
JD_SECOND_GUARD = 5.0e-4

_DAYS_PER_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class TimeZoneError(ValueError):
    """Invalid time zone definition."""


# ============================================================================
# Calendar Helpers
# ============================================================================

def is_leap_year(year: int) -> bool:
    """
    Return True if the given year is a leap year.

    Years up to 1582 follow the Julian rule, later years the Gregorian rule.
    Year 0 is 1 BC.
    """
    if year <= 1582:
        return year % 4 == 0
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month (1-12) of the given year"""
    if month == 2:
        return 29 if is_leap_year(year) else 28
    return _DAYS_PER_MONTH[month - 1]


def in_julian_calendar(year: int, month: int, day: int) -> bool:
    """True for dates before 1582-10-05"""
    return (year < 1582 or
            (year == 1582 and (month < 10 or (month == 10 and day < 5))))


def in_gregorian_calendar(year: int, month: int, day: int) -> bool:
    """True for dates after 1582-10-14"""
    return (year > 1582 or
            (year == 1582 and (month > 10 or (month == 10 and day > 14))))


def next_day(year: int, month: int, day: int) -> Tuple[int, int, int]:
    """Return (year, month, day) of the following calendar day"""
    day += 1
    if day > days_in_month(year, month):
        day = 1
        month += 1
        if month > 12:
            month = 1
            year += 1
    return year, month, day


def previous_day(year: int, month: int, day: int) -> Tuple[int, int, int]:
    """Return (year, month, day) of the preceding calendar day"""
    day -= 1
    if day == 0:
        month -= 1
        if month == 0:
            month = 12
            year -= 1
        day = days_in_month(year, month)
    return year, month, day


def hms_to_dec(hour: int, minute: int, second: float) -> float:
    """Convert hours, minutes and seconds to decimal hours"""
    return hour + (minute * 60 + second) / 3600.0


def dec_to_hms(hours: float) -> Tuple[int, int, int]:
    """
    Convert decimal hours to (hour, minute, second).

    Hours and minutes are truncated, seconds rounded to the nearest
    integer with carry into minutes and hours.
    """
    hour = math.trunc(hours)
    minute = math.trunc((hours - hour) * HRS_TO_MIN)
    second = math.floor(((hours - hour) * HRS_TO_MIN - minute) * MIN_TO_SEC + 0.5)
    if second >= 60:
        second = 0
        minute += 1
    if minute >= 60:
        minute = 0
        hour += 1
    return int(hour), int(minute), int(second)


def _wrap_hours(hours: float) -> float:
    """Wrap decimal hours into [0, 24)"""
    hours = hours % 24.0
    # Tiny negative inputs round up to 24.0
    if hours >= 24.0:
        hours = 0.0
    return hours


# ============================================================================
# Time Zone
# ============================================================================

@dataclass(frozen=True)
class TimeZone:
    """
    Fixed UTC offset in 15-minute steps plus a daylight saving flag.

    The offset is stored in quarter hours (-48 for -12:00 up to 59 for
    +14:45). When dst is set the effective offset is one hour larger.
    """
    offset: int = 0
    dst: bool = False

    def __post_init__(self):
        if not isinstance(self.offset, int) or not -48 <= self.offset <= 59:
            logger.warning(f"Rejected time zone offset {self.offset!r}")
            raise TimeZoneError(
                f"Time zone offset must be -48..59 quarter hours, got {self.offset!r}")

    @classmethod
    def from_hours(cls, hours: int, minutes: int = 0, dst: bool = False) -> 'TimeZone':
        """
        Create a time zone from an hour and minute offset.

        Args:
            hours: Offset hours (-12 to +14)
            minutes: Offset minutes, a multiple of 15 with the same sign as hours
            dst: Daylight saving time in effect

        Returns:
            TimeZone

        Raises:
            TimeZoneError: If the offset is out of range, not a multiple of
                15 minutes or mixes signs
        """
        if hours < -12 or hours > 14:
            logger.warning(f"Rejected time zone hours {hours}")
            raise TimeZoneError(f"Invalid time zone hours: {hours}")
        if minutes < -45 or minutes > 45 or minutes % 15 != 0:
            logger.warning(f"Rejected time zone minutes {minutes}")
            raise TimeZoneError(f"Invalid time zone minutes: {minutes}")
        if (hours < 0 and minutes > 0) or (hours > 0 and minutes < 0):
            logger.warning(f"Rejected time zone {hours}h {minutes}m")
            raise TimeZoneError(
                f"Invalid combination of time zone hours and minutes: {hours}, {minutes}")
        return cls(offset=hours * 4 + int(minutes / 15), dst=dst)

    @property
    def offset_hours(self) -> float:
        """Effective offset in hours, including DST"""
        quarters = self.offset + 4 if self.dst else self.offset
        return quarters * 0.25

    def __str__(self):
        sign = '-' if self.offset < 0 else '+'
        quarters = abs(self.offset)
        hours = quarters // 4
        minutes = (quarters % 4) * 15
        suffix = ' DST' if self.dst else ''
        return f"{sign}{hours:02d}:{minutes:02d}{suffix}"


UTC = TimeZone()
BRT = TimeZone.from_hours(-3)               # Brazil Standard Time
EST = TimeZone.from_hours(-5)               # Eastern Standard Time
EDT = TimeZone.from_hours(-5, dst=True)     # Eastern Daylight Time (UTC-4)
CST = TimeZone.from_hours(-6)               # Central Standard Time
CDT = TimeZone.from_hours(-6, dst=True)     # Central Daylight Time (UTC-5)
MST = TimeZone.from_hours(-7)               # Mountain Standard Time
MDT = TimeZone.from_hours(-7, dst=True)     # Mountain Daylight Time (UTC-6)
PST = TimeZone.from_hours(-8)               # Pacific Standard Time
PDT = TimeZone.from_hours(-8, dst=True)     # Pacific Daylight Time (UTC-7)


# ============================================================================
# Julian Day Conversion Functions
# ============================================================================

def civil_to_julian_day(year: int, month: int, day: int,
                        hour: int = 0, minute: int = 0, second: float = 0) -> float:
    """
    Calculate the Julian Day for a civil date and time.

    Dates before 1582-10-05 use the Julian calendar, later dates the
    Gregorian calendar. Intermediate terms are truncated to integers as in
    Meeus, chapter 7.

    Args:
        year: Year (0 = 1 BC, -1 = 2 BC)
        month: Month (1-12)
        day: Day of month (0 is accepted as the last day of the previous month)
        hour: Hour (0-23)
        minute: Minute (0-59)
        second: Second (0-59)

    Returns:
        Julian Day
    """
    gregorian = in_gregorian_calendar(year, month, day)
    day_fraction = day + hour / 24.0 + minute / 1440.0 + second / 86400.0

    # January and February count as months 13 and 14 of the previous year
    if month <= 2:
        year -= 1
        month += 12

    b = 0
    if gregorian:
        a = math.trunc(year / 100)
        b = 2 - a + math.trunc(a / 4)

    return (math.trunc(365.25 * (year + 4716)) +
            math.trunc(30.6001 * (month + 1)) +
            day_fraction + b - 1524.5)


def julian_day_to_civil(jd: float) -> 'AstroDate':
    """
    Convert a Julian Day to a UT civil date and time.

    Julian Days below 2299161 produce Julian calendar dates. The time of
    day is truncated to whole seconds.

    Args:
        jd: Julian Day

    Returns:
        AstroDate in UT
    """
    z = math.trunc(jd + 0.5)
    f = jd + 0.5 - z

    if z < JD_GREGORIAN_START:
        a = z
    else:
        alpha = math.trunc((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - math.trunc(alpha / 4)

    b = a + 1524
    c = math.trunc((b - 122.1) / 365.25)
    d = math.trunc(365.25 * c)
    e = math.trunc((b - d) / 30.6001)

    day = b - d - math.trunc(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    seconds = min(int(f * SECONDS_PER_DAY + JD_SECOND_GUARD), SECONDS_PER_DAY - 1)
    hour, seconds = divmod(seconds, SECONDS_PER_HOUR)
    minute, second = divmod(seconds, SECONDS_PER_MINUTE)

    return AstroDate(year, month, day, hour, minute, second)


# ============================================================================
# Civil Date and Time
# ============================================================================

@dataclass(frozen=True)
class AstroDate:
    """
    Proleptic calendar date and time of day with an attached time zone.

    Years may be zero or negative (0 = 1 BC). Dates in the 1582-10-05 to
    1582-10-14 gap of the calendar reform are never valid.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    tz: TimeZone = field(default=UTC)

    @classmethod
    def from_date_and_hours(cls, year: int, month: int, day: int,
                            hours: float, tz: TimeZone = UTC) -> 'AstroDate':
        """
        Create a date from a calendar day and decimal hours in [0, 24).

        Seconds are rounded; a carry past 23:59:59 moves to the next day.
        """
        if not 0.0 <= hours < 24.0:
            raise ValueError(f"Hours must be in [0, 24), got {hours}")
        hour, minute, second = dec_to_hms(hours)
        if hour >= 24:
            hour -= 24
            year, month, day = next_day(year, month, day)
        return cls(year, month, day, hour, minute, second, tz)

    @classmethod
    def from_jd(cls, jd: float) -> 'AstroDate':
        return julian_day_to_civil(jd)

    @classmethod
    def from_unix_time(cls, ts: int) -> 'AstroDate':
        """
        Create a UT date from Unix time (seconds since 1970-01-01T00:00:00Z).

        Negative timestamps count backwards from the epoch.
        """
        if ts >= 0:
            ndays, secs_today = divmod(ts, SECONDS_PER_DAY)
            ndays += 1  # Days since epoch, including this day
            hour, rest = divmod(secs_today, SECONDS_PER_HOUR)
            minute, second = divmod(rest, SECONDS_PER_MINUTE)

            year = 1970
            while ndays > days_in_year(year):
                ndays -= days_in_year(year)
                year += 1

            month = 1
            while ndays > days_in_month(year, month):
                ndays -= days_in_month(year, month)
                month += 1

            return cls(year, month, ndays, hour, minute, second)

        tsp = -ts - 1
        ndays, secs_today = divmod(tsp, SECONDS_PER_DAY)
        rest = SECONDS_PER_DAY - 1 - secs_today
        hour, rest = divmod(rest, SECONDS_PER_HOUR)
        minute, second = divmod(rest, SECONDS_PER_MINUTE)

        year = 1969
        while ndays >= days_in_year(year):
            ndays -= days_in_year(year)
            year -= 1

        month = 12
        while ndays >= days_in_month(year, month):
            ndays -= days_in_month(year, month)
            month -= 1

        return cls(year, month, days_in_month(year, month) - ndays, hour, minute, second)

    # ------------------------------------------------------------------
    # Calendar queries
    # ------------------------------------------------------------------

    def in_julian_calendar(self) -> bool:
        return in_julian_calendar(self.year, self.month, self.day)

    def in_gregorian_calendar(self) -> bool:
        return in_gregorian_calendar(self.year, self.month, self.day)

    def to_jd(self) -> float:
        """Julian Day of this date and time (time zone ignored)"""
        return civil_to_julian_day(self.year, self.month, self.day,
                                   self.hour, self.minute, self.second)

    def to_unix_time(self) -> int:
        """Seconds since 1970-01-01T00:00:00Z (time zone ignored)"""
        ndays = 0
        if self.year >= 1970:
            for year in range(1970, self.year):
                ndays += days_in_year(year)
            for month in range(1, self.month):
                ndays += days_in_month(self.year, month)
            ndays += self.day - 1

            return (ndays * SECONDS_PER_DAY +
                    self.hour * SECONDS_PER_HOUR +
                    self.minute * SECONDS_PER_MINUTE +
                    self.second)

        # Count backwards from the last second of 1969
        for year in range(1969, self.year, -1):
            ndays -= days_in_year(year)
        for month in range(12, self.month, -1):
            ndays -= days_in_month(self.year, month)
        ndays -= days_in_month(self.year, self.month) - self.day

        return (ndays * SECONDS_PER_DAY -
                (23 - self.hour) * SECONDS_PER_HOUR -
                (59 - self.minute) * SECONDS_PER_MINUTE -
                (60 - self.second))

    def day_of_week(self) -> int:
        """Day of the week, 0 = Sunday ... 6 = Saturday"""
        return math.floor(self.to_jd() + 1.5) % 7

    def days_into_year(self) -> int:
        """Ordinal day of the year, 1 = January 1st"""
        days = sum(days_in_month(self.year, month) for month in range(1, self.month))
        return days + self.day

    def decimal_hours(self) -> float:
        """Time of day in decimal hours"""
        return hms_to_dec(self.hour, self.minute, self.second)

    # ------------------------------------------------------------------
    # Derived dates
    # ------------------------------------------------------------------

    def noon(self) -> 'AstroDate':
        return replace(self, hour=12, minute=0, second=0)

    def midnight(self) -> 'AstroDate':
        return replace(self, hour=0, minute=0, second=0)

    def next_day(self) -> 'AstroDate':
        year, month, day = next_day(self.year, self.month, self.day)
        return replace(self, year=year, month=month, day=day)

    def previous_day(self) -> 'AstroDate':
        year, month, day = previous_day(self.year, self.month, self.day)
        return replace(self, year=year, month=month, day=day)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def to_date_string(self) -> str:
        """YYYY-MM-DD, or YYYY-MM-DD BC for years <= 0"""
        if self.year > 0:
            return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
        return f"{1 - self.year:04d}-{self.month:02d}-{self.day:02d} BC"

    def to_time_string(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"

    def to_datetime_string(self) -> str:
        return f"{self.to_date_string()} {self.to_time_string()}"

    def __str__(self):
        return f"{self.to_datetime_string()} ({self.tz})"


# ============================================================================
# Date Utility Functions
# ============================================================================

def now(tz: TimeZone = UTC) -> AstroDate:
    """Current date and time in the given time zone"""
    return ut_to_lct(AstroDate.from_unix_time(int(time.time())), tz)


def date_from_days_and_year(days: int, year: int) -> AstroDate:
    """Date that is the given number of days into the year (1 = January 1st)"""
    month = 1
    while days > days_in_month(year, month):
        days -= days_in_month(year, month)
        month += 1
    return AstroDate(year, month, days)


def days_between_dates(date1: AstroDate, date2: AstroDate) -> int:
    """Number of days from date1 to date2, compared at noon"""
    return int(date2.noon().to_jd()) - int(date1.noon().to_jd())


def easter_date(year: int) -> AstroDate:
    """
    Calculate the date of Easter Sunday (Meeus, chapter 8).

    Args:
        year: Gregorian calendar year (1583 or later)

    Returns:
        AstroDate of Easter Sunday

    Raises:
        ValueError: For years before the Gregorian calendar
    """
    if year < 1583:
        raise ValueError(f"Easter algorithm is only valid for Gregorian years, got {year}")

    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    x = h + l - 7 * m + 114

    return AstroDate(year, x // 31, x % 31 + 1)


# ============================================================================
# Civil Time Conversion Functions
# ============================================================================

def lct_to_ut(date: AstroDate) -> AstroDate:
    """
    Convert Local Civil Time to Universal Time.

    The effective zone offset (DST included) is subtracted; the calendar
    day rolls over when the result leaves [0, 24).
    """
    year, month, day = date.year, date.month, date.day
    ut = date.decimal_hours() - date.tz.offset_hours
    if ut < 0.0:
        year, month, day = previous_day(year, month, day)
        ut += 24.0
    elif ut >= 24.0:
        year, month, day = next_day(year, month, day)
        ut -= 24.0
    return AstroDate.from_date_and_hours(year, month, day, ut, UTC)


def ut_to_lct(date: AstroDate, tz: TimeZone) -> AstroDate:
    """Convert Universal Time to Local Civil Time in the given zone"""
    year, month, day = date.year, date.month, date.day
    lct = date.decimal_hours() + tz.offset_hours
    if lct < 0.0:
        year, month, day = previous_day(year, month, day)
        lct += 24.0
    elif lct >= 24.0:
        year, month, day = next_day(year, month, day)
        lct -= 24.0
    return AstroDate.from_date_and_hours(year, month, day, lct, tz)


# ============================================================================
# Sidereal Time Conversion Functions
# ============================================================================

def _sidereal_offset(date: AstroDate) -> float:
    """
    GST at 0h UT of the given date, before wrapping to [0, 24).

    Evaluated from the sidereal constant of January 0 of the date's year.
    """
    jd = date.midnight().to_jd()
    jd0 = civil_to_julian_day(date.year, 1, 0)
    days = jd - jd0
    t = (jd0 - JD_EPOCH_1900) / DAYS_PER_CENTURY
    r = 6.6460656 + t * (2400.051262 + 0.00002581 * t)
    b = 24.0 - r + 24.0 * (date.year - 1900)
    return SIDEREAL_DAY_GAIN * days - b


def ut_to_gst(date: AstroDate) -> AstroDate:
    """
    Convert Universal Time to Greenwich Sidereal Time.

    Args:
        date: UT date and time

    Returns:
        AstroDate carrying the same calendar day and the GST as time of day
    """
    t0 = _sidereal_offset(date)
    gst = _wrap_hours(t0 + SIDEREAL_RATE * date.decimal_hours())
    return AstroDate.from_date_and_hours(date.year, date.month, date.day, gst, UTC)


def gst_to_ut(date: AstroDate) -> AstroDate:
    """
    Convert Greenwich Sidereal Time to Universal Time.

    Args:
        date: Calendar day with the GST as time of day

    Returns:
        AstroDate with the UT as time of day
    """
    t0 = _wrap_hours(_sidereal_offset(date))
    elapsed = date.decimal_hours() - t0
    if elapsed < 0.0:
        elapsed += 24.0
    ut = _wrap_hours(elapsed / SIDEREAL_RATE)
    return AstroDate.from_date_and_hours(date.year, date.month, date.day, ut, UTC)


def gst_to_lst(gst: AstroDate, longitude_deg: float) -> AstroDate:
    """
    Convert Greenwich Sidereal Time to Local Sidereal Time.

    Args:
        gst: Date with GST as time of day
        longitude_deg: Observer longitude in degrees (east positive)
    """
    lst = _wrap_hours(gst.decimal_hours() + longitude_deg / 15.0)
    return AstroDate.from_date_and_hours(gst.year, gst.month, gst.day, lst, UTC)


def lst_to_gst(lst: AstroDate, longitude_deg: float) -> AstroDate:
    """
    Convert Local Sidereal Time to Greenwich Sidereal Time.

    Args:
        lst: Date with LST as time of day
        longitude_deg: Observer longitude in degrees (east positive)
    """
    gst = _wrap_hours(lst.decimal_hours() - longitude_deg / 15.0)
    return AstroDate.from_date_and_hours(lst.year, lst.month, lst.day, gst, UTC)


def lct_to_lst(lct: AstroDate, longitude: Angle) -> AstroDate:
    """Convert Local Civil Time to Local Sidereal Time (LCT -> UT -> GST -> LST)"""
    ut = lct_to_ut(lct)
    gst = ut_to_gst(ut)
    return gst_to_lst(gst, longitude.degrees)


def lst_to_lct(lst: AstroDate, longitude: Angle, tz: TimeZone) -> AstroDate:
    """Convert Local Sidereal Time to Local Civil Time (LST -> GST -> UT -> LCT)"""
    gst = lst_to_gst(lst, longitude.degrees)
    ut = gst_to_ut(gst)
    return ut_to_lct(ut, tz)


def sidereal_angle(date: AstroDate) -> Angle:
    """Time of day of a sidereal date as an hour Angle"""
    return Angle.from_hours(date.decimal_hours())
