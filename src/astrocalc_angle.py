"""
Angle Module for Astronomical Calculations

This module provides the typed-angle layer used by every formula in the
time and coordinate modules:
- Unit-tagged angles (degrees, radians, hours) with pure scaling conversions
- Trigonometric helpers working through radians
- Normalization to [0, turn) and [-half turn, half turn)
- Sexagesimal (DMS/HMS) decomposition, formatting and parsing
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
import logging

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DEG_TO_RAD = math.pi / 180.0
DEG_TO_HRS = 1.0 / 15.0

RAD_TO_DEG = 180.0 / math.pi
RAD_TO_HRS = 12.0 / math.pi

HRS_TO_DEG = 15.0
HRS_TO_RAD = math.pi / 12.0
HRS_TO_MIN = 60.0

MIN_TO_SEC = 60.0
MIN_TO_HRS = 1.0 / 60.0
MIN_TO_DEG = 1.0 / 60.0

SEC_TO_HRS = 1.0 / 3600.0
SEC_TO_DEG = 1.0 / 3600.0

TWO_PI = 2.0 * math.pi


class AngleUnit(Enum):
    """Unit an Angle value is expressed in"""
    DEGREES = 'deg'
    RADIANS = 'rad'
    HOURS = 'hrs'


# Scale factors between every pair of units
_SCALE = {
    (AngleUnit.DEGREES, AngleUnit.DEGREES): 1.0,
    (AngleUnit.DEGREES, AngleUnit.RADIANS): DEG_TO_RAD,
    (AngleUnit.DEGREES, AngleUnit.HOURS): DEG_TO_HRS,
    (AngleUnit.RADIANS, AngleUnit.DEGREES): RAD_TO_DEG,
    (AngleUnit.RADIANS, AngleUnit.RADIANS): 1.0,
    (AngleUnit.RADIANS, AngleUnit.HOURS): RAD_TO_HRS,
    (AngleUnit.HOURS, AngleUnit.DEGREES): HRS_TO_DEG,
    (AngleUnit.HOURS, AngleUnit.RADIANS): HRS_TO_RAD,
    (AngleUnit.HOURS, AngleUnit.HOURS): 1.0,
}

# Size of a full turn in each unit
_TURN = {
    AngleUnit.DEGREES: 360.0,
    AngleUnit.RADIANS: TWO_PI,
    AngleUnit.HOURS: 24.0,
}

_SUFFIX = {
    AngleUnit.DEGREES: '°',
    AngleUnit.RADIANS: ' rad',
    AngleUnit.HOURS: 'ʰ',
}

_DMS_PATTERN = re.compile(
    r"""^\s*([+-])?\s*(\d+)\s*(?:°|d|:|\s)\s*(\d+)\s*(?:'|′|m|:|\s)\s*"""
    r"""(\d+(?:\.\d*)?)\s*(?:"|″|s)?\s*$"""
)
_HMS_PATTERN = re.compile(
    r"""^\s*([+-])?\s*(\d+)\s*(?:ʰ|h|:|\s)\s*(\d+)\s*(?:ᵐ|m|:|\s)\s*"""
    r"""(\d+(?:\.\d*)?)\s*(?:ˢ|s)?\s*$"""
)


# ============================================================================
# Sexagesimal Data Classes
# ============================================================================

def _check_sexagesimal(sign: str, whole: int, minutes: int, seconds: float):
    """Validate sign-plus-magnitude sexagesimal fields"""
    if sign not in ('+', '-'):
        raise ValueError(f"Invalid sign {sign!r}, expected '+' or '-'")
    if whole < 0:
        raise ValueError(f"Magnitude field must be non-negative, got {whole}")
    if not 0 <= minutes < 60:
        raise ValueError(f"Minutes must be in 0..59, got {minutes}")
    if not 0.0 <= seconds < 60.0:
        raise ValueError(f"Seconds must be in [0, 60), got {seconds}")


def _round_fields(whole: int, minutes: int, seconds: float) -> tuple:
    """Round seconds to an integer, carrying into minutes and the largest unit"""
    sec = int(math.floor(seconds + 0.5))
    if sec >= 60:
        sec -= 60
        minutes += 1
        if minutes >= 60:
            minutes -= 60
            whole += 1
    return whole, minutes, sec


@dataclass(frozen=True)
class DMS:
    """Degrees, arc minutes and arc seconds with a separate sign"""
    sign: str = '+'
    degrees: int = 0
    minutes: int = 0
    seconds: float = 0.0

    def __post_init__(self):
        _check_sexagesimal(self.sign, self.degrees, self.minutes, self.seconds)

    def to_string(self, show_sign: bool = True) -> str:
        """
        Format as D°MM'SS" with seconds rounded to the nearest integer.

        Args:
            show_sign: Prefix '-' for negative angles

        Returns:
            Formatted string, e.g. -0°00'01"
        """
        deg, mins, sec = _round_fields(self.degrees, self.minutes, self.seconds)
        sign = '-' if show_sign and self.sign == '-' else ''
        return f"{sign}{deg}°{mins:02d}'{sec:02d}\""

    def __str__(self):
        return self.to_string()


@dataclass(frozen=True)
class HMS:
    """Hours, minutes and seconds of time with a separate sign"""
    sign: str = '+'
    hours: int = 0
    minutes: int = 0
    seconds: float = 0.0

    def __post_init__(self):
        _check_sexagesimal(self.sign, self.hours, self.minutes, self.seconds)

    def to_string(self, show_sign: bool = True) -> str:
        """Format as HHʰMMᵐSSˢ with seconds rounded to the nearest integer"""
        hrs, mins, sec = _round_fields(self.hours, self.minutes, self.seconds)
        sign = '-' if show_sign and self.sign == '-' else ''
        return f"{sign}{hrs:02d}ʰ{mins:02d}ᵐ{sec:02d}ˢ"

    def __str__(self):
        return self.to_string()


def _split_sexagesimal(value: float) -> tuple:
    """
    Split a decimal value into sign, whole units, minutes and seconds.

    The largest unit is truncated, minutes are floored and seconds keep
    the remainder.
    """
    sign = '+'
    if value < 0.0:
        sign = '-'
        value = -value

    whole = math.trunc(value)
    minutes = math.floor((value - whole) * 60.0)
    seconds = ((value - whole) * 60.0 - minutes) * 60.0

    # Representation error can leave the remainder at exactly 60
    if seconds >= 60.0:
        seconds -= 60.0
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        whole += 1

    return sign, int(whole), int(minutes), seconds


# ============================================================================
# Angle
# ============================================================================

@dataclass(frozen=True)
class Angle:
    """
    A real-valued angle tagged with its unit.

    The value is unrestricted (negative or beyond a full turn) until
    reduce360() or reduce180() is called.
    """
    value: float
    unit: AngleUnit = AngleUnit.DEGREES

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_degrees(cls, degrees: float) -> 'Angle':
        return cls(float(degrees), AngleUnit.DEGREES)

    @classmethod
    def from_radians(cls, radians: float) -> 'Angle':
        return cls(float(radians), AngleUnit.RADIANS)

    @classmethod
    def from_hours(cls, hours: float) -> 'Angle':
        return cls(float(hours), AngleUnit.HOURS)

    @classmethod
    def from_dms(cls, dms: DMS) -> 'Angle':
        """Build a degree angle from signed degrees/minutes/seconds"""
        degrees = dms.degrees + dms.minutes * MIN_TO_DEG + dms.seconds * SEC_TO_DEG
        if dms.sign == '-':
            degrees = -degrees
        return cls.from_degrees(degrees)

    @classmethod
    def from_hms(cls, hms: HMS) -> 'Angle':
        """Build an hour angle from signed hours/minutes/seconds"""
        hours = hms.hours + hms.minutes * MIN_TO_HRS + hms.seconds * SEC_TO_HRS
        if hms.sign == '-':
            hours = -hours
        return cls.from_hours(hours)

    @classmethod
    def parse_dms(cls, text: str) -> 'Angle':
        """
        Parse a sexagesimal degree string.

        Accepts the formatted form (-12°30'15") as well as ASCII variants
        such as "12d30m15s", "12:30:15" or "12 30 15".

        Args:
            text: String to parse

        Returns:
            Angle in degrees

        Raises:
            ValueError: If the text is not a valid DMS string
        """
        match = _DMS_PATTERN.match(text)
        if match is None:
            logger.debug(f"DMS pattern did not match {text!r}")
            raise ValueError(f"Cannot parse DMS angle from {text!r}")
        sign, deg, mins, secs = match.groups()
        return cls.from_dms(DMS(sign or '+', int(deg), int(mins), float(secs)))

    @classmethod
    def parse_hms(cls, text: str) -> 'Angle':
        """
        Parse a sexagesimal hour string such as 16ʰ14ᵐ42ˢ, 16h14m42s or 16:14:42.

        Raises:
            ValueError: If the text is not a valid HMS string
        """
        match = _HMS_PATTERN.match(text)
        if match is None:
            logger.debug(f"HMS pattern did not match {text!r}")
            raise ValueError(f"Cannot parse HMS angle from {text!r}")
        sign, hrs, mins, secs = match.groups()
        return cls.from_hms(HMS(sign or '+', int(hrs), int(mins), float(secs)))

    # ------------------------------------------------------------------
    # Unit conversion
    # ------------------------------------------------------------------

    def to_unit(self, unit: AngleUnit) -> 'Angle':
        """Convert to the given unit (pure scaling)"""
        if unit is self.unit:
            return self
        return Angle(self.value * _SCALE[(self.unit, unit)], unit)

    def to_degrees(self) -> 'Angle':
        return self.to_unit(AngleUnit.DEGREES)

    def to_radians(self) -> 'Angle':
        return self.to_unit(AngleUnit.RADIANS)

    def to_hours(self) -> 'Angle':
        return self.to_unit(AngleUnit.HOURS)

    @property
    def degrees(self) -> float:
        return self.to_degrees().value

    @property
    def radians(self) -> float:
        return self.to_radians().value

    @property
    def hours(self) -> float:
        return self.to_hours().value

    # ------------------------------------------------------------------
    # Trigonometry
    # ------------------------------------------------------------------

    def sin(self) -> float:
        return math.sin(self.radians)

    def cos(self) -> float:
        return math.cos(self.radians)

    def tan(self) -> float:
        return math.tan(self.radians)

    @staticmethod
    def asin(x: float) -> 'Angle':
        return Angle.from_radians(math.asin(x))

    @staticmethod
    def acos(x: float) -> 'Angle':
        return Angle.from_radians(math.acos(x))

    @staticmethod
    def atan(x: float) -> 'Angle':
        return Angle.from_radians(math.atan(x))

    @staticmethod
    def atan2(y: float, x: float) -> 'Angle':
        return Angle.from_radians(math.atan2(y, x))

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def reduce360(self) -> 'Angle':
        """Reduce to [0, 360) degrees, [0, 2π) radians or [0, 24) hours"""
        turn = _TURN[self.unit]
        value = self.value % turn
        # Tiny negative values round up to a full turn
        if value >= turn:
            value = 0.0
        return Angle(value, self.unit)

    def reduce180(self) -> 'Angle':
        """Reduce to [-180, 180) degrees, [-π, π) radians or [-12, 12) hours"""
        turn = _TURN[self.unit]
        half = turn / 2.0
        shifted = (self.value + half) % turn
        if shifted >= turn:
            shifted = 0.0
        return Angle(shifted - half, self.unit)

    # ------------------------------------------------------------------
    # Sexagesimal
    # ------------------------------------------------------------------

    def to_dms(self) -> DMS:
        sign, deg, mins, secs = _split_sexagesimal(self.degrees)
        return DMS(sign, deg, mins, secs)

    def to_hms(self) -> HMS:
        sign, hrs, mins, secs = _split_sexagesimal(self.hours)
        return HMS(sign, hrs, mins, secs)

    def to_dms_string(self) -> str:
        return self.to_dms().to_string()

    def to_hms_string(self) -> str:
        return self.to_hms().to_string()

    def __str__(self):
        return f"{self.value:.4f}{_SUFFIX[self.unit]}"

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: 'Angle') -> 'Angle':
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.value + other.to_unit(self.unit).value, self.unit)

    def __sub__(self, other: 'Angle') -> 'Angle':
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.value - other.to_unit(self.unit).value, self.unit)

    def __neg__(self) -> 'Angle':
        return Angle(-self.value, self.unit)
