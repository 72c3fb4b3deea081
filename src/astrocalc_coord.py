"""
Coordinate Transformation Module

This module provides the coordinate engine:
- Geographic, Horizontal, Hour-Angle/Declination, Right-Ascension/Declination,
  Ecliptic and Galactic coordinate value types
- Spherical-trigonometry conversions between those frames
- Epoch parameters (B1950.0, J2000.0, custom) passed explicitly to the
  ecliptic and galactic conversions
- First-order precession correction
- Rise/set time solver

References:
    Lawrence, J.L. (2018). Celestial Calculations, chapters 4 and 5.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging

from astrocalc_angle import Angle, DMS, HMS
from astrocalc_time import AstroDate, lst_to_lct

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

EARTH_RADIUS_M = 6371000.0          # Mean Earth radius in meters
PRECESSION_REFERENCE_YEAR = 1900.0


class ObjectNeverRisesError(Exception):
    """The object never crosses the horizon for the observer."""


def _clamp_unit(x: float) -> float:
    """Clamp a sine/cosine value into [-1, 1] against rounding error"""
    if x > 1.0:
        return 1.0
    if x < -1.0:
        return -1.0
    return x


# ============================================================================
# Epoch Parameters
# ============================================================================

class Epoch(Enum):
    """Epoch selector for the ecliptic and galactic constants"""
    B1950 = 'B1950.0'
    J2000 = 'J2000.0'
    CUSTOM = 'custom'


@dataclass(frozen=True)
class EpochParams:
    """
    Orientation constants of an epoch.

    obliquity is the mean obliquity of the ecliptic, pole_ra/pole_dec the
    position of the north galactic pole and lon0 the galactic longitude
    offset.
    """
    name: str
    obliquity: Angle
    pole_ra: Angle
    pole_dec: Angle
    lon0: Angle
    sin_eps: float = field(init=False, repr=False, compare=False)
    cos_eps: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'sin_eps', self.obliquity.sin())
        object.__setattr__(self, 'cos_eps', self.obliquity.cos())


EPOCH_B1950 = EpochParams(
    name='B1950.0',
    obliquity=Angle.from_degrees(23.45229444),
    pole_ra=Angle.from_degrees(192.25),
    pole_dec=Angle.from_degrees(27.4),
    lon0=Angle.from_degrees(33.0),
)

EPOCH_J2000 = EpochParams(
    name='J2000.0',
    obliquity=Angle.from_degrees(23.43929111),
    pole_ra=Angle.from_hms(HMS('+', 12, 51, 26.36)),
    pole_dec=Angle.from_dms(DMS('+', 27, 7, 40.90)),
    lon0=Angle.from_degrees(32.9319),
)


def select_epoch(epoch: Epoch, custom: Optional[EpochParams] = None) -> EpochParams:
    """
    Return the constants for an epoch selector.

    Args:
        epoch: B1950, J2000 or CUSTOM
        custom: Parameters to use with Epoch.CUSTOM

    Returns:
        EpochParams

    Raises:
        ValueError: If CUSTOM is selected without parameters
    """
    if epoch is Epoch.B1950:
        return EPOCH_B1950
    if epoch is Epoch.J2000:
        return EPOCH_J2000
    if custom is None:
        raise ValueError("Custom epoch selected without parameters")
    return custom


# ============================================================================
# Coordinate Data Classes
# ============================================================================

@dataclass(frozen=True)
class GeoCoord:
    """Geographic position: latitude [-90°, +90°], longitude [-180°, +180°] east positive"""
    lat: Angle
    lon: Angle

    def distance_to(self, other: 'GeoCoord') -> float:
        """
        Great-circle distance to another position (haversine formula).

        Returns:
            Distance in meters
        """
        lat1 = self.lat.radians
        lon1 = self.lon.radians
        lat2 = other.lat.radians
        lon2 = other.lon.radians

        sin_dlat = math.sin((lat2 - lat1) / 2.0)
        sin_dlon = math.sin((lon2 - lon1) / 2.0)

        a = sin_dlat * sin_dlat + math.cos(lat1) * math.cos(lat2) * sin_dlon * sin_dlon
        c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
        return EARTH_RADIUS_M * c

    def __str__(self):
        lat_dms = self.lat.to_dms()
        lon_dms = self.lon.to_dms()
        lat_hemisphere = 'S' if lat_dms.sign == '-' else 'N'
        lon_hemisphere = 'W' if lon_dms.sign == '-' else 'E'
        return (f"{lat_dms.to_string(show_sign=False)} {lat_hemisphere}, "
                f"{lon_dms.to_string(show_sign=False)} {lon_hemisphere}")


@dataclass(frozen=True)
class HorCoord:
    """Horizontal coordinates: azimuth [0°, 360°) from north through east, altitude [-90°, +90°]"""
    az: Angle
    alt: Angle

    def to_ha_dec(self, lat: Angle) -> 'HaDec':
        """
        Convert to hour angle and declination.

        Args:
            lat: Observer latitude

        Returns:
            HaDec with the hour angle in [0h, 24h)
        """
        sin_az = self.az.sin()
        sin_alt = self.alt.sin()
        cos_alt = self.alt.cos()
        sin_lat = lat.sin()
        cos_lat = lat.cos()

        sin_dec = _clamp_unit(sin_alt * sin_lat + cos_alt * cos_lat * self.az.cos())
        dec = Angle.asin(sin_dec)

        denominator = cos_lat * dec.cos()
        if abs(denominator) < 1e-12:
            # Observer at a pole or object at a celestial pole
            cos_ha = 1.0
        else:
            cos_ha = _clamp_unit((sin_alt - sin_lat * sin_dec) / denominator)
        ha = Angle.acos(cos_ha).to_hours()

        # acos only covers [0h, 12h]; an eastern azimuth means a negative hour angle
        if sin_az > 0.0:
            ha = Angle.from_hours(24.0 - ha.value).reduce360()

        return HaDec(ha, dec.to_degrees())

    def to_ra_dec(self, lat: Angle, lst: Angle) -> 'RaDec':
        """Convert to right ascension and declination for the given local sidereal time"""
        return self.to_ha_dec(lat).to_ra_dec(lst)


@dataclass(frozen=True)
class HaDec:
    """Equatorial coordinates: hour angle [0h, 24h), declination [-90°, +90°]"""
    ha: Angle
    dec: Angle

    def to_horizontal(self, lat: Angle) -> HorCoord:
        """
        Convert to horizontal coordinates.

        Args:
            lat: Observer latitude

        Returns:
            HorCoord with the azimuth in [0°, 360°)
        """
        sin_dec = self.dec.sin()
        cos_dec = self.dec.cos()
        sin_lat = lat.sin()
        cos_lat = lat.cos()

        sin_alt = _clamp_unit(sin_dec * sin_lat + cos_dec * cos_lat * self.ha.cos())
        alt = Angle.asin(sin_alt)

        denominator = cos_lat * alt.cos()
        if abs(denominator) < 1e-12:
            # Object at the zenith or observer at a pole
            cos_az = 1.0
        else:
            cos_az = _clamp_unit((sin_dec - sin_alt * sin_lat) / denominator)
        az = Angle.acos(cos_az).to_degrees()

        # acos only covers [0°, 180°]; west of the meridian the azimuth is mirrored
        if self.ha.sin() > 0.0:
            az = Angle.from_degrees(360.0 - az.value).reduce360()

        return HorCoord(az, alt.to_degrees())

    def to_ra_dec(self, lst: Angle) -> 'RaDec':
        """RA = LST - HA (mod 24h)"""
        ra = Angle.from_hours(lst.hours - self.ha.hours).reduce360()
        return RaDec(ra, self.dec)


@dataclass(frozen=True)
class RaDec:
    """Equatorial coordinates: right ascension [0h, 24h), declination [-90°, +90°]"""
    ra: Angle
    dec: Angle

    def to_ha_dec(self, lst: Angle) -> HaDec:
        """HA = LST - RA (mod 24h)"""
        ha = Angle.from_hours(lst.hours - self.ra.hours).reduce360()
        return HaDec(ha, self.dec)

    def to_horizontal(self, lat: Angle, lst: Angle) -> HorCoord:
        """
        Convert to horizontal coordinates.

        Args:
            lat: Observer latitude
            lst: Local sidereal time as an hour angle

        Returns:
            HorCoord
        """
        return self.to_ha_dec(lst).to_horizontal(lat)

    def to_ecliptic(self, epoch: EpochParams = EPOCH_J2000) -> 'EclipticCoord':
        """
        Convert to ecliptic coordinates.

            sin β = sin δ cos ε - cos δ sin ε sin α
            tan λ = (sin α cos ε + tan δ sin ε) / cos α

        Args:
            epoch: Epoch constants providing the obliquity ε

        Returns:
            EclipticCoord with the longitude in [0°, 360°)
        """
        sin_dec = self.dec.sin()
        cos_dec = self.dec.cos()
        sin_ra = self.ra.sin()

        sin_lat = _clamp_unit(sin_dec * epoch.cos_eps - cos_dec * epoch.sin_eps * sin_ra)
        lat = Angle.asin(sin_lat).to_degrees()

        y = sin_ra * epoch.cos_eps + self.dec.tan() * epoch.sin_eps
        x = self.ra.cos()
        lon = Angle.atan2(y, x).to_degrees().reduce360()

        return EclipticCoord(lat, lon)

    def to_galactic(self, epoch: EpochParams = EPOCH_J2000) -> 'GalacticCoord':
        """
        Convert to galactic coordinates.

            sin b = cos δ cos δ0 cos(α - α0) + sin δ sin δ0
            l = atan2(sin δ - sin b sin δ0, cos δ sin(α - α0) cos δ0) + l0

        Args:
            epoch: Epoch constants providing the galactic pole and l0

        Returns:
            GalacticCoord with the longitude in [0°, 360°)
        """
        sin_dec = self.dec.sin()
        cos_dec = self.dec.cos()
        sin_dec0 = epoch.pole_dec.sin()
        cos_dec0 = epoch.pole_dec.cos()

        ra = Angle.from_hours(self.ra.hours - epoch.pole_ra.hours)

        sin_lat = _clamp_unit(cos_dec * cos_dec0 * ra.cos() + sin_dec * sin_dec0)
        lat = Angle.asin(sin_lat).to_degrees()

        y = sin_dec - sin_lat * sin_dec0
        x = cos_dec * ra.sin() * cos_dec0
        lon = Angle.from_degrees(Angle.atan2(y, x).degrees + epoch.lon0.degrees).reduce360()

        return GalacticCoord(lat, lon)

    def adjust_precession(self, from_epoch: float, to_epoch: float) -> 'RaDec':
        """
        Correct the position for precession between two epochs.

        A first-order correction with rates evaluated at the target epoch's
        centuries since 1900.0. The RA term grows with sin(α)·tan(δ), so the
        result loses precision close to the celestial poles.

        Args:
            from_epoch: Epoch of the coordinates as a decimal year (e.g. 1950.0)
            to_epoch: Target epoch as a decimal year (e.g. 2000.0)

        Returns:
            Precessed RaDec
        """
        years = to_epoch - from_epoch
        t = (to_epoch - PRECESSION_REFERENCE_YEAR) / 100.0
        m = 3.07234 + 0.00186 * t           # seconds of RA per year
        n_arcsec = 20.0468 - 0.0085 * t     # arcseconds of Dec per year
        n_sec = n_arcsec / 15.0

        delta_ra = (m + n_sec * self.ra.sin() * self.dec.tan()) * years
        delta_dec = n_arcsec * self.ra.cos() * years

        ra = Angle.from_hours(self.ra.hours + delta_ra / 3600.0).reduce360()
        dec = Angle.from_degrees(self.dec.degrees + delta_dec / 3600.0)
        return RaDec(ra, dec)

    def separation(self, other: 'RaDec') -> Angle:
        """Angular distance to another position (spherical law of cosines)"""
        cos_sep = (self.dec.sin() * other.dec.sin() +
                   self.dec.cos() * other.dec.cos() *
                   math.cos(self.ra.radians - other.ra.radians))
        return Angle.acos(_clamp_unit(cos_sep)).to_degrees()


@dataclass(frozen=True)
class EclipticCoord:
    """Ecliptic coordinates: latitude [-90°, +90°], longitude [0°, 360°)"""
    lat: Angle
    lon: Angle

    def to_ra_dec(self, epoch: EpochParams = EPOCH_J2000) -> RaDec:
        """
        Convert to right ascension and declination.

            sin δ = sin β cos ε + cos β sin ε sin λ
            tan α = (sin λ cos ε - tan β sin ε) / cos λ
        """
        sin_lat = self.lat.sin()
        cos_lat = self.lat.cos()
        sin_lon = self.lon.sin()

        sin_dec = _clamp_unit(sin_lat * epoch.cos_eps + cos_lat * epoch.sin_eps * sin_lon)
        dec = Angle.asin(sin_dec).to_degrees()

        y = sin_lon * epoch.cos_eps - self.lat.tan() * epoch.sin_eps
        x = self.lon.cos()
        ra = Angle.atan2(y, x).to_hours().reduce360()

        return RaDec(ra, dec)


@dataclass(frozen=True)
class GalacticCoord:
    """Galactic coordinates: latitude [-90°, +90°], longitude [0°, 360°)"""
    lat: Angle
    lon: Angle

    def to_ra_dec(self, epoch: EpochParams = EPOCH_J2000) -> RaDec:
        """
        Convert to right ascension and declination.

            sin δ = cos b cos δ0 sin(l - l0) + sin b sin δ0
            α = atan2(cos b cos(l - l0), sin b cos δ0 - cos b sin δ0 sin(l - l0)) + α0
        """
        lon = Angle.from_degrees(self.lon.degrees - epoch.lon0.degrees)
        sin_lat = self.lat.sin()
        cos_lat = self.lat.cos()
        sin_dec0 = epoch.pole_dec.sin()
        cos_dec0 = epoch.pole_dec.cos()
        sin_lon = lon.sin()

        sin_dec = _clamp_unit(cos_lat * cos_dec0 * sin_lon + sin_lat * sin_dec0)
        dec = Angle.asin(sin_dec).to_degrees()

        y = cos_lat * lon.cos()
        x = sin_lat * cos_dec0 - cos_lat * sin_dec0 * sin_lon
        ra = Angle.atan2(y, x).to_hours().reduce360()
        ra = Angle.from_hours(ra.value + epoch.pole_ra.hours).reduce360()

        return RaDec(ra, dec)


# ============================================================================
# Rise/Set Time Calculations
# ============================================================================

@dataclass(frozen=True)
class RiseAndSet:
    """Rise and set times (LCT) and azimuths of an object"""
    rise_time: AstroDate
    rise_az: Angle
    set_time: AstroDate
    set_az: Angle


def rise_and_set(loc: GeoCoord, date: AstroDate, obj: RaDec) -> RiseAndSet:
    """
    Calculate rise and set times of an object for an observer.

    The hour angle at the horizon follows from cos(H) = -tan(φ) tan(δ). The
    rise and set sidereal times RA ∓ H are taken on the given date and
    converted LST -> GST -> UT -> LCT in the date's time zone.

    Args:
        loc: Observer position
        date: Local civil date (its time zone is used for the results)
        obj: Object position

    Returns:
        RiseAndSet

    Raises:
        ObjectNeverRisesError: If the object is circumpolar or never visible
    """
    cos_lat = loc.lat.cos()
    az_cos = obj.dec.sin() / cos_lat
    h1 = loc.lat.tan() * obj.dec.tan()

    if not -1.0 <= az_cos <= 1.0 or not -1.0 <= h1 <= 1.0:
        raise ObjectNeverRisesError(
            f"Object at RA {obj.ra.to_hms_string()}, Dec {obj.dec.to_dms_string()} "
            f"never rises or sets at latitude {loc.lat.to_dms_string()}")

    ha_horizon = Angle.acos(-h1).hours
    ra_hours = obj.ra.hours

    rise_az = Angle.acos(az_cos).to_degrees()
    rise_lst = 24.0 + ra_hours - ha_horizon
    if rise_lst >= 24.0:
        rise_lst -= 24.0
    rise_lst = Angle.from_hours(rise_lst).reduce360().value

    set_az = Angle.from_degrees(360.0 - rise_az.value).reduce360()
    set_lst = ra_hours + ha_horizon
    if set_lst >= 24.0:
        set_lst -= 24.0
    set_lst = Angle.from_hours(set_lst).reduce360().value

    logger.debug(f"Horizon hour angle {ha_horizon:.6f}h, "
                 f"rise LST {rise_lst:.6f}h, set LST {set_lst:.6f}h")

    rise_date = AstroDate.from_date_and_hours(date.year, date.month, date.day,
                                              rise_lst, date.tz)
    rise_time = lst_to_lct(rise_date, loc.lon, date.tz)

    set_date = AstroDate.from_date_and_hours(date.year, date.month, date.day,
                                             set_lst, date.tz)
    set_time = lst_to_lct(set_date, loc.lon, date.tz)

    # Setting before rising means the object sets after midnight
    if set_time.to_jd() < rise_time.to_jd():
        set_time = set_time.next_day()

    return RiseAndSet(rise_time, rise_az, set_time, set_az)
