"""
Astronomical Calculation Module using Astropy

This module recomputes the core astrocalc quantities with the astropy
package so the hand-written engines can be cross-checked:
- Julian Day and Greenwich mean sidereal time
- Equatorial to horizontal conversion
- Equatorial to ecliptic and galactic conversion
- Rigorous precession between equinoxes

Inputs and outputs are plain floats (hours for right ascension and time,
degrees for everything else) so results compare directly with the
Angle-based API. Astropy uses the IAU 2006 obliquity and a full precession
model, so agreement is expected only to a few arcseconds.
"""

import numpy as np
from datetime import datetime
from typing import Tuple
import logging
import warnings

from astropy import units as u
from astropy.time import Time
from astropy.coordinates import (
    SkyCoord, Angle,
    FK4, FK5, Galactic, BarycentricMeanEcliptic
)
from astropy.utils.exceptions import AstropyWarning

# Suppress astropy warnings for cleaner output
warnings.filterwarnings('ignore', category=AstropyWarning)

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

B1950_YEAR = 1950.0
J2000_YEAR = 2000.0
EPOCH_TOLERANCE = 0.01  # years


def _equinox(year: float) -> Time:
    """Besselian equinox for 1950.0, Julian otherwise"""
    if abs(year - B1950_YEAR) < EPOCH_TOLERANCE:
        return Time(year, format='byear')
    return Time(year, format='jyear')


def _equatorial_frame(year: float):
    """FK4 for B1950.0 coordinates, FK5 for everything else"""
    if abs(year - B1950_YEAR) < EPOCH_TOLERANCE:
        return FK4(equinox=_equinox(year))
    return FK5(equinox=_equinox(year))


# ============================================================================
# Time Conversion Functions
# ============================================================================

def julian_day(year: int, month: int, day: int,
               hour: int = 0, minute: int = 0, second: float = 0.0) -> float:
    """
    Calculate the Julian Day of a Gregorian date and time using astropy.

    Args:
        year: Year (1 or later)
        month: Month (1-12)
        day: Day of month
        hour: Hour (0-23)
        minute: Minute (0-59)
        second: Second (0-59)

    Returns:
        Julian Day
    """
    t = Time({'year': year, 'month': month, 'day': day,
              'hour': hour, 'minute': minute, 'second': second},
             format='ymdhms', scale='ut1')
    return float(t.jd)


def datetime_from_jd(jd: float) -> datetime:
    """Convert a Julian Day to a naive datetime using astropy"""
    t = Time(jd, format='jd', scale='ut1')
    return t.datetime


def gmst_hours(jd: float) -> float:
    """
    Calculate Greenwich mean sidereal time using astropy.

    The IAU 1982 model depends on UT1 alone, so no Earth orientation
    tables are needed.

    Args:
        jd: Julian Day (UT1)

    Returns:
        GMST in hours [0, 24)
    """
    t = Time(jd, format='jd', scale='ut1')
    return t.sidereal_time('mean', 'greenwich', model='IAU1982').hour


# ============================================================================
# Coordinate Transformation Functions
# ============================================================================

def horizontal_from_ra_dec(ra: float, dec: float, lst_hours: float,
                           latitude: float) -> Tuple[float, float]:
    """
    Calculate altitude and azimuth of an equatorial position.

    Args:
        ra: Right ascension in hours
        dec: Declination in degrees
        lst_hours: Local sidereal time in hours
        latitude: Observer latitude in degrees

    Returns:
        Tuple of (altitude, azimuth) in degrees, azimuth from north through east
    """
    ha = Angle((lst_hours - ra) * u.hourangle).wrap_at(12 * u.hourangle)
    ha_rad = ha.radian
    dec_rad = np.radians(dec)
    lat_rad = np.radians(latitude)

    # Unit vector in the hour-angle frame: x to the meridian, y to the west
    x = np.cos(dec_rad) * np.cos(ha_rad)
    y = np.cos(dec_rad) * np.sin(ha_rad)
    z = np.sin(dec_rad)

    sin_alt = np.clip(z * np.sin(lat_rad) + x * np.cos(lat_rad), -1.0, 1.0)
    north = z * np.cos(lat_rad) - x * np.sin(lat_rad)
    east = -y

    alt = np.degrees(np.arcsin(sin_alt))
    az = Angle(np.arctan2(east, north) * u.rad).wrap_at(360 * u.deg).deg

    return float(alt), float(az)


def ecliptic_from_ra_dec(ra: float, dec: float,
                         epoch: float = J2000_YEAR) -> Tuple[float, float]:
    """
    Convert equatorial to mean ecliptic coordinates using astropy.

    Args:
        ra: Right ascension in hours
        dec: Declination in degrees
        epoch: Equinox of the coordinates as a year

    Returns:
        Tuple of (latitude, longitude) in degrees
    """
    coord_eq = SkyCoord(ra=ra*u.hour, dec=dec*u.deg, frame=_equatorial_frame(epoch))
    coord_ecl = coord_eq.transform_to(BarycentricMeanEcliptic(equinox=_equinox(epoch)))

    return coord_ecl.lat.deg, coord_ecl.lon.deg


def galactic_from_ra_dec(ra: float, dec: float,
                         epoch: float = J2000_YEAR) -> Tuple[float, float]:
    """
    Convert equatorial to galactic coordinates using astropy.

    Args:
        ra: Right ascension in hours
        dec: Declination in degrees
        epoch: Equinox of the coordinates (1950.0 selects FK4)

    Returns:
        Tuple of (b, l) galactic latitude and longitude in degrees
    """
    if abs(epoch - J2000_YEAR) < EPOCH_TOLERANCE:
        # ICRS is within milliarcseconds of FK5 J2000
        coord_eq = SkyCoord(ra=ra*u.hour, dec=dec*u.deg, frame='icrs')
    else:
        coord_eq = SkyCoord(ra=ra*u.hour, dec=dec*u.deg, frame=_equatorial_frame(epoch))

    coord_gal = coord_eq.transform_to(Galactic())

    return coord_gal.b.deg, coord_gal.l.deg


def precess(ra: float, dec: float, from_epoch: float, to_epoch: float) -> Tuple[float, float]:
    """
    Precess FK5 coordinates from one equinox to another using astropy.

    Args:
        ra: Right ascension in hours
        dec: Declination in degrees
        from_epoch: Equinox of the input as a Julian year
        to_epoch: Target equinox as a Julian year

    Returns:
        Tuple of (ra, dec) at the target equinox
    """
    coord_from = SkyCoord(ra=ra*u.hour, dec=dec*u.deg,
                          frame=FK5(equinox=Time(from_epoch, format='jyear')))
    coord_to = coord_from.transform_to(FK5(equinox=Time(to_epoch, format='jyear')))

    logger.debug(f"Precessed {ra:.6f}h {dec:.6f}° from {from_epoch} to {to_epoch}: "
                 f"{coord_to.ra.hour:.6f}h {coord_to.dec.deg:.6f}°")

    return coord_to.ra.hour, coord_to.dec.deg


def angular_separation(ra1: float, dec1: float, ra2: float, dec2: float) -> float:
    """
    Angular separation between two equatorial positions.

    Args:
        ra1, dec1: First position (hours, degrees)
        ra2, dec2: Second position (hours, degrees)

    Returns:
        Separation in degrees
    """
    c1 = SkyCoord(ra=ra1*u.hour, dec=dec1*u.deg, frame='icrs')
    c2 = SkyCoord(ra=ra2*u.hour, dec=dec2*u.deg, frame='icrs')
    return c1.separation(c2).deg
