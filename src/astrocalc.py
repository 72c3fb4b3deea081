"""
Astronomical Calculator Command-Line Front End

Prints time scale and coordinate conversions computed by the astrocalc
engines:
- jd: civil date <-> Julian Day
- unix: civil date <-> Unix time
- sidereal: local civil time -> UT, GST, LST
- riseset: rise and set times of an object
- convert: equatorial position -> horizontal, ecliptic, galactic, precessed
- easter: date of Easter Sunday
"""

import sys
import argparse
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from astrocalc_angle import Angle
from astrocalc_time import (
    AstroDate, TimeZone, TimeZoneError, UTC,
    easter_date, lct_to_ut, ut_to_gst, gst_to_lst, lct_to_lst,
)
from astrocalc_coord import (
    Epoch, GeoCoord, RaDec, ObjectNeverRisesError,
    rise_and_set, select_epoch,
)
from astrocalc_cities import find_city

logger = logging.getLogger(__name__)


# ============================================================================
# Constants and Configuration
# ============================================================================

class Config:
    """Configuration constants for the calculator"""

    # Observer defaults
    DEFAULT_SITE = "Washington D.C."
    DEFAULT_TZ_HOURS = -5
    DEFAULT_TZ_MINUTES = 0
    DEFAULT_DST = False

    # Coordinate defaults
    DEFAULT_EPOCH = Epoch.J2000.name
    PRECESSION_TARGET = 2000.0

    # Logging
    LOG_LEVEL = logging.INFO
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class SiteParams:
    """Observer site parameters"""
    site_name: str = Config.DEFAULT_SITE
    latitude: float = 0.0    # North latitude in decimal degrees
    longitude: float = 0.0   # East longitude in decimal degrees
    timezone: TimeZone = field(default=UTC)

    @property
    def location(self) -> GeoCoord:
        return GeoCoord(Angle.from_degrees(self.latitude), Angle.from_degrees(self.longitude))


def load_site_params(site_name: str = Config.DEFAULT_SITE,
                     timezone: Optional[TimeZone] = None) -> SiteParams:
    """
    Load site parameters for a named city.

    Args:
        site_name: City name from the sample location table
        timezone: Time zone of the site (Config default when omitted)

    Returns:
        SiteParams

    Raises:
        KeyError: If the city is unknown
    """
    city = find_city(site_name)
    if timezone is None:
        timezone = TimeZone.from_hours(Config.DEFAULT_TZ_HOURS, Config.DEFAULT_TZ_MINUTES,
                                       Config.DEFAULT_DST)

    site = SiteParams(
        site_name=city.name,
        latitude=city.coord.lat.degrees,
        longitude=city.coord.lon.degrees,
        timezone=timezone,
    )
    logger.info(f"Loaded site parameters for {city.name}, {city.country}")
    return site


# ============================================================================
# Argument Parsing
# ============================================================================

def parse_date(text: str) -> Tuple[int, int, int]:
    """Parse YYYY-MM-DD (a leading '-' gives a negative year)"""
    sign = 1
    if text.startswith('-'):
        sign = -1
        text = text[1:]
    try:
        year, month, day = (int(part) for part in text.split('-'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date {text!r}, expected YYYY-MM-DD")
    return sign * year, month, day


def parse_time(text: str) -> Tuple[int, int, int]:
    """Parse HH:MM[:SS]"""
    parts = text.split(':')
    try:
        values = [int(part) for part in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid time {text!r}, expected HH:MM:SS")
    if len(values) == 2:
        values.append(0)
    if len(values) != 3:
        raise argparse.ArgumentTypeError(f"Invalid time {text!r}, expected HH:MM:SS")
    hour, minute, second = values
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise argparse.ArgumentTypeError(f"Time out of range: {text!r}")
    return hour, minute, second


def parse_ra(text: str) -> Angle:
    """Right ascension as sexagesimal hours or decimal hours"""
    try:
        return Angle.from_hours(float(text))
    except ValueError:
        pass
    try:
        return Angle.parse_hms(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_dec(text: str) -> Angle:
    """Declination as sexagesimal degrees or decimal degrees"""
    try:
        return Angle.from_degrees(float(text))
    except ValueError:
        pass
    try:
        return Angle.parse_dms(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='astrocalc',
                                     description='Astronomical time and coordinate calculator')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--epoch', choices=[Epoch.B1950.name, Epoch.J2000.name],
                        default=Config.DEFAULT_EPOCH,
                        help='Epoch for ecliptic and galactic conversions')

    # Observer options shared by the commands that need a site
    site_parser = argparse.ArgumentParser(add_help=False)
    site_parser.add_argument('--site', default=Config.DEFAULT_SITE, help='City name')
    site_parser.add_argument('--lat', type=float, help='Latitude in degrees (overrides --site)')
    site_parser.add_argument('--lon', type=float,
                             help='East longitude in degrees (overrides --site)')
    site_parser.add_argument('--tz', type=int, default=Config.DEFAULT_TZ_HOURS,
                             help='Time zone offset in hours')
    site_parser.add_argument('--tz-minutes', type=int, default=Config.DEFAULT_TZ_MINUTES,
                             help='Time zone offset minutes (multiple of 15)')
    site_parser.add_argument('--dst', action='store_true', help='Daylight saving time in effect')

    commands = parser.add_subparsers(dest='command', required=True)

    jd = commands.add_parser('jd', help='Civil date <-> Julian Day')
    jd.add_argument('date', nargs='?', type=parse_date, help='Date YYYY-MM-DD')
    jd.add_argument('time', nargs='?', type=parse_time, default=(0, 0, 0), help='Time HH:MM:SS')
    jd.add_argument('--jd', type=float, dest='julian_day', help='Julian Day to convert to a date')

    unix = commands.add_parser('unix', help='Civil date <-> Unix time')
    unix.add_argument('date', nargs='?', type=parse_date, help='Date YYYY-MM-DD (UT)')
    unix.add_argument('time', nargs='?', type=parse_time, default=(0, 0, 0), help='Time HH:MM:SS')
    unix.add_argument('--ts', type=int, help='Unix time to convert to a date')

    sidereal = commands.add_parser('sidereal', parents=[site_parser],
                                   help='Local civil time -> UT, GST and LST')
    sidereal.add_argument('date', type=parse_date, help='Date YYYY-MM-DD')
    sidereal.add_argument('time', type=parse_time, help='Local civil time HH:MM:SS')

    riseset = commands.add_parser('riseset', parents=[site_parser],
                                  help='Rise and set times of an object')
    riseset.add_argument('date', type=parse_date, help='Date YYYY-MM-DD')
    riseset.add_argument('--ra', type=parse_ra, required=True, help='Right ascension')
    riseset.add_argument('--dec', type=parse_dec, required=True, help='Declination')

    convert = commands.add_parser('convert', parents=[site_parser],
                                  help='Convert an equatorial position')
    convert.add_argument('--ra', type=parse_ra, required=True, help='Right ascension')
    convert.add_argument('--dec', type=parse_dec, required=True, help='Declination')
    convert.add_argument('--date', type=parse_date, help='Date YYYY-MM-DD for horizontal coordinates')
    convert.add_argument('--time', type=parse_time, default=(0, 0, 0),
                         help='Local civil time HH:MM:SS for horizontal coordinates')
    convert.add_argument('--precess-from', type=float,
                         help=f'Precess from this epoch to {Config.PRECESSION_TARGET}')

    easter = commands.add_parser('easter', help='Date of Easter Sunday')
    easter.add_argument('year', type=int, help='Gregorian year')

    return parser


def site_from_args(args: argparse.Namespace) -> SiteParams:
    """Observer site from --site, optionally overridden by --lat/--lon"""
    tz = TimeZone.from_hours(args.tz, args.tz_minutes, args.dst)
    if args.lat is not None and args.lon is not None:
        return SiteParams("custom", args.lat, args.lon, tz)
    site = load_site_params(args.site, tz)
    if args.lat is not None:
        site.latitude = args.lat
    if args.lon is not None:
        site.longitude = args.lon
    return site


# ============================================================================
# Commands
# ============================================================================

def run_jd(args: argparse.Namespace) -> None:
    if args.julian_day is not None:
        date = AstroDate.from_jd(args.julian_day)
        print(f"JD {args.julian_day:.6f} = {date.to_datetime_string()} UT")
        return
    if args.date is None:
        raise ValueError("Either a date or --jd is required")
    date = AstroDate(*args.date, *args.time)
    print(f"{date.to_datetime_string()} UT = JD {date.to_jd():.6f}")
    print(f"Day of week: {date.day_of_week()}, day of year: {date.days_into_year()}")


def run_unix(args: argparse.Namespace) -> None:
    if args.ts is not None:
        date = AstroDate.from_unix_time(args.ts)
        print(f"Unix {args.ts} = {date.to_datetime_string()} UT")
        return
    if args.date is None:
        raise ValueError("Either a date or --ts is required")
    date = AstroDate(*args.date, *args.time)
    print(f"{date.to_datetime_string()} UT = Unix {date.to_unix_time()}")


def run_sidereal(args: argparse.Namespace) -> None:
    site = site_from_args(args)
    lct = AstroDate(*args.date, *args.time, tz=site.timezone)
    ut = lct_to_ut(lct)
    gst = ut_to_gst(ut)
    lst = gst_to_lst(gst, site.longitude)

    print(f"Site: {site.site_name} ({site.location})")
    print(f"LCT: {lct}")
    print(f"UT:  {ut.to_datetime_string()}")
    print(f"GST: {gst.to_time_string()}")
    print(f"LST: {lst.to_time_string()}")


def run_riseset(args: argparse.Namespace) -> None:
    site = site_from_args(args)
    date = AstroDate(*args.date, tz=site.timezone)
    obj = RaDec(args.ra, args.dec)

    result = rise_and_set(site.location, date, obj)

    print(f"Site: {site.site_name} ({site.location})")
    print(f"Object: RA {obj.ra.to_hms_string()}, Dec {obj.dec.to_dms_string()}")
    print(f"Rise: {result.rise_time}  azimuth {result.rise_az.to_dms_string()}")
    print(f"Set:  {result.set_time}  azimuth {result.set_az.to_dms_string()}")


def run_convert(args: argparse.Namespace) -> None:
    epoch = select_epoch(Epoch[args.epoch])
    obj = RaDec(args.ra, args.dec)

    print(f"RA/Dec:   {obj.ra.to_hms_string()} {obj.dec.to_dms_string()}")

    ecliptic = obj.to_ecliptic(epoch)
    print(f"Ecliptic ({epoch.name}): lat {ecliptic.lat.to_dms_string()} "
          f"lon {ecliptic.lon.to_dms_string()}")

    galactic = obj.to_galactic(epoch)
    print(f"Galactic ({epoch.name}): lat {galactic.lat.to_dms_string()} "
          f"lon {galactic.lon.to_dms_string()}")

    if args.precess_from is not None:
        precessed = obj.adjust_precession(args.precess_from, Config.PRECESSION_TARGET)
        print(f"Precessed {args.precess_from} -> {Config.PRECESSION_TARGET}: "
              f"{precessed.ra.to_hms_string()} {precessed.dec.to_dms_string()}")

    if args.date is not None:
        site = site_from_args(args)
        lct = AstroDate(*args.date, *args.time, tz=site.timezone)
        lst = lct_to_lst(lct, site.location.lon)
        horizontal = obj.to_horizontal(site.location.lat, Angle.from_hours(lst.decimal_hours()))
        print(f"Horizontal at {site.site_name}, {lct}: "
              f"az {horizontal.az.to_dms_string()} alt {horizontal.alt.to_dms_string()}")


def run_easter(args: argparse.Namespace) -> None:
    print(f"Easter {args.year}: {easter_date(args.year).to_date_string()}")


COMMANDS = {
    'jd': run_jd,
    'unix': run_unix,
    'sidereal': run_sidereal,
    'riseset': run_riseset,
    'convert': run_convert,
    'easter': run_easter,
}


# ============================================================================
# Main Entry Point
# ============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=Config.LOG_LEVEL, format=Config.LOG_FORMAT)

    # Set verbosity
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        COMMANDS[args.command](args)
    except ObjectNeverRisesError as e:
        logger.error(str(e))
        return 1
    except TimeZoneError as e:
        logger.error(f"Invalid time zone: {e}")
        return 1
    except KeyError as e:
        logger.error(f"Unknown site: {e}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
