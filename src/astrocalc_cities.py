"""
Sample Locations Module

A small read-only table of capital and major cities used as named
observer sites by the command-line front end and the tests.
"""

from dataclasses import dataclass
from typing import Tuple
import logging

from astrocalc_angle import Angle
from astrocalc_coord import GeoCoord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class City:
    """Named location"""
    name: str
    country: str
    coord: GeoCoord


def _city(name: str, country: str, lat: float, lon: float) -> City:
    return City(name, country, GeoCoord(Angle.from_degrees(lat), Angle.from_degrees(lon)))


CITIES: Tuple[City, ...] = (
    _city("Washington D.C.", "United States", 38.8951, -77.0364),
    _city("London", "United Kingdom", 51.5074, -0.1278),
    _city("Paris", "France", 48.8566, 2.3522),
    _city("Berlin", "Germany", 52.52, 13.405),
    _city("Rome", "Italy", 41.9028, 12.4964),
    _city("Madrid", "Spain", 40.4168, -3.7038),
    _city("Lisbon", "Portugal", 38.7169, -9.1399),
    _city("Moscow", "Russia", 55.7558, 37.6173),
    _city("Beijing", "China", 39.9042, 116.4074),
    _city("Tokyo", "Japan", 35.6895, 139.6917),
    _city("Seoul", "South Korea", 37.5665, 126.978),
    _city("New Delhi", "India", 28.6139, 77.209),
    _city("Canberra", "Australia", -35.2809, 149.13),
    _city("Ottawa", "Canada", 45.4215, -75.6993),
    _city("Brasilia", "Brazil", -15.7939, -47.8828),
    _city("Rio de Janeiro", "Brazil", -22.9068, -43.1729),
    _city("Buenos Aires", "Argentina", -34.6037, -58.3816),
    _city("Santiago", "Chile", -33.4489, -70.6693),
    _city("Mexico City", "Mexico", 19.4326, -99.1332),
    _city("Cairo", "Egypt", 30.0444, 31.2357),
    _city("Nairobi", "Kenya", -1.2921, 36.8219),
    _city("Pretoria", "South Africa", -25.7479, 28.2293),
)


def find_city(name: str) -> City:
    """
    Look up a city by name (case-insensitive).

    Raises:
        KeyError: If the city is not in the table
    """
    wanted = name.strip().lower()
    for city in CITIES:
        if city.name.lower() == wanted:
            return city
    logger.debug(f"City {name!r} not found among {len(CITIES)} entries")
    raise KeyError(name)
