#!/usr/bin/env python3
"""
Tests for astrocalc_coord.py
Frame conversions, epochs, precession and rise/set times.
Exercises marked "Lawrence" come from Celestial Calculations (2018), chapter 5.
"""

import sys
import os

import pytest

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from astrocalc_angle import Angle, DMS, HMS
from astrocalc_time import AstroDate, TimeZone, BRT, EST, EDT, PST, lct_to_lst
from astrocalc_coord import (
    GeoCoord, HorCoord, HaDec, RaDec, EclipticCoord, GalacticCoord,
    EpochParams, Epoch, EPOCH_B1950, EPOCH_J2000, select_epoch,
    ObjectNeverRisesError, rise_and_set,
)
from astrocalc_cities import CITIES, find_city


def dms(sign, deg, mins, secs):
    return Angle.from_dms(DMS(sign, deg, mins, secs))


def hms(sign, hrs, mins, secs):
    return Angle.from_hms(HMS(sign, hrs, mins, secs))


def lst_angle(lct, lon):
    """Local sidereal time of a civil date as an hour Angle"""
    lst = lct_to_lst(lct, lon)
    return Angle.from_hours(lst.decimal_hours())


# ============================================================================
# Geographic coordinates
# ============================================================================

def test_distance_berlin_paris():
    berlin = GeoCoord(Angle.from_degrees(52.52), Angle.from_degrees(13.405))
    paris = GeoCoord(Angle.from_degrees(48.8566), Angle.from_degrees(2.3522))

    assert berlin.distance_to(paris) == pytest.approx(878000.0, abs=1000.0)
    assert paris.distance_to(berlin) == pytest.approx(berlin.distance_to(paris))
    assert berlin.distance_to(berlin) == 0.0


def test_geo_coord_string():
    london = GeoCoord(Angle.from_degrees(51.5074), Angle.from_degrees(-0.1278))
    assert str(london) == "51°30'27\" N, 0°07'40\" W"

    canberra = GeoCoord(Angle.from_degrees(-35.2809), Angle.from_degrees(149.13))
    assert str(canberra) == "35°16'51\" S, 149°07'48\" E"


# ============================================================================
# Horizontal and hour-angle frames
# ============================================================================

def test_horizontal_to_ha_dec():
    hor = HorCoord(Angle.from_degrees(115.0), Angle.from_degrees(40.0))
    equ = hor.to_ha_dec(Angle.from_degrees(38.0))

    assert equ.ha.to_hms_string() == "21ʰ01ᵐ54ˢ"
    assert equ.dec.to_dms_string() == "8°05'03\""


def test_ha_dec_to_horizontal():
    equ = HaDec(hms('+', 16, 29, 45.0), dms('-', 0, 30, 30.0))
    hor = equ.to_horizontal(Angle.from_degrees(25.0))

    assert hor.az.to_dms_string() == "80°31'31\""
    assert hor.alt.to_dms_string() == "-20°34'40\""


def test_horizontal_round_trip():
    lat = Angle.from_degrees(-33.0)
    for ha_hours, dec_deg in ((1.5, 10.0), (14.0, -60.0), (22.25, 45.0)):
        equ = HaDec(Angle.from_hours(ha_hours), Angle.from_degrees(dec_deg))
        back = equ.to_horizontal(lat).to_ha_dec(lat)

        assert back.ha.hours == pytest.approx(ha_hours, abs=1e-9)
        assert back.dec.degrees == pytest.approx(dec_deg, abs=1e-9)


def test_zenith_at_pole_does_not_fail():
    pole = Angle.from_degrees(90.0)
    hor = HaDec(Angle.from_hours(3.0), Angle.from_degrees(90.0)).to_horizontal(pole)

    assert hor.alt.degrees == pytest.approx(90.0)
    assert 0.0 <= hor.az.degrees < 360.0


def test_ra_dec_to_horizontal_sirius_from_rio():
    sirius = RaDec(hms('+', 6, 45, 8.9), dms('-', 16, 42, 58.0))
    rio = GeoCoord(dms('-', 22, 54, 40.0), dms('-', 43, 12, 20.0))
    lct = AstroDate(1998, 8, 10, 23, 10, 0, BRT)

    hor = sirius.to_horizontal(rio.lat, lst_angle(lct, rio.lon))

    assert hor.az.to_dms_string() == "143°33'46\""
    assert hor.alt.to_dms_string() == "-42°11'16\""


def test_lawrence_5_1_horizon_coordinates():
    loc = GeoCoord(dms('+', 45, 0, 0.0), dms('-', 100, 0, 0.0))
    lct = AstroDate(2015, 12, 1, 9, 0, 0, PST)
    star = RaDec(hms('+', 6, 0, 0.0), dms('-', 60, 0, 0.0))

    hor = star.to_horizontal(loc.lat, lst_angle(lct, loc.lon))

    assert hor.alt.to_dms_string() == "-59°41'57\""
    assert hor.az.to_dms_string() == "224°15'27\""


def test_lawrence_5_2_equatorial_coordinates():
    loc = GeoCoord(Angle.from_degrees(38.25), Angle.from_degrees(-78.3))
    lct = AstroDate(2015, 6, 6, 21, 0, 0, EDT)
    hor = HorCoord(Angle.from_degrees(90.0), Angle.from_degrees(45.0))

    equ = hor.to_ra_dec(loc.lat, lst_angle(lct, loc.lon))

    assert equ.ra.to_hms_string() == "16ʰ14ᵐ42ˢ"
    assert equ.dec.to_dms_string() == "25°57'41\""


def test_ha_and_ra_are_complementary():
    lst = Angle.from_hours(2.0)
    obj = RaDec(Angle.from_hours(20.5), Angle.from_degrees(12.0))

    ha_dec = obj.to_ha_dec(lst)
    assert ha_dec.ha.hours == pytest.approx(5.5)
    assert ha_dec.to_ra_dec(lst).ra.hours == pytest.approx(20.5)


# ============================================================================
# Ecliptic and galactic frames
# ============================================================================

def test_ra_dec_to_ecliptic():
    equ = RaDec(hms('+', 12, 18, 47.5), dms('-', 0, 43, 35.5))
    ecl = equ.to_ecliptic()

    assert ecl.lat.to_dms_string() == "1°12'00\""
    assert ecl.lon.to_dms_string() == "184°36'00\""


def test_ecliptic_to_ra_dec():
    ecl = EclipticCoord(dms('+', 1, 12, 0.0), dms('+', 184, 36, 0.0))
    equ = ecl.to_ra_dec(EPOCH_J2000)

    assert equ.ra.to_hms_string() == "12ʰ18ᵐ47ˢ"
    assert equ.dec.to_dms_string() == "-0°43'36\""


def test_ecliptic_default_epoch_is_j2000():
    equ = RaDec(Angle.from_hours(3.0), Angle.from_degrees(20.0))
    assert equ.to_ecliptic() == equ.to_ecliptic(EPOCH_J2000)
    assert equ.to_ecliptic(EPOCH_B1950) != equ.to_ecliptic(EPOCH_J2000)


def test_ra_dec_to_galactic_b1950():
    equ = RaDec(hms('+', 10, 12, 43.0), dms('+', 40, 48, 33.0))
    gal = equ.to_galactic(EPOCH_B1950)

    assert gal.lat.to_dms_string() == "55°19'55\""
    assert gal.lon.to_dms_string() == "180°00'01\""


def test_galactic_to_ra_dec_per_epoch():
    gal = GalacticCoord(dms('+', 55, 20, 0.0), Angle.from_degrees(180.0))

    b1950 = gal.to_ra_dec(EPOCH_B1950)
    assert b1950.ra.to_hms_string() == "10ʰ12ᵐ43ˢ"
    assert b1950.dec.to_dms_string() == "40°48'33\""

    j2000 = gal.to_ra_dec(EPOCH_J2000)
    assert j2000.ra.to_hms_string() == "10ʰ15ᵐ43ˢ"
    assert j2000.dec.to_dms_string() == "40°33'35\""


def test_galactic_round_trip():
    for ra_hours, dec_deg in ((0.5, -30.0), (17.76, -28.94), (23.9, 60.0)):
        equ = RaDec(Angle.from_hours(ra_hours), Angle.from_degrees(dec_deg))
        back = equ.to_galactic(EPOCH_J2000).to_ra_dec(EPOCH_J2000)

        assert back.ra.hours == pytest.approx(ra_hours, abs=1e-9)
        assert back.dec.degrees == pytest.approx(dec_deg, abs=1e-9)


def test_select_epoch():
    custom = EpochParams("J2050.0", Angle.from_degrees(23.4330),
                         Angle.from_degrees(192.86), Angle.from_degrees(27.13),
                         Angle.from_degrees(32.93))

    assert select_epoch(Epoch.B1950) is EPOCH_B1950
    assert select_epoch(Epoch.J2000) is EPOCH_J2000
    assert select_epoch(Epoch.CUSTOM, custom) is custom
    assert custom.sin_eps == pytest.approx(custom.obliquity.sin())

    with pytest.raises(ValueError):
        select_epoch(Epoch.CUSTOM)


# ============================================================================
# Precession and separation
# ============================================================================

def test_precession_of_galactic_pole():
    pole_b1950 = RaDec(hms('+', 12, 49, 0.0), dms('+', 27, 24, 0.0))
    pole_j2000 = pole_b1950.adjust_precession(1950.0, 2000.0)

    assert pole_j2000.ra.to_hms_string() == "12ʰ51ᵐ26ˢ"
    assert pole_j2000.dec.to_dms_string() == "27°07'41\""


def test_precession_keeps_ra_in_range():
    near_zero = RaDec(Angle.from_hours(23.999), Angle.from_degrees(10.0))
    moved = near_zero.adjust_precession(2000.0, 2100.0)

    assert 0.0 <= moved.ra.hours < 24.0
    assert moved.ra.hours < 1.0


def test_separation():
    a = RaDec(Angle.from_hours(0.0), Angle.from_degrees(0.0))
    b = RaDec(Angle.from_hours(6.0), Angle.from_degrees(0.0))
    c = RaDec(Angle.from_hours(12.0), Angle.from_degrees(90.0))

    assert a.separation(b).degrees == pytest.approx(90.0)
    assert a.separation(c).degrees == pytest.approx(90.0)
    assert a.separation(a).degrees == pytest.approx(0.0, abs=1e-6)


# ============================================================================
# Rise and set
# ============================================================================

def test_rise_and_set_betelgeuse():
    loc = GeoCoord(dms('+', 38, 0, 0.0), dms('-', 78, 0, 0.0))
    date = AstroDate(2016, 1, 21, 12, 0, 0, EST)
    betelgeuse = RaDec(hms('+', 5, 55, 0.0), dms('+', 7, 30, 0.0))

    rs = rise_and_set(loc, date, betelgeuse)

    assert str(rs.rise_time) == "2016-01-21 15:40:46 (-05:00)"
    assert rs.rise_az.to_dms_string() == "80°27'56\""
    assert str(rs.set_time) == "2016-01-22 04:29:51 (-05:00)"
    assert rs.set_az.to_dms_string() == "279°32'04\""


def test_rise_and_set_azimuths_stay_below_full_turn():
    # Due north on the equator: rising azimuth 0° mirrors to 0°, not 360°
    equator = GeoCoord(Angle.from_degrees(0.0), Angle.from_degrees(0.0))
    pole_star = RaDec(Angle.from_hours(0.0), Angle.from_degrees(90.0))

    rs = rise_and_set(equator, AstroDate(2020, 3, 20), pole_star)

    assert rs.rise_az.degrees == pytest.approx(0.0, abs=1e-9)
    assert 0.0 <= rs.set_az.degrees < 360.0
    assert rs.set_az.degrees == pytest.approx(0.0, abs=1e-9)


def test_lawrence_5_4_rise_and_set():
    loc = GeoCoord(Angle.from_degrees(38.25), Angle.from_degrees(-78.3))
    date = AstroDate(2015, 6, 6, 21, 0, 0, EDT)
    obj = RaDec(hms('+', 16, 14, 42.0), dms('+', 25, 57, 41.0))

    rs = rise_and_set(loc, date, obj)

    assert rs.rise_time.to_time_string() == "16:57:49"
    assert rs.set_time.to_time_string() == "07:59:51"
    assert rs.set_time.to_jd() > rs.rise_time.to_jd()
    assert rs.rise_az.degrees == pytest.approx(56.12, abs=0.01)
    assert rs.rise_az.degrees + rs.set_az.degrees == pytest.approx(360.0)


def test_lawrence_5_3_never_rises():
    loc = GeoCoord(dms('+', 45, 0, 0.0), dms('-', 100, 0, 0.0))
    date = AstroDate(2015, 12, 1, 9, 0, 0, PST)
    star = RaDec(hms('+', 6, 0, 0.0), dms('-', 60, 0, 0.0))

    with pytest.raises(ObjectNeverRisesError):
        rise_and_set(loc, date, star)


def test_circumpolar_star_never_sets():
    loc = GeoCoord(Angle.from_degrees(60.0), Angle.from_degrees(10.0))
    date = AstroDate(2020, 3, 1, tz=TimeZone.from_hours(1))
    polaris = RaDec(hms('+', 2, 31, 49.0), dms('+', 89, 15, 51.0))

    with pytest.raises(ObjectNeverRisesError):
        rise_and_set(loc, date, polaris)


# ============================================================================
# Sample locations
# ============================================================================

def test_find_city():
    london = find_city("london")
    assert london.country == "United Kingdom"
    assert str(london.coord) == "51°30'27\" N, 0°07'40\" W"

    with pytest.raises(KeyError):
        find_city("Atlantis")


def test_city_table_is_valid():
    names = [city.name for city in CITIES]
    assert len(names) == len(set(names))
    for city in CITIES:
        assert -90.0 <= city.coord.lat.degrees <= 90.0
        assert -180.0 <= city.coord.lon.degrees <= 180.0
