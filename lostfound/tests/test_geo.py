import math
import pytest

from lostfound.services.geo import EARTH_RADIUS_KM, bounding_box, distance_km, within_radius

BEIRUT = (33.8938, 35.5018)
TRIPOLI = (34.4361, 35.8497)

POINTS = [
    BEIRUT,
    TRIPOLI,
    (0.0, 0.0),
    (89.9999, 179.9999),
    (-45.5, -170.25),
    (51.5074, -0.1278),
]

@pytest.mark.parametrize("p", POINTS)
@pytest.mark.parametrize("q", POINTS)
def test_distance_is_symmetric(p, q):
    """Distance does not depend on argument order"""
    assert distance_km(p[0], p[1], q[0], q[1]) == distance_km(q[0], q[1], p[0], p[1])

@pytest.mark.parametrize("p", POINTS)
def test_distance_to_self_is_zero(p):
    assert distance_km(p[0], p[1], p[0], p[1]) == 0.0

def test_beirut_tripoli_distance():
    """The two scenario points lie between 10 and 100 km apart"""
    distance = distance_km(BEIRUT[0], BEIRUT[1], TRIPOLI[0], TRIPOLI[1])
    assert 60 < distance < 80

def test_antipodal_points_do_not_raise():
    """Half the circumference, no math domain error"""
    distance = distance_km(0.0, 0.0, 0.0, 180.0)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

    distance = distance_km(90.0, 0.0, -90.0, 0.0)
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM)

def test_within_radius():
    assert within_radius(BEIRUT, TRIPOLI, 100)
    assert not within_radius(BEIRUT, TRIPOLI, 10)
    assert within_radius(BEIRUT, BEIRUT, 0.001)

def test_point_without_coordinates_is_never_within_radius():
    """Missing coordinates are neither distance 0 nor infinity"""
    assert not within_radius(BEIRUT, (None, None), 20000)
    assert not within_radius(BEIRUT, (33.9, None), 20000)
    assert not within_radius(BEIRUT, (None, 35.5), 20000)

def test_bounding_box_contains_circle():
    """Points on the circle's extremes fall inside the prefilter box"""
    box = bounding_box(BEIRUT, 100)
    assert box.min_lat < TRIPOLI[0] < box.max_lat
    assert box.min_lon < TRIPOLI[1] < box.max_lon

    # due north, exactly at the radius
    north = BEIRUT[0] + math.degrees(100 / EARTH_RADIUS_KM)
    assert box.min_lat <= north <= box.max_lat

def test_bounding_box_drops_longitude_near_pole():
    box = bounding_box((89.5, 10.0), 200)
    assert box.min_lon is None and box.max_lon is None
    assert box.max_lat == 90.0

def test_bounding_box_drops_longitude_across_antimeridian():
    box = bounding_box((0.0, 179.9), 50)
    assert box.min_lon is None and box.max_lon is None
    assert box.min_lat < 0 < box.max_lat
