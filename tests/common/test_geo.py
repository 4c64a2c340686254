from src.checkin_system.checkin_system.common.geo import Coordinate, distance_meters


def test_distance_to_self_is_zero():
    p = Coordinate(lat=51.5007, lng=-0.1246)
    assert distance_meters(p, p) == 0


def test_distance_is_symmetric():
    a = Coordinate(lat=40.7128, lng=-74.0060)
    b = Coordinate(lat=34.0522, lng=-118.2437)
    assert distance_meters(a, b) == distance_meters(b, a)


def test_distance_grows_with_separation():
    origin = Coordinate(lat=10.0, lng=20.0)
    distances = [distance_meters(origin, Coordinate(lat=10.0 + d, lng=20.0)) for d in (0.001, 0.01, 0.1, 1.0, 10.0)]
    assert distances == sorted(distances)
    assert len(set(distances)) == len(distances)


def test_one_degree_of_latitude_is_about_111km():
    d = distance_meters(Coordinate(lat=0.0, lng=0.0), Coordinate(lat=1.0, lng=0.0))
    assert 111_190 < d < 111_200


def test_known_city_pair():
    # New York -> Los Angeles is roughly 3936 km on a 6371 km sphere.
    d = distance_meters(Coordinate(lat=40.7128, lng=-74.0060), Coordinate(lat=34.0522, lng=-118.2437))
    assert 3_930_000 < d < 3_945_000
