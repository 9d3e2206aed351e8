"""Spherical geometry for placing radar bins on the map.

Angles handed to `destination` are radians; everything else takes degrees
for angles and meters for distances. Points are (longitude, latitude).
"""
import numpy as np
from pyproj import Geod
from scipy.constants import kilo

from _package_tools import Exporter
from _units import units

exporter = Exporter(globals())

with exporter:
    # mean Earth radius
    EARTH_RADIUS = 6371.0088 * kilo

    # below this |y / x| the longitude offset is its own arctangent to 0.01%
    SMALL_ANGLE_LIMIT = 0.0173

    # degrees
    COINCIDENT_TOLERANCE = 1e-9

# same sphere as the forward projection
_GEOD = Geod(a = EARTH_RADIUS, b = EARTH_RADIUS)

@exporter.export
def normalize_longitude(lon):
    return 180. - np.mod(180. - lon, 360.)

@exporter.export
def destination(origin_lat_sin, origin_lat_cos, origin_lon, bearing, distance):
    """Forward geodesic on a sphere.

    Travel ``distance`` meters from the origin along ``bearing`` (radians,
    clockwise from north). The origin is passed as the sine and cosine of its
    latitude plus its longitude in radians so they can be computed once per
    scan. Returns (latitude, longitude) in degrees; works elementwise on
    arrays.
    """
    delta = np.asarray(distance, dtype = np.float64) / EARTH_RADIUS
    bearing = np.asarray(bearing, dtype = np.float64)

    sin_lat = origin_lat_sin * np.cos(delta) + origin_lat_cos * np.sin(delta) * np.cos(bearing)
    lat = np.arcsin(np.clip(sin_lat, -1., 1.))

    y = np.sin(bearing) * np.sin(delta) * origin_lat_cos
    x = np.cos(delta) - origin_lat_sin * np.sin(lat)
    with np.errstate(divide = 'ignore', invalid = 'ignore'):
        ratio = y / x
    small = (x > 0) & (np.abs(ratio) < SMALL_ANGLE_LIMIT)
    lon = origin_lon + np.where(small, ratio, np.arctan2(y, x))

    return np.rad2deg(lat), normalize_longitude(np.rad2deg(lon))

def _origin(location):
    lat = np.deg2rad(location[1])
    return np.sin(lat), np.cos(lat), np.deg2rad(location[0])

@exporter.export
def point_at(origin, bearing, distance):
    lat, lon = destination(*_origin(origin), np.deg2rad(bearing), distance)
    return float(lon), float(lat)

@exporter.export
def distance(start, end):
    """Great-circle distance in meters between two (lon, lat) points."""
    _, _, dist = _GEOD.inv(float(start[0]), float(start[1]), float(end[0]), float(end[1]))
    return float(dist)

def _coincident(a, b):
    return abs(a[0] - b[0]) <= COINCIDENT_TOLERANCE and abs(a[1] - b[1]) <= COINCIDENT_TOLERANCE

def _edge_points(origin, bearings, ranges):
    lat, lon = destination(*origin, bearings, ranges)
    return np.stack([lon, lat], axis = -1).tolist()

@exporter.export
def bin_polygons(location, bin_size, range_to_first_bin, radials, skip_zeros = False):
    """Yield ``(ring, precip_rate)`` for each bin of each radial.

    Bins are bounded by circle sectors; here each becomes a ring through the
    inner and outer boundary along the center, left and right bearings of its
    radial. When the inner boundary collapses to a point the ring is the
    triangle (center-inner, right-outer, left-outer).
    """
    origin = _origin(location)
    gate = bin_size.m_as('meter')
    first = range_to_first_bin.m_as('meter')
    rate_units = units.inch_per_hour

    for rad in radials:
        rates = rad.precip_rates.m_as('inch_per_hour')
        if not len(rates):
            continue

        center = rad.azimuth.m_as('degree')
        half_width = rad.width.m_as('degree') / 2.
        # center, left, right
        bearings = np.deg2rad([center, center - half_width, center + half_width])[:, np.newaxis]

        index = np.arange(len(rates), dtype = np.float64)
        inner = np.maximum(first + gate * (index - 0.5), 0.)
        outer = first + gate * (index + 0.5)

        center_in, left_in, right_in = _edge_points(origin, bearings, inner)
        center_out, left_out, right_out = _edge_points(origin, bearings, outer)

        for i, rate in enumerate(rates):
            if skip_zeros and rate == 0.:
                continue

            c_in = tuple(center_in[i])
            if _coincident(c_in, left_in[i]) or _coincident(c_in, right_in[i]):
                ring = (c_in, tuple(right_out[i]), tuple(left_out[i]))
            else:
                ring = (c_in, tuple(right_in[i]), tuple(right_out[i]), tuple(center_out[i]), tuple(left_out[i]), tuple(left_in[i]))

            yield ring, units.Quantity(float(rate), rate_units)
