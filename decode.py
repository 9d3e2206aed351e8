import bz2
from collections import namedtuple
import datetime
import enum
import logging

import numpy as np

from _cbook import read_source, source_name
from _package_tools import Exporter
from _tools import check_range, check_value, decode_utf8, skip, take, take_f32, take_i8, take_i16, take_i32, take_string, take_u32
from _units import concatenate, degrees, meters, precip_rate, units
from errors import DecompressionFailed, DPRError, InvalidCaptureTime, InvalidOperationalMode, Unsupported
from geomath import bin_polygons

exporter = Exporter(globals())

log = logging.getLogger(__name__)
log.addHandler(logging.StreamHandler())
log.setLevel(logging.WARNING)

# Figure 3-6 (Sheet 6) and Table V
PROD_DESC = 'product description block'
BLOCK_DIVIDER = -1
LATITUDE_RANGE = (-90000, 90000)
LONGITUDE_RANGE = (-180000, 180000)
OP_MODE_RANGE = (0, 2)
PRECIP_DETECTED_RANGE = (0, 1)

# Figure 3-6 (Sheet 7), Figure 3-15c, Figures E-1 and E-3
SYMBOLOGY = 'product symbology'
SCAN_NUMBER_RANGE = (1, 80)
RADIAL_COMPONENT_TYPE = 1
BIN_SIZE_RANGE = (0., 1000.)
# Published bound for the range to the first bin. Real products fall outside
# of it, so it is only reported, never enforced.
RANGE_TO_FIRST_BIN_RANGE = (1000., 460000.)
NUM_RADIALS_RANGE = (0, 800)

# Figure E-4
RADIAL = 'radial'
AZIMUTH_RANGE = (0., 360.)
ELEVATION_RANGE = (-1., 45.)
WIDTH_RANGE = (0., 2.)
NUM_BINS_RANGE = (0, 1840)

MESSAGE_HEADER_SIZE = 18

@exporter.export
class OperationalMode(enum.Enum):
    MAINTENANCE = 0
    CLEAN_AIR = 1
    PRECIPITATION = 2

    def __str__(self):
        return self.name.replace('_', ' ').title()

    @classmethod
    def from_code(cls, code):
        try:
            return cls(code)
        except ValueError:
            raise InvalidOperationalMode('operational mode in {}'.format(PROD_DESC), code, '{}..={}'.format(*OP_MODE_RANGE)) from None

Location = namedtuple('Location', ['longitude', 'latitude'])

ProductDescription = namedtuple('ProductDescription', [
    'location',
    'operational_mode',
    'precip_detected',
    'uncompressed_size'
])

ProductSymbology = namedtuple('ProductSymbology', [
    'range_to_first_bin',
    'bin_size',
    'scan_number',
    'capture_time',
    'radials'
])

Radial = namedtuple('Radial', [
    'azimuth',
    'elevation',
    'width',
    'precip_rates'
])

_precip_rate_fields = [
    'station_code',
    'capture_time',
    'scan_number',
    'location',
    'operational_mode',
    'precip_detected',
    'max_precip_rate',
    'bin_size',
    'range_to_first_bin',
    'radials'
]

@exporter.export
class PrecipRate(namedtuple('PrecipRate', _precip_rate_fields)):
    """Decoded Digital Instantaneous Precipitation Rate product.

    ``location`` is (longitude, latitude) in degrees, horizontal first.
    ``bin_size`` and ``range_to_first_bin`` are lengths, ``max_precip_rate``
    and each radial's ``precip_rates`` are in inches per hour, ordered by
    increasing range from the station.
    """
    __slots__ = ()

    def bins(self, skip_zeros = False):
        """Iterate over ``(ring, precip_rate)`` for every bin.

        Each ring is a tuple of 3 or 6 (longitude, latitude) vertices
        approximating the annular sector covered by the bin. Radials come out
        in file order and bins in increasing range. Nothing is cached, so each
        call recomputes the geometry.
        """
        return bin_polygons(self.location, self.bin_size, self.range_to_first_bin, self.radials, skip_zeros = skip_zeros)

    @property
    def num_bins(self):
        return sum(len(r.precip_rates) for r in self.radials)

    def __str__(self):
        lines = [
            'Station Code:        {}'.format(self.station_code),
            'Capture Time:        {:%Y-%m-%d %H:%M:%S} UTC'.format(self.capture_time),
            'Operational Mode:    {}'.format(str(self.operational_mode)),
            'Precip Detected:     {}'.format('Yes' if self.precip_detected else 'No'),
            'Scan Number:         {:d}'.format(self.scan_number),
            'Max Precip Rate:     {:.3f} in/hr'.format(self.max_precip_rate.m_as('inch_per_hour')),
            'Bin Size:            {:>3g} m'.format(self.bin_size.m_as('meter')),
            'Number of Radials:  {:>4d}'.format(len(self.radials)),
            'Range to First Bin:  {:>3g} m'.format(self.range_to_first_bin.m_as('meter'))
        ]
        return '\n'.join(lines)

def text_header(buf):
    tail = skip(buf, 7)
    station_code, tail = take(tail, 4)
    tail = skip(tail, 19)
    return decode_utf8(station_code, 'text header'), tail

def message_header(buf):
    return skip(buf, MESSAGE_HEADER_SIZE)

def product_description(buf):
    divider, tail = take_i16(buf)
    check_value(BLOCK_DIVIDER, divider, 'block divider', PROD_DESC)

    lat, tail = take_i32(tail)
    check_range(LATITUDE_RANGE, lat, 'latitude', PROD_DESC)

    lon, tail = take_i32(tail)
    check_range(LONGITUDE_RANGE, lon, 'longitude', PROD_DESC)

    tail = skip(tail, 4)

    op_mode, tail = take_i16(tail)
    op_mode = OperationalMode.from_code(op_mode)

    tail = skip(tail, 24)

    precip_detected, tail = take_i8(tail)
    check_range(PRECIP_DETECTED_RANGE, precip_detected, 'precipitation detected', PROD_DESC)

    tail = skip(tail, 43)
    uncompressed_size, tail = take_i32(tail)
    tail = skip(tail, 14)

    desc = ProductDescription(location = Location(lon / 1000., lat / 1000.), operational_mode = op_mode, precip_detected = bool(precip_detected), uncompressed_size = uncompressed_size)
    return desc, tail

def bz2_decompress(data, size_hint = None):
    return bz2.decompress(data)

def decompress_payload(buf, size_hint, decompress = bz2_decompress):
    try:
        payload = decompress(buf, size_hint)
    except DPRError:
        raise
    except Exception as e:
        raise DecompressionFailed('Failed to decompress product symbology: {}'.format(e)) from e

    if size_hint != len(payload):
        log.debug('Decompressed %d bytes, product description declared %d', len(payload), size_hint)
    return payload

def capture_time(raw):
    try:
        return datetime.datetime.fromtimestamp(raw, datetime.timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidCaptureTime(raw) from e

def radial(buf):
    azimuth, tail = take_f32(buf)
    check_range(AZIMUTH_RANGE, azimuth, 'azimuth', RADIAL)

    elevation, tail = take_f32(tail)
    check_range(ELEVATION_RANGE, elevation, 'elevation', RADIAL)

    width, tail = take_f32(tail)
    check_range(WIDTH_RANGE, width, 'width', RADIAL)

    num_bins, tail = take_i32(tail)
    check_range(NUM_BINS_RANGE, num_bins, 'num bins', RADIAL)

    _, tail = take_string(tail)  # attributes
    tail = skip(tail, 4)

    # each sample is the low half of a 4 byte slot
    raw, tail = take(tail, num_bins * 4)
    samples = np.frombuffer(raw, dtype = '>u2')[1::2]
    rates = precip_rate(samples)
    rates.magnitude.setflags(write = False)

    rad = Radial(azimuth = degrees(azimuth), elevation = degrees(elevation), width = degrees(width), precip_rates = rates)
    return rad, tail

def product_symbology(buf):
    # symbology block header, then the generic packet header
    tail = skip(buf, 16)
    tail = skip(tail, 8)

    _, tail = take_string(tail)  # name
    _, tail = take_string(tail)  # description
    tail = skip(tail, 12)
    _, tail = take_string(tail)  # radar name
    tail = skip(tail, 12)
    raw_time, tail = take_u32(tail)
    captured = capture_time(raw_time)
    tail = skip(tail, 8)

    scan_number, tail = take_i32(tail)
    check_range(SCAN_NUMBER_RANGE, scan_number, 'scan number', SYMBOLOGY)
    tail = skip(tail, 24)

    num_components, tail = take_i32(tail)
    if num_components != 1:
        raise Unsupported('Found {:d} components in {}; DPR products containing multiple components are not supported'.format(num_components, SYMBOLOGY))
    tail = skip(tail, num_components * 8)

    component_type, tail = take_i32(tail)
    check_value(RADIAL_COMPONENT_TYPE, component_type, 'radial component type', SYMBOLOGY)
    _, tail = take_string(tail)  # description

    bin_size, tail = take_f32(tail)
    check_range(BIN_SIZE_RANGE, bin_size, 'bin size', SYMBOLOGY)

    first_bin, tail = take_f32(tail)
    if not RANGE_TO_FIRST_BIN_RANGE[0] <= first_bin <= RANGE_TO_FIRST_BIN_RANGE[1]:
        log.debug('Range to first bin %g m is outside the published bounds %s', first_bin, RANGE_TO_FIRST_BIN_RANGE)
    tail = skip(tail, 8)

    num_radials, tail = take_i32(tail)
    check_range(NUM_RADIALS_RANGE, num_radials, 'num radials', SYMBOLOGY)

    radials = []
    for _ in range(num_radials):
        rad, tail = radial(tail)
        radials.append(rad)

    sym = ProductSymbology(range_to_first_bin = meters(first_bin), bin_size = meters(bin_size), scan_number = scan_number, capture_time = captured, radials = tuple(radials))
    return sym, tail

def max_precip_rate(radials):
    rates = concatenate([r.precip_rates for r in radials], dest = 'inch_per_hour')
    if not rates.magnitude.size:
        return units.Quantity(0., 'inch_per_hour')
    return units.Quantity(float(rates.magnitude.max()), 'inch_per_hour')

@exporter.export
def parse_dpr(data, decompress = None):
    """Decode a complete DPR product from its raw bytes.

    ``decompress`` is called as ``decompress(payload, size_hint)`` and must
    return the decompressed symbology block; it defaults to bzip2. Any
    malformed, truncated or unsupported input raises a `errors.DPRError`.
    """
    if decompress is None:
        decompress = bz2_decompress

    station_code, tail = text_header(data)
    tail = message_header(tail)
    desc, tail = product_description(tail)

    payload = decompress_payload(tail, desc.uncompressed_size, decompress)
    sym, tail = product_symbology(payload)
    if len(tail):
        log.debug('%s: ignoring %d bytes after the last radial', station_code, len(tail))

    return PrecipRate(station_code = station_code, capture_time = sym.capture_time, scan_number = sym.scan_number, location = desc.location, operational_mode = desc.operational_mode, precip_detected = desc.precip_detected, max_precip_rate = max_precip_rate(sym.radials), bin_size = sym.bin_size, range_to_first_bin = sym.range_to_first_bin, radials = sym.radials)

@exporter.export
def read_dpr(source, decompress = None):
    prate = parse_dpr(read_source(source), decompress = decompress)
    log.debug('%s: decoded %s scan %d with %d radials', source_name(source), prate.station_code, prate.scan_number, len(prate.radials))
    return prate

exporter.export(Location)
exporter.export(Radial)
