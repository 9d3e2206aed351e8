import bz2
import struct

import pytest

TEXT_HEADER_TAIL = b' 171612\r\r\nDPRGYX\r\r\n'

def xdr_string(text):
    raw = text.encode('utf-8') if isinstance(text, str) else text
    return struct.pack('>I', len(raw)) + raw + b'\x00' * ((4 - len(raw) % 4) % 4)

def text_header(station = 'KGYX'):
    return b'SDUS51 ' + station.encode('utf-8') + TEXT_HEADER_TAIL

def message_header():
    return struct.pack('>hhiihhh', 176, 20407, 61000, 0, 0, 0, 3)

def product_description(lat = 43891, lon = -70257, op_mode = 2, precip_detected = 1, uncompressed_size = 0, divider = -1):
    return struct.pack('>hii4xh24xb43xi14x', divider, lat, lon, op_mode, precip_detected, uncompressed_size)

def radial(azimuth = 0.5, elevation = 0.5, width = 1., samples = (), attributes = 'attr', num_bins = None):
    if num_bins is None:
        num_bins = len(samples)
    out = struct.pack('>fffi', azimuth, elevation, width, num_bins)
    out += xdr_string(attributes) + b'\x00' * 4
    for sample in samples:
        # junk in the unused half of each slot
        out += struct.pack('>HH', 0xBEEF, sample)
    return out

def symbology(radials = (), capture_time = 1700000000, scan_number = 12, num_components = 1, component_type = 1, bin_size = 250., first_bin = 125., num_radials = None):
    if num_radials is None:
        num_radials = len(radials)
    out = b'\xff\xff\x00\x01' + b'\x00' * 20
    out += xdr_string('DPR') + xdr_string('Digital Instantaneous Precipitation Rate') + b'\x00' * 12
    out += xdr_string('KGYX') + b'\x00' * 12
    out += struct.pack('>I', capture_time) + b'\x00' * 8
    out += struct.pack('>i', scan_number) + b'\x00' * 24
    out += struct.pack('>i', num_components) + b'\x00' * (8 * max(num_components, 0))
    out += struct.pack('>i', component_type) + xdr_string('Radial Component')
    out += struct.pack('>ff', bin_size, first_bin) + b'\x00' * 8
    out += struct.pack('>i', num_radials)
    return out + b''.join(radials)

def dpr(station = 'KGYX', sym = None, compress = True, **desc):
    if sym is None:
        sym = symbology()
    desc.setdefault('uncompressed_size', len(sym))
    payload = bz2.compress(sym) if compress else sym
    return text_header(station) + message_header() + product_description(**desc) + payload

def identity(payload, size_hint):
    return bytes(payload)

@pytest.fixture
def sample_radials():
    return [
        radial(azimuth = 0.5, samples = [0, 10, 250]),
        radial(azimuth = 1.5, samples = [1000, 0, 65535]),
        radial(azimuth = 2.5, samples = [])
    ]

@pytest.fixture
def sample_dpr(sample_radials):
    return dpr(sym = symbology(radials = sample_radials))
