import json
import logging

from _package_tools import Exporter

exporter = Exporter(globals())

log = logging.getLogger(__name__)
log.addHandler(logging.StreamHandler())
log.setLevel(logging.WARNING)

PRECIP_RATE_PROPERTY = 'precipRate'

@exporter.export
def bin_feature(ring, precip_rate):
    coords = [list(pt) for pt in ring]
    coords.append(list(ring[0]))
    return {
        'type': 'Feature',
        'geometry': {
            'type': 'Polygon',
            'coordinates': [coords]
        },
        'properties': {
            PRECIP_RATE_PROPERTY: precip_rate.m_as('inch_per_hour')
        }
    }

@exporter.export
def bin_features(prate, skip_zeros = False):
    for ring, rate in prate.bins(skip_zeros = skip_zeros):
        yield bin_feature(ring, rate)

@exporter.export
def feature_collection(prate, skip_zeros = False):
    features = list(bin_features(prate, skip_zeros = skip_zeros))
    log.debug('%s: %d of %d bins converted to features', prate.station_code, len(features), prate.num_bins)
    return {
        'type': 'FeatureCollection',
        'features': features
    }

@exporter.export
def dump_geojson(prate, fobj, skip_zeros = False):
    json.dump(feature_collection(prate, skip_zeros = skip_zeros), fobj)
