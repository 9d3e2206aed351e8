import numpy as np
from matplotlib.collections import PolyCollection

import colors

def bin_collection(prate, name = colors.DEFAULT_TABLE, skip_zeros = True, **kwargs):
    rings = []
    values = []
    for ring, rate in prate.bins(skip_zeros = skip_zeros):
        rings.append(ring)
        values.append(rate.m_as('inch_per_hour'))

    norm, cmap = colors.registry.get_precip_rate(name)
    coll = PolyCollection(rings, cmap = cmap, norm = norm, **kwargs)
    coll.set_array(np.array(values))
    return coll

def plot_precip_rate(prate, ax = None, name = colors.DEFAULT_TABLE, skip_zeros = True):
    if ax is None:
        import matplotlib.pyplot as plt
        _, ax = plt.subplots(1, 1, figsize = (8, 8))

    coll = bin_collection(prate, name = name, skip_zeros = skip_zeros, edgecolors = 'face', linewidths = 0)
    ax.add_collection(coll)
    ax.plot(prate.location.longitude, prate.location.latitude, 'k+')
    ax.autoscale_view()
    ax.set_aspect(1. / np.cos(np.deg2rad(prate.location.latitude)), 'datalim')
    ax.set_title('{} Precip Rate {:%Y-%m-%d %H:%M} UTC'.format(prate.station_code, prate.capture_time))
    ax.figure.colorbar(coll, ax = ax, label = 'in/hr')
    return ax
