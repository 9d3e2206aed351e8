import numpy as np
import pint

units = pint.UnitRegistry()

units.define('inch_per_hour = inch / hour = in_per_hr')

def concatenate(arrs, axis = 0, dest = None):
    if dest is None:
        dest = 'dimensionless'
        for a in arrs:
            if hasattr(a, 'units'):
                dest = a.units
                break

    data = []
    for a in arrs:
        if hasattr(a, 'to'):
            a = a.to(dest).magnitude
        data.append(np.atleast_1d(a))

    if not data:
        return units.Quantity(np.empty((0,)), dest)

    return units.Quantity(np.concatenate(data, axis = axis), dest)

def degrees(val):
    return units.Quantity(float(val), 'degree')

def meters(val):
    return units.Quantity(float(val), 'meter')

def precip_rate(raw):
    # one thousandth of an inch of rain accumulated over an hour
    return units.Quantity(np.asarray(raw, dtype = np.float64) / 1000., 'inch_per_hour')
