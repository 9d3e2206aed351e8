import argparse
from contextlib import contextmanager
import logging
import sys

from _cbook import source_name
from decode import read_dpr
from errors import DPRError
import gis

log = logging.getLogger(__name__)
log.addHandler(logging.StreamHandler())
log.setLevel(logging.WARNING)

_project_loggers = ('decode', 'geomath', 'gis', 'colors', __name__)

@contextmanager
def open_output(path):
    # callers decode first, so a failed decode never truncates OUT
    if path is None or path == '-':
        yield sys.stdout
    else:
        with open(path, 'w') as fobj:
            yield fobj

def info(args):
    prate = read_dpr(args.input)
    with open_output(args.output) as fobj:
        print(str(prate), file = fobj)

def to_geojson(args):
    prate = read_dpr(args.input)
    with open_output(args.output) as fobj:
        gis.dump_geojson(prate, fobj, skip_zeros = args.skip_zeros)
        fobj.write('\n')

def plot(args):
    import matplotlib
    if args.save:
        matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    from plots import plot_precip_rate

    prate = read_dpr(args.input)
    ax = plot_precip_rate(prate, name = args.colortable, skip_zeros = not args.keep_zeros)
    if args.save:
        ax.figure.savefig(args.save)
    else:
        plt.show()

def build_parser():
    parser = argparse.ArgumentParser(prog = 'dipr', description = 'Convert the NWS Digital Instantaneous Precipitation Rate product to common vector GIS formats')
    parser.add_argument('--verbose', '-v', action = 'store_true', help = 'Log decoding details')
    subparsers = parser.add_subparsers(dest = 'command', required = True)

    output = argparse.ArgumentParser(add_help = False)
    output.add_argument('input', nargs = '?', default = '-', help = 'Path to the DIPR product; if omitted or -, read from stdin')
    output.add_argument('--output', '-o', metavar = 'OUT', help = 'File to write the result to; if omitted or -, write to stdout')

    sub = subparsers.add_parser('info', parents = [output], help = 'Print a summary of the product')
    sub.set_defaults(func = info)

    sub = subparsers.add_parser('to-geojson', parents = [output], help = 'Convert the product to a GeoJSON FeatureCollection')
    sub.add_argument('--skip-zeros', action = 'store_true', help = 'Leave out bins with zero precipitation')
    sub.set_defaults(func = to_geojson)

    sub = subparsers.add_parser('plot', help = 'Draw the product with matplotlib')
    sub.add_argument('input', nargs = '?', default = '-', help = 'Path to the DIPR product; if omitted or -, read from stdin')
    sub.add_argument('--save', '-s', help = 'Save the figure to this file instead of showing it')
    sub.add_argument('--colortable', default = 'NWSPrecipRate', help = 'Name of the colortable to use')
    sub.add_argument('--keep-zeros', action = 'store_true', help = 'Draw bins with zero precipitation too')
    sub.set_defaults(func = plot)

    return parser

def main(argv = None):
    args = build_parser().parse_args(argv)

    if args.verbose:
        for name in _project_loggers:
            logging.getLogger(name).setLevel(logging.DEBUG)
    log.debug('%s: %s', args.command, source_name(args.input))

    try:
        args.func(args)
    except DPRError as e:
        print('{}: {}'.format(source_name(args.input), e), file = sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
