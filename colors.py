import ast
import glob
import logging
import os
import os.path

import matplotlib.colors as mcolors

TABLE_EXT = '.tbl'
COLORTABLE_DIR_ENV = 'DIPR_COLORTABLE_DIR'

DEFAULT_TABLE = 'NWSPrecipRate'

log = logging.getLogger(__name__)
log.addHandler(logging.StreamHandler())
log.setLevel(logging.WARNING)

# in/hr
PRECIP_RATE_BOUNDARIES = [0.001, 0.01, 0.05, 0.1, 0.25, 0.5, 0.75, 1., 1.5, 2., 3., 4., 6.]

_precip_rate_table = [
	(0.69, 0.93, 0.69),
	(0.47, 0.83, 0.47),
	(0.20, 0.70, 0.20),
	(0.05, 0.55, 0.05),
	(0.00, 0.40, 0.00),
	(1.00, 1.00, 0.40),
	(1.00, 0.80, 0.00),
	(1.00, 0.55, 0.00),
	(1.00, 0.20, 0.00),
	(0.80, 0.00, 0.00),
	(0.60, 0.00, 0.40),
	(0.85, 0.45, 0.90)
]

def _parse_line(line):
	if hasattr(line, 'decode'):
		line = line.decode('ascii')

	line = line.strip()
	if not line or line.startswith('#'):
		return None
	if line.startswith('('):
		line = ast.literal_eval(line)
	return mcolors.to_rgb(line)

def read_colortable(fobj):
	"""Read one color per line, either an RGB tuple or a matplotlib color name."""
	table = []
	for lineno, line in enumerate(fobj, 1):
		try:
			color = _parse_line(line)
		except (SyntaxError, ValueError) as e:
			raise RuntimeError('Malformed colortable at line {:d}: {}'.format(lineno, e)) from e
		if color is not None:
			table.append(color)
	if not table:
		raise RuntimeError('Colortable has no colors')
	return table

class ColortableRegistry(dict):
	def scan_dir(self, path):
		for fname in sorted(glob.glob(os.path.join(path, '*' + TABLE_EXT))):
			name = os.path.splitext(os.path.basename(fname))[0]
			try:
				with open(fname, 'r') as fobj:
					self.add_colortable(fobj, name)
			except (OSError, RuntimeError) as e:
				log.warning('Skipping colortable %s: %s', fname, e)
				continue
			log.debug('Added colortable %s from %s', name, fname)

	def add_colortable(self, fobj, name):
		self[name] = read_colortable(fobj)

	def get_with_boundaries(self, name, boundaries):
		cmap = self.get_colortable(name)
		if len(boundaries) != cmap.N + 1:
			raise ValueError('Colortable {} has {:d} colors but {:d} boundaries were given'.format(name, cmap.N, len(boundaries)))
		return mcolors.BoundaryNorm(boundaries, cmap.N), cmap

	def get_colortable(self, name):
		cmap = mcolors.ListedColormap(self[name], name = name)
		cmap.set_under('none')
		return cmap

	def get_precip_rate(self, name = DEFAULT_TABLE):
		return self.get_with_boundaries(name, PRECIP_RATE_BOUNDARIES)

registry = ColortableRegistry()
registry[DEFAULT_TABLE] = _precip_rate_table
if os.environ.get(COLORTABLE_DIR_ENV):
	registry.scan_dir(os.environ[COLORTABLE_DIR_ENV])
