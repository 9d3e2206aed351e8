import io

import matplotlib
matplotlib.use('Agg')
from matplotlib.figure import Figure
import pytest

import colors
from colors import ColortableRegistry, read_colortable
from decode import parse_dpr
from plots import bin_collection, plot_precip_rate


def test_read_colortable():
    table = read_colortable(io.StringIO('# comment\n(1, 0, 0)\n\n(0.0, 0.5, 1.0)\n'))
    assert table == [(1., 0., 0.), (0., 0.5, 1.)]


def test_read_colortable_bytes():
    assert read_colortable([b'(0, 1, 0)\n']) == [(0., 1., 0.)]


def test_read_colortable_named_colors():
    assert read_colortable(io.StringIO('red\nblue\n')) == [(1., 0., 0.), (0., 0., 1.)]


def test_malformed_colortable():
    with pytest.raises(RuntimeError) as exc:
        read_colortable(io.StringIO('(0, 0, 1)\n(1, 0,\n'))
    assert 'line 2' in str(exc.value)


def test_empty_colortable():
    with pytest.raises(RuntimeError):
        read_colortable(io.StringIO('# nothing here\n\n'))


def test_scan_dir(tmp_path):
    (tmp_path / 'Greens.tbl').write_text('(0, 0.5, 0)\n(0, 1, 0)\n')
    (tmp_path / 'Broken.tbl').write_text('not a color\n')
    (tmp_path / 'ignored.txt').write_text('(0, 0, 0)\n')
    registry = ColortableRegistry()
    registry.scan_dir(str(tmp_path))
    assert list(registry) == ['Greens']
    assert registry.get_colortable('Greens').N == 2


def test_default_precip_rate_table():
    norm, cmap = colors.registry.get_precip_rate()
    assert cmap.N == len(colors.PRECIP_RATE_BOUNDARIES) - 1
    assert norm.boundaries[0] == colors.PRECIP_RATE_BOUNDARIES[0]


def test_boundaries_must_match_table():
    with pytest.raises(ValueError):
        colors.registry.get_with_boundaries(colors.DEFAULT_TABLE, [0., 1.])


def test_bin_collection(sample_dpr):
    prate = parse_dpr(sample_dpr)
    coll = bin_collection(prate)
    assert len(coll.get_paths()) == 4
    assert len(bin_collection(prate, skip_zeros = False).get_paths()) == 6


def test_plot_precip_rate(sample_dpr):
    fig = Figure()
    ax = fig.add_subplot(1, 1, 1)
    prate = parse_dpr(sample_dpr)
    assert plot_precip_rate(prate, ax = ax) is ax
    assert 'KGYX' in ax.get_title()
