import io
import json
import sys

import pytest

from main import build_parser, main

from conftest import dpr


@pytest.fixture
def dpr_file(tmp_path, sample_dpr):
    path = tmp_path / 'KGYX_DPR'
    path.write_bytes(sample_dpr)
    return path


def test_info(dpr_file, capsys):
    assert main(['info', str(dpr_file)]) == 0
    out = capsys.readouterr().out
    assert 'Station Code:        KGYX' in out
    assert 'Number of Radials:     3' in out


def test_info_from_stdin(sample_dpr, capsys, monkeypatch):
    monkeypatch.setattr(sys, 'stdin', io.TextIOWrapper(io.BytesIO(sample_dpr)))
    assert main(['info', '-']) == 0
    assert 'KGYX' in capsys.readouterr().out


def test_to_geojson(dpr_file, capsys):
    assert main(['to-geojson', str(dpr_file)]) == 0
    collection = json.loads(capsys.readouterr().out)
    assert len(collection['features']) == 6


def test_to_geojson_skip_zeros_to_file(dpr_file, tmp_path):
    out = tmp_path / 'out.geojson'
    assert main(['to-geojson', str(dpr_file), '--skip-zeros', '-o', str(out)]) == 0
    collection = json.loads(out.read_text())
    assert len(collection['features']) == 4


def test_decode_failure_reported(tmp_path, capsys):
    path = tmp_path / 'bad'
    path.write_bytes(dpr(divider = 0))
    assert main(['info', str(path)]) == 1
    err = capsys.readouterr().err
    assert str(path) in err
    assert 'block divider' in err


def test_failed_decode_keeps_existing_output(tmp_path):
    bad = tmp_path / 'bad'
    bad.write_bytes(dpr(divider = 0))
    out = tmp_path / 'out.geojson'
    out.write_text('previous result')
    assert main(['to-geojson', str(bad), '-o', str(out)]) == 1
    assert out.read_text() == 'previous result'


def test_info_to_file(dpr_file, tmp_path, capsys):
    out = tmp_path / 'info.txt'
    assert main(['info', str(dpr_file), '-o', str(out)]) == 0
    assert out.read_text().startswith('Station Code:        KGYX')
    assert capsys.readouterr().out == ''


def test_truncated_file_reported(tmp_path, capsys):
    path = tmp_path / 'short'
    path.write_bytes(b'SDUS51 KGYX')
    assert main(['info', str(path)]) == 1
    assert 'Truncated' in capsys.readouterr().err


def test_command_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_plot_saves_figure(dpr_file, tmp_path):
    out = tmp_path / 'kgyx.png'
    assert main(['plot', str(dpr_file), '--save', str(out)]) == 0
    assert out.stat().st_size > 0
