import logging

import pytest
import pyvista as pv

from modelviewport import config
from modelviewport.main import build_arg_parser, main, run_headless


def test_arguments():
    args = build_arg_parser().parse_args(["site.glb", "--headless", "--fov", "45", "--debug"])
    assert args.ref == "site.glb"
    assert args.headless
    assert args.fov == 45.0
    assert args.debug
    assert args.log_file is None


def test_defaults():
    args = build_arg_parser().parse_args([])
    assert args.ref is None
    assert not args.headless
    assert args.fov == config.DEFAULT_FOV


def test_headless_success(tmp_path, capsys):
    path = str(tmp_path / "hall.vtp")
    pv.Box(bounds=(0, 12_000, 0, 3_000, 0, 8_000)).save(path)

    assert run_headless(path, config.DEFAULT_FOV) == 0
    out = capsys.readouterr().out
    assert "recovered" in out
    assert "rescaled mm->m" in out


def test_headless_failure_prints_recovery_log(tmp_path, capsys):
    assert run_headless(str(tmp_path / "missing.glb"), config.DEFAULT_FOV) == 1
    out = capsys.readouterr().out
    assert "Re-request load" in out
    assert "reload required" in out


def test_headless_requires_ref():
    with pytest.raises(SystemExit) as info:
        main(["--headless"])
    assert info.value.code == 2
    logging.getLogger("modelviewport").handlers.clear()
