from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pandas as pd

from vis_gen_diff.validation.hyperdrive_diff import EXIT_FAIL, EXIT_PASS, EXIT_SETUP, main


def _write_band(directory: Path, band: int, vis: np.ndarray, *, short_by: int = 0) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    vis = np.asarray(vis, dtype=np.complex128)
    buf = np.column_stack([vis.real, vis.imag]).astype("<f4").tobytes()
    if short_by:
        buf = buf[:-short_by]
    (directory / f"hyperdrive_band{band:02d}.bin").write_bytes(buf)


def _setup(tmp_path: Path, diff: float) -> tuple:
    cur = tmp_path / "run"
    base = tmp_path / "baseline"
    zeros = np.zeros(32, dtype=complex)
    cur_vis = zeros.copy()
    cur_vis[7] = diff
    _write_band(cur, 1, cur_vis)
    _write_band(base, 1, zeros)
    return cur, base


def test_pass_exit_code_and_output(tmp_path, capsys) -> None:
    cur, base = _setup(tmp_path, 0.0005)
    rc = main([str(base), "--current-dir", str(cur)])
    out = capsys.readouterr().out
    assert rc == EXIT_PASS
    assert "Checking hyperdrive_band01.bin ..." in out
    assert "Biggest difference for hyperdrive_band01.bin" in out
    assert "Maximum difference: 0.0005" in out
    assert "PASS" in out


def test_tolerance_exceeded(tmp_path, capsys) -> None:
    cur, base = _setup(tmp_path, 0.01)
    rc = main([str(base), "--current-dir", str(cur), "-t", "0.001"])
    out = capsys.readouterr().out
    assert rc == EXIT_FAIL
    assert "[fail] band 01: difference 0.01 exceeds tolerance 0.001" in out
    assert "FAIL" in out


def test_custom_tolerance_passes(tmp_path) -> None:
    cur, base = _setup(tmp_path, 0.01)
    assert main([str(base), "--current-dir", str(cur), "--tolerance", "0.1", "-q"]) == EXIT_PASS


def test_quiet_prints_nothing(tmp_path, capsys) -> None:
    cur, base = _setup(tmp_path, 0.01)
    rc = main([str(base), "--current-dir", str(cur), "--quiet"])
    captured = capsys.readouterr()
    assert rc == EXIT_FAIL
    assert captured.out == ""
    assert captured.err == ""


def test_missing_baseline_is_setup_error(tmp_path, capsys) -> None:
    cur, _ = _setup(tmp_path, 0.0)
    rc = main([str(tmp_path / "nope"), "--current-dir", str(cur)])
    err = capsys.readouterr().err
    assert rc == EXIT_SETUP
    assert "nope" in err


def test_no_common_band_is_setup_error(tmp_path) -> None:
    cur = tmp_path / "run"
    base = tmp_path / "baseline"
    _write_band(cur, 1, np.zeros(4, dtype=complex))
    _write_band(base, 2, np.zeros(4, dtype=complex))
    assert main([str(base), "--current-dir", str(cur), "-q"]) == EXIT_SETUP


def test_negative_tolerance_is_setup_error(tmp_path) -> None:
    cur, base = _setup(tmp_path, 0.0)
    assert main([str(base), "--current-dir", str(cur), "-q", "-t", "-1"]) == EXIT_SETUP


def test_malformed_pair_fails_verdict(tmp_path, capsys) -> None:
    cur = tmp_path / "run"
    base = tmp_path / "baseline"
    _write_band(cur, 1, np.zeros(8, dtype=complex))
    _write_band(base, 1, np.zeros(8, dtype=complex), short_by=3)
    rc = main([str(base), "--current-dir", str(cur)])
    out = capsys.readouterr().out
    assert rc == EXIT_FAIL
    assert "MalformedFileError" in out
    assert "Maximum difference: <no comparable data>" in out


def test_strict_bands(tmp_path) -> None:
    cur, base = _setup(tmp_path, 0.0)
    _write_band(cur, 2, np.zeros(32, dtype=complex))
    assert main([str(base), "--current-dir", str(cur), "-q"]) == EXIT_PASS
    assert main([str(base), "--current-dir", str(cur), "-q", "--strict-bands"]) == EXIT_FAIL


def test_one_sided_band_is_warned(tmp_path, capsys) -> None:
    cur, base = _setup(tmp_path, 0.0)
    _write_band(base, 3, np.zeros(32, dtype=complex))
    main([str(base), "--current-dir", str(cur)])
    out = capsys.readouterr().out
    assert "[warn] hyperdrive_band03.bin is missing from" in out


def test_json_and_csv_exports(tmp_path) -> None:
    cur, base = _setup(tmp_path, 0.25)
    jpath = tmp_path / "out" / "report.json"
    cpath = tmp_path / "out" / "bands.csv"
    rc = main([str(base), "--current-dir", str(cur), "-q", "-j", "2", "--json", str(jpath), "--csv", str(cpath)])
    assert rc == EXIT_FAIL

    payload = json.loads(jpath.read_text(encoding="utf-8"))
    assert payload["profile"]["record_format"]["record_width"] == 8
    assert payload["profile"]["max_workers"] == 2
    assert payload["report"]["within_tolerance"] is False
    assert payload["report"]["max_difference"] == 0.25
    assert payload["report"]["worst_band"] == 1
    assert payload["report"]["pairs"][0]["status"] == "ok"

    df = pd.read_csv(cpath)
    assert list(df["band"]) == [1]
    assert float(df.loc[0, "max_difference"]) == 0.25


def test_band_width_zero_accepts_any_width(tmp_path) -> None:
    cur = tmp_path / "run"
    base = tmp_path / "baseline"
    for d in (cur, base):
        d.mkdir()
        np.zeros(8, dtype="<f4").tofile(d / "hyperdrive_band7.bin")
    assert main([str(base), "--current-dir", str(cur), "-q"]) == EXIT_SETUP
    assert main([str(base), "--current-dir", str(cur), "-q", "--band-width", "0"]) == EXIT_PASS


def test_duplicate_band_is_setup_error(tmp_path, capsys) -> None:
    cur = tmp_path / "run"
    base = tmp_path / "baseline"
    for d in (cur, base):
        d.mkdir()
        np.zeros(8, dtype="<f4").tofile(d / "hyperdrive_band01.bin")
    np.zeros(8, dtype="<f4").tofile(cur / "hyperdrive_band1.bin")
    rc = main([str(base), "--current-dir", str(cur), "--band-width", "0"])
    err = capsys.readouterr().err
    assert rc == EXIT_SETUP
    assert "ambiguous" in err
