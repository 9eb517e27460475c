import importlib.util

import pandas as pd
import pytest


def _deps_available() -> bool:
    return all(importlib.util.find_spec(mod) is not None for mod in ("typer", "yaml", "numpy", "matplotlib"))


def test_cli_smoke(tmp_path):
    if not _deps_available():
        pytest.skip("CLI dependencies unavailable in test environment")
    from typer.testing import CliRunner

    from grnevo.cli import app

    runner = CliRunner()
    args = ["run", "--seed", "2", "--generations", "3", "--pop", "4", "--steps", "5", "--verbosity", "0", "--run-dir", str(tmp_path)]
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    run_dir = tmp_path / "sinusoid_2"
    assert len(pd.read_csv(run_dir / "metrics.csv")) == 3

    result = runner.invoke(app, ["resume", str(run_dir), "--generations", "2"])
    assert result.exit_code == 0, result.output
    assert len(pd.read_csv(run_dir / "metrics.csv")) == 5

    result = runner.invoke(app, ["analyze", "--run", str(run_dir)])
    assert result.exit_code == 0, result.output
    assert (run_dir / "plots" / "fitness.png").exists()
    assert (run_dir / "report.md").exists()

    result = runner.invoke(app, ["best", "--run", str(run_dir)])
    assert result.exit_code == 0, result.output
    assert "beta" in result.output


def test_cli_rejects_bad_overrides(tmp_path):
    if not _deps_available():
        pytest.skip("CLI dependencies unavailable in test environment")
    from typer.testing import CliRunner

    from grnevo.cli import app

    runner = CliRunner()
    result = runner.invoke(app, ["run", "--pop", "0", "--run-dir", str(tmp_path)])
    assert result.exit_code != 0
    result = runner.invoke(app, ["run", "--steps", "0", "--pop", "2", "--generations", "1", "--run-dir", str(tmp_path)])
    assert result.exit_code != 0
    assert not isinstance(result.exception, ZeroDivisionError)
    assert not (tmp_path / "sinusoid_0").exists()
    result = runner.invoke(app, ["best", "--run", str(tmp_path)])
    assert result.exit_code != 0
