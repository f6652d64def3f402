import json

import pytest

from weighbench.cli import format_csv, main
from weighbench.core.models import BenchmarkResult, Component


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("WEIGHBENCH_DB_PATH", "WEIGHBENCH_STEPS", "WEIGHBENCH_REPEAT", "WEIGHBENCH_CLAMP_ZERO_WIDTH"):
        monkeypatch.delenv(var, raising=False)


def test_format_csv_layout():
    text = format_csv(
        "identity", "set_identity", 2, 1,
        [Component(name="r", low=1, high=20), Component(name="x", low=1, high=100)],
        [BenchmarkResult(assignment=(("r", 1), ("x", 50)), elapsed_ns=1234)],
    )
    assert text.splitlines() == [
        'Pallet: "identity", Extrinsic: "set_identity", Steps: 2, Repeat: 1',
        "r,x,time",
        "1,50,1234",
    ]


def test_list_all(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "📦 identity" in out
    assert "📦 balances" in out
    assert "   - transfer (u: [1, 1000000), e: [0, 1000))" in out


def test_list_unknown_pallet(capsys):
    assert main(["list", "--pallet", "nope"]) == 1
    assert "Pallet 'nope' not found" in capsys.readouterr().err


def test_run_csv(capsys):
    assert main(["run", "-p", "identity", "-e", "add_registrar", "-s", "2"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == 'Pallet: "identity", Extrinsic: "add_registrar", Steps: 2, Repeat: 1'
    assert lines[1] == "r,time"
    assert [line.split(",")[0] for line in lines[2:]] == ["1", "10"]


def test_run_json_to_file(tmp_path, capsys):
    out_file = tmp_path / "transfer.json"
    code = main([
        "run", "--pallet", "balances", "--extrinsic", "transfer",
        "--steps", "2", "--repeat", "2", "--format", "json", "--output", str(out_file),
    ])
    assert code == 0
    assert "💾 Results written to" in capsys.readouterr().out
    doc = json.loads(out_file.read_text(encoding="utf-8"))
    assert doc["pallet"] == "balances"
    assert [c["name"] for c in doc["components"]] == ["u", "e"]
    assert len(doc["results"]) == (2 + 2) * 2
    assert all(r["elapsed_ns"] >= 0 for r in doc["results"])


def test_run_unknown_benchmark(capsys):
    assert main(["run", "-p", "identity", "-e", "nope"]) == 1
    assert "Could not find benchmark: 'nope'" in capsys.readouterr().err


def test_run_unknown_pallet(capsys):
    assert main(["run", "-p", "nope", "-e", "transfer"]) == 1
    assert "❌" in capsys.readouterr().err


@pytest.mark.parametrize("flag", ["--steps", "--repeat"])
def test_run_rejects_non_positive(flag):
    with pytest.raises(SystemExit) as exc_info:
        main(["run", "-p", "identity", "-e", "add_registrar", flag, "0"])
    assert exc_info.value.code == 2


def test_plan_runs_every_sweep(tmp_path, capsys):
    plan = tmp_path / "plan.yaml"
    plan.write_text(
        "steps: 2\n"
        "runs:\n"
        "  - pallet: identity\n"
        "    extrinsic: add_registrar\n"
        "  - pallet: identity\n"
        "    extrinsic: set_subs\n",
        encoding="utf-8",
    )
    assert main(["plan", str(plan)]) == 0
    out = capsys.readouterr().out
    assert 'Extrinsic: "add_registrar", Steps: 2' in out
    assert 'Extrinsic: "set_subs", Steps: 2' in out


def test_plan_invalid_file(tmp_path, capsys):
    plan = tmp_path / "plan.json"
    plan.write_text(json.dumps({"runs": []}), encoding="utf-8")
    assert main(["plan", str(plan)]) == 1
    assert "Plan validation failed" in capsys.readouterr().err


def test_plan_missing_file(tmp_path, capsys):
    assert main(["plan", str(tmp_path / "absent.yaml")]) == 1
    assert "❌" in capsys.readouterr().err


@pytest.mark.parametrize("var", ["WEIGHBENCH_STEPS", "WEIGHBENCH_REPEAT"])
def test_invalid_env_config_is_usage_error(monkeypatch, capsys, var):
    monkeypatch.setenv(var, "0")
    assert main(["list"]) == 2
    err = capsys.readouterr().err
    assert "❌ Invalid configuration" in err
    assert "must be positive" in err
