# tests/unit/test_cli.py

"""End‑to‑end tests for the command‑line entry point with a stub provider."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import main as cli
from core.errors import DimensionMismatchError, PartialGenerationError, StoreCorruptError, StoreNotFoundError
from emotion.labels import EMOTIONS


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
    for var in ("EMOTION_THRESHOLD", "EMOTION_STORE_PATH", "EMOTION_EMBEDDING_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.chdir(tmp_path)


def _use_provider(monkeypatch, provider):
    monkeypatch.setattr(cli, "build_provider", lambda _cfg: provider)
    return provider


def _label_vectors():
    vectors = {e.value: [0.0, 0.0] for e in EMOTIONS}
    vectors["happiness"] = [1.0, 0.0]
    vectors["sadness"] = [0.0, 1.0]
    return vectors


def _generate(monkeypatch, stub_provider_cls, store: Path) -> int:
    _use_provider(monkeypatch, stub_provider_cls(_label_vectors()))
    return cli.main(["generate", "--store", str(store)])


def test_generate_then_classify(monkeypatch, capsys, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    assert _generate(monkeypatch, stub_provider_cls, store) == 0
    assert set(json.loads(store.read_text())) == {e.value for e in EMOTIONS}

    _use_provider(monkeypatch, stub_provider_cls({}, default=[2.0, 0.0]))
    capsys.readouterr()
    assert cli.main(["I love this", "--store", str(store)]) == 0

    out = capsys.readouterr().out
    assert "happiness" in out
    assert "Best match: happiness (100.00%, confident" in out


def test_low_confidence_is_not_an_error(monkeypatch, capsys, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    _generate(monkeypatch, stub_provider_cls, store)

    _use_provider(monkeypatch, stub_provider_cls({}, default=[0.0, 0.0]))
    capsys.readouterr()
    assert cli.main(["meh", "--store", str(store), "--json"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert doc["is_confident"] is False
    assert all(s["percentage"] == 0.0 for s in doc["scores"].values())


def test_threshold_flag(monkeypatch, capsys, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    _generate(monkeypatch, stub_provider_cls, store)

    _use_provider(monkeypatch, stub_provider_cls({}, default=[1.0, 0.0]))
    capsys.readouterr()
    assert cli.main(["x", "--store", str(store), "--threshold", "100.5", "--json"]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["threshold"] == 100.5
    assert doc["is_confident"] is False


def test_missing_store(monkeypatch, capsys, tmp_path, stub_provider_cls):
    provider = _use_provider(monkeypatch, stub_provider_cls({}, default=[1.0, 0.0]))
    code = cli.main(["hello", "--store", str(tmp_path / "absent.json")])

    assert code == StoreNotFoundError.exit_code != 0
    assert "generate" in capsys.readouterr().err
    assert provider.calls == []


def test_corrupt_store(monkeypatch, capsys, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    store.write_text('{"sadness": [1.0]}')
    _use_provider(monkeypatch, stub_provider_cls({}, default=[1.0]))

    assert cli.main(["hello", "--store", str(store)]) == StoreCorruptError.exit_code
    assert "missing labels" in capsys.readouterr().err


def test_dimension_mismatch_exit_code(monkeypatch, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    _generate(monkeypatch, stub_provider_cls, store)

    _use_provider(monkeypatch, stub_provider_cls({}, default=[1.0, 0.0, 0.0]))
    assert cli.main(["x", "--store", str(store)]) == DimensionMismatchError.exit_code


def test_failed_generation_keeps_store(monkeypatch, tmp_path, stub_provider_cls, failing_provider_cls):
    store = tmp_path / "store.json"
    _generate(monkeypatch, stub_provider_cls, store)
    before = store.read_bytes()

    _use_provider(monkeypatch, failing_provider_cls(fail_on=4, dim=2))
    assert cli.main(["generate", "--store", str(store)]) == PartialGenerationError.exit_code
    assert store.read_bytes() == before


def test_bad_config_file(capsys, tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text('{"threshold": "high"}')
    assert cli.main(["x", "--config", str(cfg)]) == cli.EXIT_CONFIG_ERROR
    assert "invalid configuration" in capsys.readouterr().err


def test_text_starting_with_dash(monkeypatch, capsys, tmp_path, stub_provider_cls):
    store = tmp_path / "store.json"
    _generate(monkeypatch, stub_provider_cls, store)

    provider = _use_provider(monkeypatch, stub_provider_cls({}, default=[0.0, 3.0]))
    capsys.readouterr()
    assert cli.main(["--store", str(store), "--json", "--", "-_- so sad"]) == 0

    doc = json.loads(capsys.readouterr().out)
    assert doc["text"] == "-_- so sad"
    assert doc["best_label"] == "sadness"
    assert provider.calls == ["-_- so sad"]
