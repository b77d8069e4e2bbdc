# tests/unit/test_config.py

"""Unit tests for core.config and config.schema"""

from __future__ import annotations

import json
from pathlib import Path

import pydantic
import pytest

from core.config import Config


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in ("EMOTION_THRESHOLD", "EMOTION_STORE_PATH", "EMOTION_OPENAI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)  # keep a developer's .env out of the tests


def _write_json(tmp_path: Path, data: dict) -> Path:
    p = tmp_path / "user_config.json"
    p.write_text(json.dumps(data))
    return p


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_defaults_load():
    cfg = Config()
    assert cfg.threshold == 70.0
    assert cfg.store_path == Path("data/emotion-embeddings.json")
    assert cfg.embedding_backend == "openai"
    assert cfg.openai_model == "text-embedding-3-small"
    assert cfg["request_timeout_seconds"] == 30.0


def test_env_override(monkeypatch):
    monkeypatch.setenv("EMOTION_THRESHOLD", "55.5")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    cfg = Config()
    assert cfg.threshold == 55.5
    assert cfg.openai_api_key == "sk-env"


def test_json_override(tmp_path: Path, caplog):
    json_path = _write_json(
        tmp_path,
        {"threshold": 80, "store_path": "custom/store.json", "bogus": 1, "log_level": None},
    )

    cfg = Config(json_path=json_path)

    assert cfg.threshold == 80.0
    assert cfg.store_path == Path("custom/store.json")
    assert cfg.log_level == "WARNING"
    assert "bogus" in caplog.text


def test_keyword_overrides_beat_json(tmp_path: Path):
    json_path = _write_json(tmp_path, {"threshold": 80})
    cfg = Config(json_path=json_path, threshold=65.0, store_path=None)
    assert cfg.threshold == 65.0
    assert cfg.store_path == Path("data/emotion-embeddings.json")


@pytest.mark.parametrize(
    "bad", [{"threshold": "nan"}, {"request_timeout_seconds": 0}, {"embedding_backend": "word2vec"}]
)
def test_invalid_values_rejected(tmp_path: Path, bad):
    with pytest.raises(pydantic.ValidationError):
        Config(json_path=_write_json(tmp_path, bad))


def test_save_roundtrip_omits_secret(tmp_path: Path):
    cfg = Config(openai_api_key="sk-secret")
    cfg.set("threshold", 42.0)

    save_path = tmp_path / "roundtrip.json"
    cfg.save(save_path)

    loaded = json.loads(save_path.read_text())
    assert loaded == {"threshold": 42.0}
    assert Config(json_path=save_path).threshold == 42.0


def test_set_unknown_key():
    with pytest.raises(KeyError):
        Config().set("nope", 1)


@pytest.mark.parametrize(
    "threshold, expected",
    [(0.0, "positive best score will be confident"), (150.0, "no result will be confident")],
)
def test_out_of_range_threshold_warning(caplog, threshold, expected):
    Config(threshold=threshold)
    assert expected in caplog.text
