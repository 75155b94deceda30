import pytest

from score_engine.config import EngineConfig, load_config
from score_engine.errors import InvalidConfiguration

ENV_VARS = (
    "SCORE_ENGINE_CUTOFF_HOUR",
    "SCORE_ENGINE_TIMEZONE",
    "SCORE_ENGINE_CORRELATION_MIN_SAMPLES",
    "SCORE_ENGINE_CORRELATION_MIN_STRENGTH",
    "SCORE_ENGINE_CORRELATION_WINDOW_DAYS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = load_config()
    assert config.cutoff_hour == 4
    assert config.timezone is None
    assert config.correlation_min_samples == 20
    assert config.correlation_min_strength == 0.5
    assert config.correlation_window_days == 60


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SCORE_ENGINE_CUTOFF_HOUR", "6")
    monkeypatch.setenv("SCORE_ENGINE_CORRELATION_MIN_STRENGTH", "0.35")
    config = load_config()
    assert config.cutoff_hour == 6
    assert config.correlation_min_strength == 0.35


@pytest.mark.parametrize("value", ["24", "-1", "four"])
def test_bad_cutoff_is_rejected_not_clamped(monkeypatch, value):
    monkeypatch.setenv("SCORE_ENGINE_CUTOFF_HOUR", value)
    with pytest.raises(InvalidConfiguration):
        load_config()


def test_unknown_timezone(monkeypatch):
    monkeypatch.setenv("SCORE_ENGINE_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(InvalidConfiguration):
        load_config()


def test_config_validates_thresholds():
    with pytest.raises(InvalidConfiguration):
        EngineConfig(correlation_min_strength=1.5)
    with pytest.raises(InvalidConfiguration):
        EngineConfig(correlation_window_days=0)
