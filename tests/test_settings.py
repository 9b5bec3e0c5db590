import pytest

from backend.settings import EngineSettings


def test_defaults_are_valid():
    settings = EngineSettings()
    settings.validate()
    assert settings.angle_mode == "rad"
    assert settings.history_limit == 10


def test_from_env_empty():
    assert EngineSettings.from_env({}) == EngineSettings()


def test_from_env_values():
    settings = EngineSettings.from_env({
        "CALC_ANGLE_MODE": "DEG",
        "CALC_HISTORY_LIMIT": "25",
        "CALC_LOG_LEVEL": "debug",
    })
    assert settings == EngineSettings(angle_mode="deg", history_limit=25, log_level="DEBUG")


@pytest.mark.parametrize("environ", [
    {"CALC_ANGLE_MODE": "grad"},
    {"CALC_HISTORY_LIMIT": "ten"},
    {"CALC_HISTORY_LIMIT": "0"},
    {"CALC_LOG_LEVEL": "LOUD"},
])
def test_from_env_rejects_invalid(environ):
    with pytest.raises(ValueError):
        EngineSettings.from_env(environ)


@pytest.mark.parametrize("history_limit", [2.5, "10", True])
def test_history_limit_must_be_an_integer(history_limit):
    with pytest.raises(ValueError):
        EngineSettings(history_limit=history_limit).validate()
