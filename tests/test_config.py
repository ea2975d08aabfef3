import pytest

from brightfuture.config import DEFAULT_COUNSELING_CONTACT, Settings
from brightfuture.errors import ConfigError


def _from(env):
    return Settings.from_env(get=env.get, load_dotenv_file=False)


def test_defaults():
    s = _from({})
    assert s.openai_api_key is None
    assert s.model == "gpt-3.5-turbo"
    assert s.temperature == 0.7
    assert s.max_tokens == 2000
    assert s.timeout_seconds == 60.0
    assert s.log_level == "INFO"
    assert s.log_json is False
    assert s.counseling_contact == DEFAULT_COUNSELING_CONTACT


def test_overrides():
    s = _from({
        "OPENAI_API_KEY": " sk-abc ",
        "APP_OPENAI_MODEL": "gpt-4o-mini",
        "APP_OPENAI_TEMPERATURE": "0.2",
        "APP_OPENAI_MAX_TOKENS": "1500",
        "APP_LOG_JSON": "yes",
    })
    assert s.openai_api_key == "sk-abc"
    assert s.model == "gpt-4o-mini"
    assert s.temperature == 0.2
    assert s.max_tokens == 1500
    assert s.log_json is True


def test_bad_numbers_fall_back():
    s = _from({"APP_OPENAI_MAX_TOKENS": "lots", "APP_OPENAI_TEMPERATURE": "warm"})
    assert s.max_tokens == 2000
    assert s.temperature == 0.7


def test_require_api_key():
    with pytest.raises(ConfigError):
        _from({"OPENAI_API_KEY": "   "}).require_api_key()
    assert _from({"OPENAI_API_KEY": "sk-x"}).require_api_key() == "sk-x"
