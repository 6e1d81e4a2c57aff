import pytest

from content_insights.config import DEFAULT_API_BASE, DEFAULT_MODEL, load_settings
from content_insights.errors import ConfigurationError

ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_API_BASE",
    "OPENAI_MODEL",
    "REQUEST_TIMEOUT_S",
    "ANALYSIS_ATTEMPTS",
    "MAX_ARTICLES",
    "LOG_LEVEL",
    "DATA_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch removes anything load_dotenv adds
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path):
    settings = load_settings(env_file=tmp_path / "missing.env")
    assert settings.openai_api_key == ""
    assert settings.openai_api_base == DEFAULT_API_BASE
    assert settings.openai_model == DEFAULT_MODEL
    assert settings.analysis_attempts == 1
    assert settings.history_file.name == "search_history.jsonl"


def test_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_API_BASE", "https://proxy.test/v1")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))

    settings = load_settings(env_file=tmp_path / "missing.env")

    assert settings.openai_api_key == "sk-test"
    assert settings.openai_api_base == "https://proxy.test/v1"
    assert settings.log_level == "DEBUG"
    assert settings.history_file.parent == tmp_path


def test_dotenv_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("OPENAI_MODEL=from-file\nOPENAI_API_KEY=file-key\n", encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")

    settings = load_settings(env_file=env_file)

    assert settings.openai_model == "from-file"
    assert settings.openai_api_key == "env-key"


def test_invalid_value(monkeypatch, tmp_path):
    monkeypatch.setenv("ANALYSIS_ATTEMPTS", "zero")
    with pytest.raises(ConfigurationError):
        load_settings(env_file=tmp_path / "missing.env")
