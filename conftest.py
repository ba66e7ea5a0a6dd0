"""Root conftest.py — loads .env before any tests run."""
import pytest
from dotenv import load_dotenv

load_dotenv()


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Clear the lru_cache on get_settings so monkeypatch.setenv takes effect."""
    from config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Fully specified settings that ignore any local .env / environment.properties."""
    from config.settings import load_settings

    monkeypatch.setenv("UAC_ANALYZER_PROPERTIES", str(tmp_path / "missing.properties"))
    return load_settings(
        _env_file=None,
        jira_host="https://jira.example.com",
        jira_user="qa-bot",
        jira_password="s3cret",
        ollama_host="http://ollama.test:11434",
        ollama_model="mistral",
        activity_log_path=str(tmp_path / "activity.jsonl"),
    )
