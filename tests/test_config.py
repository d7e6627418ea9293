from config import Settings, load_settings

ENV_VARS = ("USE_LLM", "LLM_PROVIDER", "PERPLEXITY_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY",
            "TAG_CACHE_TTL", "LOG_LEVEL", "API_HOST", "API_PORT")


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    settings = load_settings()

    assert settings.use_llm is False
    assert settings.llm_provider == "openai"
    assert settings.llm_api_key is None
    assert settings.tag_cache_ttl == 300
    assert settings.api_port == 8000


def test_environment_overrides(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("USE_LLM", "True")
    monkeypatch.setenv("LLM_PROVIDER", "Anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "anthropic-key")
    monkeypatch.setenv("OPENAI_API_KEY", "openai-key")
    monkeypatch.setenv("TAG_CACHE_TTL", "60")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.use_llm is True
    assert settings.llm_provider == "anthropic"
    assert settings.llm_api_key == "anthropic-key"
    assert settings.tag_cache_ttl == 60
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("TAG_CACHE_TTL", "soon")
    monkeypatch.setenv("API_PORT", "")

    settings = load_settings()

    assert settings.tag_cache_ttl == 300
    assert settings.api_port == 8000


def test_llm_key_falls_back_to_any_provider_key():
    settings = Settings(llm_provider="openai", perplexity_api_key="pplx-key")
    assert settings.llm_api_key == "pplx-key"
