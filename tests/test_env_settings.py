import pytest

from core.env import AskSettings, env_bool, env_int


def test_defaults_are_deterministic(monkeypatch: pytest.MonkeyPatch):
    for key in ("LLM_ASK_MODEL", "LLM_ASK_TEMPERATURE", "LLM_ASK_MAX_TOKENS", "ASK_TOLERATE_SOURCE_FAILURES"):
        monkeypatch.delenv(key, raising=False)
    settings = AskSettings.from_env()
    assert settings == AskSettings(model="gpt-4o-mini", temperature=0.0, max_tokens=1000, tolerate_source_failures=False)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LLM_ASK_MODEL", "supply-chain-ask")
    monkeypatch.setenv("LLM_ASK_MAX_TOKENS", "400")
    monkeypatch.setenv("ASK_TOLERATE_SOURCE_FAILURES", "yes")
    settings = AskSettings.from_env()
    assert settings.model == "supply-chain-ask"
    assert settings.max_tokens == 400
    assert settings.tolerate_source_failures is True


def test_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SC_TEST_INT", "-3")
    monkeypatch.setenv("SC_TEST_BOOL", "maybe")
    assert env_int("SC_TEST_INT", 7, minimum=1) == 7
    assert env_bool("SC_TEST_BOOL", True) is True
