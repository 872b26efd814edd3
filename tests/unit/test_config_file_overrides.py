from __future__ import annotations

import pytest

from speech_summary_agent.common.config import Settings


def test_secret_file_override(tmp_path, monkeypatch) -> None:
    secret = tmp_path / "deepgram_key"
    secret.write_text("dg-from-file\n", encoding="utf-8")
    monkeypatch.setenv("DEEPGRAM_API_KEY_FILE", str(secret))

    s = Settings()
    assert s.deepgram_api_key == "dg-from-file"


def test_csv_file_override_joins_lines(tmp_path, monkeypatch) -> None:
    keys = tmp_path / "api_keys"
    keys.write_text("k1\nk2\n\nk3\n", encoding="utf-8")
    monkeypatch.setenv("API_KEYS_FILE", str(keys))

    s = Settings()
    assert s.api_keys == "k1,k2,k3"


def test_missing_secret_file_fails(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY_FILE", str(tmp_path / "nope"))
    with pytest.raises(RuntimeError):
        Settings()


def test_env_aliases(monkeypatch) -> None:
    monkeypatch.setenv("SUMMARY_MIN_TRANSCRIPT_CHARS", "80")
    monkeypatch.setenv("TRANSLATION_DEFAULT_LANGUAGE_NAME", "English")
    monkeypatch.setenv("SESSION_STORE", "redis")

    s = Settings()
    assert s.summary_min_transcript_chars == 80
    assert s.translation_default_language_name == "English"
    assert s.session_store == "redis"
