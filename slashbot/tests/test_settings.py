"""Tests for the Settings module."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from slashbot.config.settings import DEFAULT_API_BASE, Settings
from slashbot.services.logs import TRACE


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.log_level == "Warning"
        assert s.log_level_value == logging.WARNING
        assert s.token == ""
        assert s.token_found is False
        assert s.guild_ids == ()
        assert s.unknown_command_reply == ""
        assert s.api_base == DEFAULT_API_BASE

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc.def")
        monkeypatch.setenv("DISCORD_BOT_GUILD_IDS", "30, 10,20")
        s = Settings()
        assert s.token_found is True
        assert s.guild_ids == (30, 10, 20)

    def test_env_file_takes_precedence(self, env_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_LOG_LEVEL", "Error")
        env_path.write_text('DISCORD_BOT_LOG_LEVEL="Debug"\n')
        s = Settings()
        assert s.log_level == "Debug"
        assert s.log_level_value == logging.DEBUG

    def test_reload_picks_up_changes(self, env_path: Path) -> None:
        s = Settings()
        env_path.write_text("DISCORD_BOT_TOKEN=new\n")
        s.reload()
        assert s.token == "new"

    @pytest.mark.parametrize(
        ("raw", "name", "level"),
        [
            ("trace", "Trace", TRACE),
            ("Verbose", "Trace", TRACE),
            ("DEBUG", "Debug", logging.DEBUG),
            ("Information", "Information", logging.INFO),
            ("info", "Information", logging.INFO),
            ("warning", "Warning", logging.WARNING),
            ("Error", "Error", logging.ERROR),
            ("critical", "Critical", logging.CRITICAL),
        ],
    )
    def test_log_level_names(self, monkeypatch, raw: str, name: str, level: int) -> None:
        monkeypatch.setenv("DISCORD_BOT_LOG_LEVEL", raw)
        s = Settings()
        assert s.log_level == name
        assert s.log_level_value == level

    def test_none_level_silences_everything(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_LOG_LEVEL", "None")
        assert Settings().log_level_value > logging.CRITICAL

    def test_duplicate_guild_ids_dropped_in_order(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_GUILD_IDS", "5,6,5,7")
        assert Settings().guild_ids == (5, 6, 7)

    def test_api_base_trailing_slash_stripped(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_API_BASE", "http://localhost:1234/api/")
        assert Settings().api_base == "http://localhost:1234/api"


class TestValidate:
    def test_missing_token(self) -> None:
        with pytest.raises(ValueError, match="TOKEN"):
            Settings().validate()

    def test_valid(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "t")
        monkeypatch.setenv("DISCORD_BOT_GUILD_IDS", "1,2")
        Settings().validate()

    def test_empty_guild_list_is_valid(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "t")
        Settings().validate()

    def test_non_numeric_guild_id(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "t")
        monkeypatch.setenv("DISCORD_BOT_GUILD_IDS", "1,abc")
        s = Settings()
        assert s.guild_ids == (1,)
        with pytest.raises(ValueError, match="abc"):
            s.validate()

    def test_unknown_log_level(self, monkeypatch) -> None:
        monkeypatch.setenv("DISCORD_BOT_TOKEN", "t")
        monkeypatch.setenv("DISCORD_BOT_LOG_LEVEL", "loud")
        s = Settings()
        assert s.log_level == "Warning"
        with pytest.raises(ValueError, match="loud"):
            s.validate()
