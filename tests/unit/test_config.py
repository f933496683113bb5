"""Unit tests for configuration loading, validation and log correlation."""

import logging

import pytest
from utils.config import load_config, validate_config
from utils.logging import QUIET_LOGGERS, add_job_id, clear_job_context, job_context, set_job_context, setup_logging


@pytest.mark.unit
class TestConfig:
    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEMINI_API_KEY", "abc")
        monkeypatch.setenv("RENDER_TIME_SCALE", "0.5")
        monkeypatch.setenv("AUTO_MATCH_CONCURRENCY", "3")
        monkeypatch.setenv("DOCUGEN_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test ,")
        monkeypatch.setenv("LOG_JSON", "TRUE")

        config = load_config()

        assert config["gemini_api_key"] == "abc"
        assert config["render_time_scale"] == 0.5
        assert config["auto_match_concurrency"] == 3
        assert config["db_path"] == str(tmp_path / "x.db")
        assert config["cors_origins"] == ["http://a.test", "http://b.test"]
        assert config["log_json"] is True

    def test_defaults(self, monkeypatch):
        for name in ("RENDER_JOB_TTL_SECONDS", "AUTOMATION_SCENE_DELAY", "MAX_UPLOAD_MB", "DOCUGEN_DB_PATH"):
            monkeypatch.delenv(name, raising=False)

        config = load_config()

        assert config["render_job_ttl_seconds"] == 3600
        assert config["automation_scene_delay"] == 0.2
        assert config["max_upload_mb"] == 100
        assert config["db_path"].endswith(".docugen/store.db")

    def test_avatar_settings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOCUGEN_DB_PATH", str(tmp_path / "store.db"))
        monkeypatch.setenv("AVATAR_RENDER_DELAY", "0")
        monkeypatch.delenv("AVATAR_MAX_UPLOAD_MB", raising=False)
        monkeypatch.delenv("AVATAR_UPLOAD_DELAY", raising=False)

        config = load_config()

        assert config["avatar_render_delay"] == 0.0
        assert config["avatar_upload_delay"] == 1.0
        assert config["avatar_max_upload_mb"] == 10
        assert validate_config({**config, "avatar_max_upload_mb": 0, "gemini_api_key": "k"}) == [
            "AVATAR_MAX_UPLOAD_MB must be positive"
        ]

    def test_valid_config_has_no_issues(self, tmp_path):
        config = {
            "gemini_api_key": "abc",
            "auto_match_concurrency": 5,
            "render_time_scale": 1.0,
            "automation_scene_delay": 0.2,
            "render_job_ttl_seconds": 3600,
            "max_upload_mb": 100,
            "db_path": str(tmp_path / "data" / "store.db"),
        }

        assert validate_config(config) == []
        assert (tmp_path / "data").is_dir()

    def test_problems_are_listed_not_raised(self):
        issues = validate_config(
            {
                "gemini_api_key": "",
                "auto_match_concurrency": 0,
                "render_time_scale": -1,
                "automation_scene_delay": -0.1,
                "render_job_ttl_seconds": 0,
                "max_upload_mb": 0,
            }
        )

        assert len(issues) == 6
        assert issues[0].startswith("GEMINI_API_KEY")


@pytest.mark.unit
class TestJobContext:
    def test_job_id_added_while_set(self):
        set_job_context("job_123")
        try:
            assert add_job_id(None, "info", {"event": "x"}) == {"event": "x", "job_id": "job_123"}
        finally:
            clear_job_context()

        assert add_job_id(None, "info", {"event": "x"}) == {"event": "x"}

    def test_job_context_block(self):
        with job_context("job_456"):
            assert add_job_id(None, "info", {}) == {"job_id": "job_456"}

        assert add_job_id(None, "info", {}) == {}

    def test_setup_logging_sets_level_and_quiets_clients(self):
        setup_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)

        setup_logging("INFO", json_output=True)
        assert logging.getLogger().level == logging.INFO

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("verbose")
        assert logging.getLogger().level == logging.INFO
