"""
Unit tests for configuration loading.

Tests cover:
1. Defaults
2. JSON file overrides
3. Environment and .env overrides
4. Rejection of invalid values
"""

import json
import logging
import os
from pathlib import Path

import pytest

from txproof.core.config import ProofConfig, load_config


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env():
    """Remove TXPROOF_* variables before and after each test."""
    before = {k: v for k, v in os.environ.items() if k.startswith("TXPROOF_")}
    for key in before:
        del os.environ[key]
    yield
    for key in [k for k in os.environ if k.startswith("TXPROOF_")]:
        del os.environ[key]
    os.environ.update(before)


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    """Run from an empty directory so no stray .env is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Tests
# =============================================================================


class TestProofConfig:
    """Tests for the config dataclass."""

    def test_defaults(self):
        config = ProofConfig()
        assert config.log_level == "INFO"
        assert config.level == logging.INFO
        assert config.log_to_file is False
        assert config.log_dir == Path("logs")
        assert config.max_leaves > 0

    def test_level_normalized(self):
        assert ProofConfig(log_level="debug").level == logging.DEBUG

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            ProofConfig(log_level="LOUD")

    def test_max_leaves_must_be_positive(self):
        with pytest.raises(ValueError):
            ProofConfig(max_leaves=0)


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_sources_gives_defaults(self, in_tmp):
        assert load_config() == ProofConfig()

    def test_json_file(self, in_tmp):
        path = in_tmp / "txproof.json"
        path.write_text(json.dumps({"log_level": "WARNING", "max_leaves": 64}))
        config = load_config(str(path))
        assert config.log_level == "WARNING"
        assert config.max_leaves == 64

    def test_json_unknown_key(self, in_tmp):
        path = in_tmp / "txproof.json"
        path.write_text(json.dumps({"colour": "blue"}))
        with pytest.raises(ValueError, match="colour"):
            load_config(str(path))

    def test_json_not_object(self, in_tmp):
        path = in_tmp / "txproof.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_environment_overrides_file(self, in_tmp):
        path = in_tmp / "txproof.json"
        path.write_text(json.dumps({"max_leaves": 64}))
        os.environ["TXPROOF_MAX_LEAVES"] = "128"
        os.environ["TXPROOF_LOG_TO_FILE"] = "yes"
        config = load_config(str(path))
        assert config.max_leaves == 128
        assert config.log_to_file is True

    def test_env_file(self, in_tmp):
        env_file = in_tmp / "custom.env"
        env_file.write_text("TXPROOF_LOG_LEVEL=error\nTXPROOF_LOG_DIR=out/logs\n")
        config = load_config(env_file=str(env_file))
        assert config.level == logging.ERROR
        assert config.log_dir == Path("out/logs")

    def test_dotenv_in_cwd(self, in_tmp):
        (in_tmp / ".env").write_text("TXPROOF_MAX_LEAVES=7\n")
        assert load_config().max_leaves == 7

    def test_bad_env_value(self, in_tmp):
        os.environ["TXPROOF_MAX_LEAVES"] = "many"
        with pytest.raises(ValueError):
            load_config()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
