"""
Tests for EngineConfig and logging setup.
Run: pytest tests/test_config.py
"""

import sys

import pytest
from loguru import logger

from catalog_search.config import EngineConfig, configure_logging
from catalog_search.criteria import SearchCriteria
from catalog_search.search_engine import QueryExecutor


@pytest.fixture(autouse=True)
def restore_logging():
	yield
	logger.remove()
	logger.add(sys.stderr)  # loguru's default sink


def test_defaults_are_valid():
	config = EngineConfig()
	config.validate()
	assert config.max_workers == 4
	assert config.default_session == "default"


def test_from_environment(monkeypatch):
	monkeypatch.setenv("CATALOG_SEARCH_MAX_WORKERS", "8")
	monkeypatch.setenv("CATALOG_SEARCH_DEFAULT_SESSION", "main-window")
	monkeypatch.setenv("CATALOG_SEARCH_LOG_LEVEL", "debug")
	config = EngineConfig.from_environment(apply_logging=False)
	assert config.max_workers == 8
	assert config.default_session == "main-window"
	assert config.log_level == "debug"


@pytest.mark.parametrize("kwargs", [
	{"max_workers": 0},
	{"default_session": ""},
	{"log_level": "LOUD"},
])
def test_invalid_config_rejected(kwargs):
	with pytest.raises(ValueError):
		EngineConfig(**kwargs).validate()


def test_configure_logging_accepts_lowercase_level():
	messages = []
	configure_logging("warning", sink=messages.append)
	logger.info("[Test] hidden")
	logger.warning("[Test] shown")
	assert [m.record["message"] for m in messages] == ["[Test] shown"]


def run_search(repository, config):
	with QueryExecutor(repository, config) as executor:
		assert executor.search(SearchCriteria(keywords="dune"), timeout=5).succeeded


def test_log_level_error_hides_executor_messages(repository):
	messages = []
	config = EngineConfig(log_level="ERROR")
	config.apply_logging(sink=messages.append)
	run_search(repository, config)
	assert not any("[Executor]" in m for m in messages)


def test_log_level_debug_shows_executor_messages(repository):
	messages = []
	config = EngineConfig(log_level="debug")
	config.apply_logging(sink=messages.append)
	run_search(repository, config)
	levels = {m.record["level"].name for m in messages if "[Executor]" in m}
	assert {"DEBUG", "INFO"} <= levels


def test_from_environment_applies_log_level(monkeypatch, capsys, repository):
	monkeypatch.setenv("CATALOG_SEARCH_LOG_LEVEL", "ERROR")
	config = EngineConfig.from_environment()
	run_search(repository, config)
	assert "[Executor]" not in capsys.readouterr().err

	monkeypatch.setenv("CATALOG_SEARCH_LOG_LEVEL", "DEBUG")
	config = EngineConfig.from_environment()
	run_search(repository, config)
	assert "[Executor] Submitted query" in capsys.readouterr().err
