"""Configuration and logging setup for the catalog search engine."""

import os
import sys
from dataclasses import dataclass

from loguru import logger

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class EngineConfig:
	"""Settings for a QueryExecutor."""

	max_workers: int = 4  # background worker threads shared by all sessions
	default_session: str = "default"  # session used when the caller does not name one
	log_level: str = "INFO"  # loguru level installed by apply_logging()
	thread_name_prefix: str = "catalog-search"  # worker thread names, handy in logs

	def validate(self) -> None:
		"""
		Validate configuration fields.

		Raises:
			ValueError: If a field is missing or invalid
		"""
		if self.max_workers <= 0:
			raise ValueError("max_workers must be positive")

		if not self.default_session:
			raise ValueError("default_session is required")

		if self.log_level.upper() not in _LOG_LEVELS:
			raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")

	def apply_logging(self, sink=None) -> int:
		"""Install a single loguru sink filtered at log_level. Returns the loguru handler id."""
		self.validate()
		return configure_logging(self.log_level, sink)

	@classmethod
	def from_environment(cls, apply_logging: bool = True) -> "EngineConfig":
		"""
		Load configuration from environment variables.

		Args:
			apply_logging: Also install CATALOG_SEARCH_LOG_LEVEL as the loguru level
		"""
		config = cls(
			max_workers=int(os.getenv("CATALOG_SEARCH_MAX_WORKERS", "4")),
			default_session=os.getenv("CATALOG_SEARCH_DEFAULT_SESSION", "default"),
			log_level=os.getenv("CATALOG_SEARCH_LOG_LEVEL", "INFO"),
		)
		config.validate()
		if apply_logging:
			config.apply_logging()
		return config


def configure_logging(level: str = "INFO", sink=None) -> int:
	"""Replace every loguru sink with one sink (stderr by default) at the given level."""
	logger.remove()
	handler_id = logger.add(sink if sink is not None else sys.stderr, level=level.upper())
	logger.debug(f"[Config] Logging configured at level {level.upper()}")
	return handler_id
