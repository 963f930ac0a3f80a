"""
Error taxonomy for the catalog search engine.
Invalid criteria are rejected before a query exists; repository faults end a query as FAILED.
Cancellation is a normal outcome and has no exception type.
"""

from enum import Enum  # closed set of error classifications
from typing import Any, Dict, Optional  # type hints


class ErrorKind(Enum):
	"""Classification carried by a FAILED outcome (and by raised errors)."""
	INVALID_CRITERIA = "invalid_criteria"
	REPOSITORY_UNAVAILABLE = "repository_unavailable"
	INTERNAL = "internal"


class CatalogSearchError(Exception):
	"""Base exception for search engine errors."""

	error_kind = ErrorKind.INTERNAL  # default classification for subclasses

	def __init__(self, message: str, error_kind: Optional[ErrorKind] = None, details: Optional[Dict[str, Any]] = None):
		super().__init__(message)
		if error_kind is not None:
			self.error_kind = error_kind  # per-instance override
		self.details = details or {}

	def to_dict(self) -> Dict[str, Any]:
		"""Convert error to a plain dictionary for callers that render it."""
		return {
			"error_kind": self.error_kind.value,
			"message": str(self),
			"details": self.details,
		}


class InvalidCriteria(CatalogSearchError, ValueError):
	"""A criteria field (or sort mode) is unknown or outside its domain."""

	error_kind = ErrorKind.INVALID_CRITERIA


class RepositoryUnavailable(CatalogSearchError):
	"""The repository snapshot read failed."""

	error_kind = ErrorKind.REPOSITORY_UNAVAILABLE


def classify_error(error: BaseException) -> ErrorKind:
	"""Map any exception to the ErrorKind reported in a FAILED outcome."""
	if isinstance(error, CatalogSearchError):
		return error.error_kind
	return ErrorKind.INTERNAL
