"""
Criteria model.
An immutable description of one search request, validated once at construction.
Malformed input (unknown genre, rating outside 0-10, ...) raises InvalidCriteria here and never reaches the executor.
"""

from typing import Any, Dict, Optional, Union  # type annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator  # validation + immutability

from loguru import logger  # console logging

from .errors import InvalidCriteria  # boundary error
from .models import ContentKind, Genre  # enum-like fields


def _invalid(exc: ValidationError) -> InvalidCriteria:
	"""Turn a pydantic ValidationError into InvalidCriteria naming the offending fields."""
	errors = exc.errors()
	fields = [".".join(str(p) for p in err.get("loc", ())) or "criteria" for err in errors]
	messages = [f"{f}: {err.get('msg', 'invalid value')}" for f, err in zip(fields, errors)]
	return InvalidCriteria("Invalid search criteria | " + "; ".join(messages), details={"fields": fields})


class SearchCriteria(BaseModel):
	"""
	What the caller is looking for. Every field is optional; an absent field imposes no constraint.
	Instances are frozen: assigning to a field after construction raises.
	"""

	model_config = ConfigDict(frozen=True, extra="forbid")

	content_kind: Optional[ContentKind] = None  # None matches movies and series
	keywords: Optional[str] = None  # free text; whitespace-only becomes None
	genre: Optional[Genre] = None  # single genre filter
	min_year: Optional[int] = Field(default=None, ge=1, le=9999)  # inclusive lower bound
	max_year: Optional[int] = Field(default=None, ge=1, le=9999)  # inclusive upper bound
	min_rating: Optional[float] = Field(default=None, ge=0.0, le=10.0)  # rated records >= this
	max_rating: Optional[float] = Field(default=None, ge=0.0, le=10.0)  # rated records <= this

	def __init__(self, **data: Any):
		try:
			super().__init__(**data)
		except ValidationError as exc:
			error = _invalid(exc)
			logger.debug(f"[Criteria] Rejected criteria {data} -> {error}")
			raise error from exc

	@field_validator("content_kind", mode="before")
	@classmethod
	def resolve_kind(cls, value):
		return None if value is None else ContentKind.resolve(value)

	@field_validator("genre", mode="before")
	@classmethod
	def resolve_genre(cls, value):
		return None if value is None else Genre.resolve(value)

	@field_validator("keywords", mode="before")
	@classmethod
	def normalize_keywords(cls, value):
		if value is None:
			return None
		if not isinstance(value, str):
			raise ValueError("keywords must be a string")
		value = value.strip()  # surrounding whitespace never matters
		return value or None  # whitespace-only means "no keyword filter"

	@property
	def is_empty(self) -> bool:
		"""True when no field constrains the query (every record matches)."""
		return not self.model_dump(exclude_none=True)

	def with_changes(self, **changes: Any) -> "SearchCriteria":
		"""Return a new, re-validated criteria with some fields replaced."""
		data = self.model_dump()
		data.update(changes)
		return SearchCriteria(**data)

	def describe(self) -> Dict[str, Any]:
		"""Compact, log-friendly view of the present fields."""
		out: Dict[str, Any] = {}
		for key, value in self.model_dump(exclude_none=True).items():
			out[key] = value.value if hasattr(value, "value") else value
		return out


class CriteriaBuilder:
	"""
	Fluent builder for SearchCriteria.
	Collects fields, then build() validates them all at once and returns the frozen value.
	"""

	def __init__(self):
		self._fields: Dict[str, Any] = {}  # pending field values

	def kind(self, content_kind: Union[ContentKind, str, None]) -> "CriteriaBuilder":
		self._fields["content_kind"] = content_kind
		return self

	def keywords(self, text: Optional[str]) -> "CriteriaBuilder":
		self._fields["keywords"] = text
		return self

	def genre(self, genre: Union[Genre, str, None]) -> "CriteriaBuilder":
		self._fields["genre"] = genre
		return self

	def min_year(self, year: Optional[int]) -> "CriteriaBuilder":
		self._fields["min_year"] = year
		return self

	def max_year(self, year: Optional[int]) -> "CriteriaBuilder":
		self._fields["max_year"] = year
		return self

	def years(self, start: Optional[int], end: Optional[int]) -> "CriteriaBuilder":
		# Bounds are applied independently; an inverted range is allowed and matches nothing
		return self.min_year(start).max_year(end)

	def min_rating(self, rating: Optional[float]) -> "CriteriaBuilder":
		self._fields["min_rating"] = rating
		return self

	def max_rating(self, rating: Optional[float]) -> "CriteriaBuilder":
		self._fields["max_rating"] = rating
		return self

	def build(self) -> SearchCriteria:
		criteria = SearchCriteria(**self._fields)
		logger.debug(f"[Criteria] Built criteria {criteria.describe()}")
		return criteria
