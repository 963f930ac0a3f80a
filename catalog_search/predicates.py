"""
Predicate builder.
Translates a SearchCriteria into a single pure predicate over content records.
Each present criteria field becomes one sub-check; the predicate is their logical AND.
"""

from typing import Callable, List, Tuple  # type annotations

from loguru import logger  # console logging

from .criteria import SearchCriteria  # immutable query description
from .models import ContentRecord  # record type checked by the predicate

Check = Callable[[ContentRecord], bool]  # one independent sub-check
NamedCheck = Tuple[str, Check]  # (name, check) so callers can inspect/reorder


def _kind_check(criteria: SearchCriteria) -> Check:
	kind = criteria.content_kind
	return lambda record: record.kind is kind


def _genre_check(criteria: SearchCriteria) -> Check:
	genre = criteria.genre
	return lambda record: genre in record.genres


def _year_check(criteria: SearchCriteria) -> Check:
	min_year, max_year = criteria.min_year, criteria.max_year

	def check(record: ContentRecord) -> bool:
		# An unknown year never satisfies a bound
		if not record.has_known_year:
			return False
		if min_year is not None and record.year < min_year:
			return False
		if max_year is not None and record.year > max_year:
			return False
		return True

	return check


def _rating_check(criteria: SearchCriteria) -> Check:
	min_rating, max_rating = criteria.min_rating, criteria.max_rating

	def check(record: ContentRecord) -> bool:
		# Absent rating is not zero: it fails any rating bound
		if record.rating is None:
			return False
		if min_rating is not None and record.rating < min_rating:
			return False
		if max_rating is not None and record.rating > max_rating:
			return False
		return True

	return check


def _keyword_check(criteria: SearchCriteria) -> Check:
	needle = criteria.keywords.casefold()  # fold once, not per record

	def check(record: ContentRecord) -> bool:
		# Substring (not token) match against title, genre display names and creator
		if needle in record.title.casefold():
			return True
		if any(needle in g.display_name.casefold() for g in record.genres):
			return True
		return bool(record.creator) and needle in record.creator.casefold()

	return check


def build_checks(criteria: SearchCriteria) -> List[NamedCheck]:
	"""
	Return the present sub-checks in evaluation order: kind, genre, year, rating, keyword.
	Cheap equality checks first, the string scan last.
	"""
	checks: List[NamedCheck] = []
	if criteria.content_kind is not None:
		checks.append(("kind", _kind_check(criteria)))
	if criteria.genre is not None:
		checks.append(("genre", _genre_check(criteria)))
	if criteria.min_year is not None or criteria.max_year is not None:
		checks.append(("year", _year_check(criteria)))
	if criteria.min_rating is not None or criteria.max_rating is not None:
		checks.append(("rating", _rating_check(criteria)))
	if criteria.keywords is not None:
		checks.append(("keyword", _keyword_check(criteria)))
	return checks


def combine(checks: List[NamedCheck]) -> Check:
	"""AND the given checks together; no checks means every record matches."""
	funcs = tuple(fn for _, fn in checks)  # frozen copy, nothing mutable is captured

	def matches(record: ContentRecord) -> bool:
		return all(fn(record) for fn in funcs)

	return matches


def build_predicate(criteria: SearchCriteria) -> Check:
	"""Build matches(record) -> bool for the given criteria. Never fails for a valid SearchCriteria."""
	checks = build_checks(criteria)
	logger.debug(f"[Predicate] Built predicate with checks {[name for name, _ in checks]} for {criteria.describe()}")
	return combine(checks)
