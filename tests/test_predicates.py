"""
Unit tests for the predicate builder: each sub-check, unknown-year/absent-rating handling,
keyword scope (title, genre names, creator), and check-order independence.
Run: pytest tests/test_predicates.py
"""

import itertools

from catalog_search.criteria import CriteriaBuilder, SearchCriteria
from catalog_search.models import ContentKind, ContentRecord, Genre
from catalog_search.predicates import build_checks, build_predicate, combine


def matching_titles(criteria, records):
	matches = build_predicate(criteria)
	return [r.title for r in records if matches(r)]


def test_empty_criteria_matches_everything(catalog):
	assert build_checks(SearchCriteria()) == []
	assert matching_titles(SearchCriteria(), catalog) == [r.title for r in catalog]


def test_checks_follow_fixed_order():
	criteria = SearchCriteria(
		keywords="x", min_rating=1, max_year=2020, genre="drama", content_kind="movie",
	)
	assert [name for name, _ in build_checks(criteria)] == ["kind", "genre", "year", "rating", "keyword"]


def test_kind_and_genre(catalog):
	criteria = CriteriaBuilder().kind(ContentKind.SERIES).genre(Genre.DRAMA).build()
	assert matching_titles(criteria, catalog) == ["Band of Brothers"]


def test_series_comedy_against_movies_only_is_empty(catalog):
	movies = [r for r in catalog if r.kind is ContentKind.MOVIE]
	criteria = CriteriaBuilder().kind("series").genre("Comedy").build()
	assert matching_titles(criteria, movies) == []


def test_unknown_year_fails_any_present_bound(catalog):
	untitled = next(r for r in catalog if r.title == "Untitled Project")
	for criteria in (
		CriteriaBuilder().years(2000, 2010).build(),
		CriteriaBuilder().min_year(1900).build(),
		CriteriaBuilder().max_year(3000).build(),
	):
		assert build_predicate(criteria)(untitled) is False


def test_year_range_is_inclusive(catalog):
	criteria = CriteriaBuilder().years(2001, 2005).build()
	assert matching_titles(criteria, catalog) == ["The Office", "Amélie", "Band of Brothers"]


def test_inverted_year_range_matches_nothing(catalog):
	criteria = CriteriaBuilder().years(2010, 2000).build()
	assert matching_titles(criteria, catalog) == []


def test_rating_bounds_skip_unrated_records(catalog):
	assert matching_titles(SearchCriteria(min_rating=0.0), catalog) == [
		"Dune", "Dune: Part Two", "The Office", "Amélie", "Band of Brothers", "Arrival",
	]
	assert matching_titles(SearchCriteria(min_rating=8.5), catalog) == ["Dune: Part Two", "The Office", "Band of Brothers"]
	assert matching_titles(SearchCriteria(min_rating=8.0, max_rating=8.3), catalog) == ["Dune", "Amélie"]


def test_keyword_matches_title_substring_case_insensitively(catalog):
	assert matching_titles(SearchCriteria(keywords="DUNE"), catalog) == ["Dune", "Dune: Part Two"]
	assert matching_titles(SearchCriteria(keywords="rriv"), catalog) == ["Arrival"]


def test_keyword_matches_genre_display_name_and_creator(catalog):
	assert matching_titles(SearchCriteria(keywords="science fic"), catalog) == ["Dune", "Dune: Part Two", "Arrival"]
	assert matching_titles(SearchCriteria(keywords="spielberg"), catalog) == ["Band of Brothers"]
	assert matching_titles(SearchCriteria(keywords="villeneuve"), catalog) == ["Dune", "Dune: Part Two", "Arrival"]


def test_keyword_is_substring_not_token_based(catalog):
	# "e off" spans a word boundary in "The Office"
	assert matching_titles(SearchCriteria(keywords="e off"), catalog) == ["The Office"]


def test_keyword_uses_unicode_case_folding():
	record = ContentRecord("x1", "Straße der Erinnerung", ContentKind.MOVIE, 1999)
	assert build_predicate(SearchCriteria(keywords="STRASSE"))(record)
	assert build_predicate(SearchCriteria(keywords="AMÉLIE"))(
		ContentRecord("x2", "amélie", ContentKind.MOVIE)
	)


def test_predicate_is_idempotent(catalog):
	matches = build_predicate(SearchCriteria(keywords="dune", min_rating=8.2))
	first = [matches(r) for r in catalog]
	second = [matches(r) for r in catalog]
	assert first == second


def test_check_order_never_changes_result(catalog):
	criteria = SearchCriteria(
		content_kind="movie", genre="sci-fi", min_year=2015, max_year=2025, min_rating=7.0, keywords="villeneuve",
	)
	checks = build_checks(criteria)
	expected = [combine(checks)(r) for r in catalog]
	assert expected.count(True) == 3
	for order in itertools.permutations(checks):
		assert [combine(list(order))(r) for r in catalog] == expected
