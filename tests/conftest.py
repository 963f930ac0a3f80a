"""
Shared fixtures: a small mixed catalog of movies and series, a repository over it, and an executor.
"""

import pytest

from catalog_search.config import EngineConfig
from catalog_search.models import ContentKind, ContentRecord, Genre
from catalog_search.repository import InMemoryContentRepository
from catalog_search.search_engine import QueryExecutor


@pytest.fixture
def catalog():
	return [
		ContentRecord("001", "Dune", ContentKind.MOVIE, 2021, {Genre.SCI_FI}, 8.0, "Denis Villeneuve"),
		ContentRecord("002", "Dune: Part Two", ContentKind.MOVIE, 2024, {Genre.SCI_FI}, 8.5, "Denis Villeneuve"),
		ContentRecord("003", "The Office", ContentKind.SERIES, 2005, {Genre.COMEDY}, 9.0, "Greg Daniels"),
		ContentRecord("004", "Amélie", ContentKind.MOVIE, 2001, {Genre.ROMANCE, Genre.COMEDY}, 8.3, "Jean-Pierre Jeunet"),
		ContentRecord("005", "Untitled Project", ContentKind.MOVIE, 0, {Genre.DRAMA}, None),
		ContentRecord("006", "Band of Brothers", ContentKind.SERIES, 2001, {Genre.WAR, Genre.DRAMA, Genre.HISTORY}, 9.4, "Steven Spielberg"),
		ContentRecord("007", "Arrival", ContentKind.MOVIE, 2016, {Genre.SCI_FI, Genre.DRAMA}, 7.9, "Denis Villeneuve"),
		ContentRecord("008", "Planet Earth", ContentKind.SERIES, 2006, {Genre.DOCUMENTARY}, None),
	]


@pytest.fixture
def repository(catalog):
	return InMemoryContentRepository(catalog)


@pytest.fixture
def executor(repository):
	engine = QueryExecutor(repository, EngineConfig(max_workers=2))
	yield engine
	engine.shutdown()
