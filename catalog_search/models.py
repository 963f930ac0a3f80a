"""
Data models for the Catalog Search Engine.
Defines the content record and the closed enumerations (kind, genre, sort mode) used throughout the system.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, __eq__, __hash__
# Enum gives us closed sets of values with readable names
from enum import Enum  # content kinds, genres, sort modes
# Import typing helpers for precise and self-documenting types
from typing import Dict, FrozenSet, Iterable, Optional, Union  # type annotations

# Fuzzy matching for small typos in genre names ("comdy" -> Comedy)
from rapidfuzz import process, fuzz  # fuzzy matching utilities

from .errors import InvalidCriteria  # raised for unknown enum-like input


class ContentKind(Enum):
	"""Whether a catalog entry is a movie or a series."""
	MOVIE = "movie"
	SERIES = "series"

	@classmethod
	def resolve(cls, value: Union["ContentKind", str]) -> "ContentKind":
		"""Accept an enum member or a loose string ("movies", "tv", ...) and return the member."""
		if isinstance(value, cls):  # already typed
			return value
		if not isinstance(value, str) or not value.strip():  # nothing to look up
			raise InvalidCriteria(f"Unknown content kind: {value!r}", details={"field": "content_kind"})
		kind = _KIND_ALIASES.get(value.strip().lower())  # alias lookup
		if kind is None:
			raise InvalidCriteria(f"Unknown content kind: {value!r}", details={"field": "content_kind"})
		return kind


# Accepted spellings for content kinds
_KIND_ALIASES: Dict[str, ContentKind] = {
	'movie': ContentKind.MOVIE,
	'movies': ContentKind.MOVIE,
	'film': ContentKind.MOVIE,
	'films': ContentKind.MOVIE,
	'series': ContentKind.SERIES,
	'show': ContentKind.SERIES,
	'shows': ContentKind.SERIES,
	'tv': ContentKind.SERIES,
}


class Genre(Enum):
	"""
	Genre tags a content record may carry.
	The member value is the display name shown to users (and searched by keywords).
	"""
	ACTION = "Action"
	COMEDY = "Comedy"
	DRAMA = "Drama"
	HORROR = "Horror"
	THRILLER = "Thriller"
	ROMANCE = "Romance"
	SCI_FI = "Science Fiction"
	FANTASY = "Fantasy"
	DOCUMENTARY = "Documentary"
	ANIMATION = "Animation"
	CRIME = "Crime"
	MYSTERY = "Mystery"
	ADVENTURE = "Adventure"
	BIOGRAPHY = "Biography"
	MUSICAL = "Musical"
	WESTERN = "Western"
	WAR = "War"
	FAMILY = "Family"
	SPORT = "Sport"
	HISTORY = "History"

	@property
	def display_name(self) -> str:
		return self.value

	@classmethod
	def resolve(cls, value: Union["Genre", str]) -> "Genre":
		"""
		Map free text to a Genre.
		Tries, in order: enum name ("SCI_FI"), display name / synonym ("sci-fi" -> Science Fiction),
		then a fuzzy match for small typos. Anything else raises InvalidCriteria.
		"""
		if isinstance(value, cls):  # already typed
			return value
		if not isinstance(value, str) or not value.strip():  # empty or wrong type
			raise InvalidCriteria(f"Unknown genre: {value!r}", details={"field": "genre"})

		text = value.strip()  # trim surrounding whitespace
		name = text.upper().replace('-', '_').replace(' ', '_')  # "sci fi" -> "SCI_FI"
		if name in cls.__members__:  # direct enum name hit
			return cls[name]

		lowered = text.lower()  # prepare for synonym lookup
		if lowered in GENRE_SYNONYMS:  # display names and common phrasings
			return GENRE_SYNONYMS[lowered]

		# Fuzzy fallback to handle small typos/variants
		match = process.extractOne(lowered, list(GENRE_SYNONYMS), scorer=fuzz.ratio, score_cutoff=88)
		if match:
			return GENRE_SYNONYMS[match[0]]
		raise InvalidCriteria(f"Unknown genre: {value!r}", details={"field": "genre"})


# Genre synonym mapping: common user phrasings -> single standard genre
GENRE_SYNONYMS: Dict[str, Genre] = {g.display_name.lower(): g for g in Genre}  # canonical display names
GENRE_SYNONYMS.update({
	'sci-fi': Genre.SCI_FI,  # map hyphenated to canonical
	'sci fi': Genre.SCI_FI,  # map spaced form
	'scifi': Genre.SCI_FI,  # common variant
	'science-fiction': Genre.SCI_FI,  # map with dash
	'funny': Genre.COMEDY,
	'romantic': Genre.ROMANCE,
	'animated': Genre.ANIMATION,
	'biographical': Genre.BIOGRAPHY,
	'biopic': Genre.BIOGRAPHY,
	'sports': Genre.SPORT,
	'historical': Genre.HISTORY,
	'scary': Genre.HORROR,
})


class SortMode(Enum):
	"""Result orderings offered to the caller. RELEVANCE keeps repository order."""
	RELEVANCE = "relevance"
	TITLE_ASC = "title_asc"
	TITLE_DESC = "title_desc"
	YEAR_NEWEST = "year_newest"
	YEAR_OLDEST = "year_oldest"
	RATING_HIGHEST = "rating_highest"
	RATING_LOWEST = "rating_lowest"

	@property
	def label(self) -> str:
		return _SORT_LABELS[self]

	@classmethod
	def parse(cls, value: Union["SortMode", str, None]) -> "SortMode":
		"""Accept a member, its value ("title_asc") or its label ("Title (A-Z)"); None means RELEVANCE."""
		if value is None:
			return cls.RELEVANCE
		if isinstance(value, cls):
			return value
		if isinstance(value, str):
			text = value.strip().lower()
			for mode in cls:
				if text in (mode.value, mode.label.lower()):
					return mode
		raise InvalidCriteria(f"Unknown sort mode: {value!r}", details={"field": "sort_mode"})


# Labels used by the catalog UI for each sort option
_SORT_LABELS: Dict[SortMode, str] = {
	SortMode.RELEVANCE: "Relevance",
	SortMode.TITLE_ASC: "Title (A-Z)",
	SortMode.TITLE_DESC: "Title (Z-A)",
	SortMode.YEAR_NEWEST: "Year (Newest First)",
	SortMode.YEAR_OLDEST: "Year (Oldest First)",
	SortMode.RATING_HIGHEST: "Rating (Highest First)",
	SortMode.RATING_LOWEST: "Rating (Lowest First)",
}


@dataclass(frozen=True)
class ContentRecord:
	"""
	Represents a single catalog entry (movie or series) and everything the search engine reads from it.
	Records are owned by the repository and never modified by the engine.
	"""
	id: str  # stable unique identifier
	title: str  # display title (non-empty)
	kind: ContentKind  # movie or series
	year: int = 0  # release year; 0 means unknown
	genres: FrozenSet[Genre] = field(default_factory=frozenset)  # genre tags, may be empty
	rating: Optional[float] = None  # 0-10 scale; None means "not rated", which is not the same as 0.0
	creator: Optional[str] = None  # director (movies) or creator (series), if known

	def __post_init__(self):
		# Normalize loose inputs so equality/hashing stay well defined
		if not self.id or not str(self.id).strip():
			raise ValueError("Content record id must be non-empty")
		if not self.title or not self.title.strip():
			raise ValueError(f"Content record {self.id!r} must have a non-empty title")
		object.__setattr__(self, 'id', str(self.id))  # ids compare as strings
		object.__setattr__(self, 'kind', ContentKind.resolve(self.kind))  # allow "movie"/"series"
		object.__setattr__(self, 'year', self._normalize_year(self.id, self.year))  # None -> 0 (unknown)
		object.__setattr__(self, 'genres', frozenset(Genre.resolve(g) for g in self._iter_genres(self.genres)))
		if self.rating is not None:
			rating = float(self.rating)
			if not 0.0 <= rating <= 10.0:
				raise ValueError(f"Content record {self.id!r} rating {rating} is outside [0, 10]")
			object.__setattr__(self, 'rating', rating)

	@staticmethod
	def _normalize_year(record_id: str, year) -> int:
		if year is None:
			return 0
		if isinstance(year, float):
			if not year.is_integer():
				raise ValueError(f"Content record {record_id!r} year {year} is not a whole number")
		year = int(year)  # numeric strings too
		if year < 0:
			raise ValueError(f"Content record {record_id!r} year {year} is negative")
		return year

	@staticmethod
	def _iter_genres(genres: Optional[Iterable[Union[Genre, str]]]) -> Iterable[Union[Genre, str]]:
		if genres is None:  # missing field
			return ()
		if isinstance(genres, (str, Genre)):  # single value passed instead of a collection
			return (genres,)
		return genres

	@property
	def has_known_year(self) -> bool:
		return self.year > 0

	@property
	def has_rating(self) -> bool:
		return self.rating is not None
