"""
Ranking module.
Orders a filtered result set according to the selected sort mode.
Every mode except RELEVANCE is a total order: ties are broken by record id so repeated sorts agree.
"""

from typing import Callable, Dict, List, Sequence, Tuple

from loguru import logger

from .models import ContentRecord, SortMode


class Ranker:
	"""
	Sorts content records for a SortMode:
	- RELEVANCE: repository order, untouched
	- TITLE_ASC / TITLE_DESC: case-insensitive title
	- YEAR_NEWEST / YEAR_OLDEST: release year, unknown years always last
	- RATING_HIGHEST / RATING_LOWEST: rating, unrated records always last
	"""

	def __init__(self):
		# mode -> (primary key, descending?, "has key" test for records that sort last)
		self._strategies: Dict[SortMode, Tuple[Callable[[ContentRecord], object], bool, Callable[[ContentRecord], bool]]] = {
			SortMode.TITLE_ASC: (self._title_key, False, self._always),
			SortMode.TITLE_DESC: (self._title_key, True, self._always),
			SortMode.YEAR_NEWEST: (self._year_key, True, self._has_year),
			SortMode.YEAR_OLDEST: (self._year_key, False, self._has_year),
			SortMode.RATING_HIGHEST: (self._rating_key, True, self._has_rating),
			SortMode.RATING_LOWEST: (self._rating_key, False, self._has_rating),
		}

	def sort(self, records: Sequence[ContentRecord], mode: SortMode = SortMode.RELEVANCE) -> List[ContentRecord]:
		"""Return a new list ordered for the given mode; the input is not modified."""
		if mode is SortMode.RELEVANCE:
			return list(records)  # pass-through order

		key, descending, has_key = self._strategies[mode]

		# Id order first; Python's sort is stable (also with reverse=True), so equal keys keep it
		by_id = sorted(records, key=self._id_key)
		keyed = [r for r in by_id if has_key(r)]
		missing = [r for r in by_id if not has_key(r)]  # unknown year / absent rating: always last

		keyed.sort(key=key, reverse=descending)
		ordered = keyed + missing
		logger.debug(
			f"[Ranker] Sorted {len(ordered)} records by {mode.value} ({len(missing)} without sort key placed last)"
		)
		return ordered

	@staticmethod
	def _id_key(record: ContentRecord) -> str:
		return record.id

	@staticmethod
	def _title_key(record: ContentRecord) -> str:
		return record.title.casefold()

	@staticmethod
	def _year_key(record: ContentRecord) -> int:
		return record.year

	@staticmethod
	def _rating_key(record: ContentRecord) -> float:
		return record.rating

	@staticmethod
	def _always(record: ContentRecord) -> bool:
		return True

	@staticmethod
	def _has_year(record: ContentRecord) -> bool:
		return record.has_known_year

	@staticmethod
	def _has_rating(record: ContentRecord) -> bool:
		return record.has_rating
