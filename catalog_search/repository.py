"""
Content repository.
The search engine reads catalog content through ContentRepository.all_content() and never writes to it.
InMemoryContentRepository is the in-process implementation: a list of records guarded by a lock
so every read returns a consistent snapshot even while records are being added.
"""

import threading  # guards the record list
from typing import Dict, Iterable, Optional, Protocol, Sequence, Tuple, runtime_checkable

from loguru import logger

from .models import ContentKind, ContentRecord


@runtime_checkable
class ContentRepository(Protocol):
	"""What the engine needs from a content source: one snapshot read."""

	def all_content(self) -> Sequence[ContentRecord]:
		...


class InMemoryContentRepository:
	"""
	Holds movies and series in memory, in insertion order.
	all_content() returns an immutable tuple, so a snapshot can never change length mid-iteration.
	"""

	def __init__(self, records: Optional[Iterable[ContentRecord]] = None):
		self._lock = threading.Lock()  # serializes writers against snapshot reads
		self._records: list = []  # enumeration order == insertion order
		self._by_id: Dict[str, ContentRecord] = {}  # id -> record for lookups
		for record in records or ():
			self.add(record)
		logger.info(f"[Repository] Initialized with {len(self._records)} records")

	def add(self, record: ContentRecord) -> None:
		"""Add a record; a record whose id already exists replaces the stored one in place."""
		with self._lock:
			if record.id in self._by_id:
				idx = next(i for i, r in enumerate(self._records) if r.id == record.id)
				self._records[idx] = record
				logger.debug(f"[Repository] Replaced record {record.id!r}")
			else:
				self._records.append(record)
			self._by_id[record.id] = record

	def get(self, record_id: str) -> Optional[ContentRecord]:
		with self._lock:
			return self._by_id.get(str(record_id))

	def all_content(self) -> Tuple[ContentRecord, ...]:
		"""Snapshot of every record, movies and series, in insertion order."""
		with self._lock:
			return tuple(self._records)

	def by_kind(self, kind: ContentKind) -> Tuple[ContentRecord, ...]:
		return tuple(r for r in self.all_content() if r.kind is kind)

	def __len__(self) -> int:
		with self._lock:
			return len(self._records)
