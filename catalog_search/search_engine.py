"""
Search engine module.
Runs criteria + sort against a repository snapshot on background workers and delivers one outcome per query.
Each session has at most one running query: submitting a new one cancels the previous one.
"""

import itertools  # query id sequence
import threading  # guards the session -> handle slots
import time  # per-query latency for logs
from concurrent.futures import ThreadPoolExecutor  # one pool task per query
from typing import Dict, List, Optional, Sequence, Tuple  # type annotations

# Import project modules for data structures and components
from .config import EngineConfig  # worker count, default session
from .criteria import SearchCriteria  # immutable query description
from .errors import CatalogSearchError, ErrorKind, RepositoryUnavailable, classify_error  # failure taxonomy
from .models import ContentRecord, SortMode  # records and ordering
from .predicates import build_predicate  # criteria -> predicate
from .query_handle import DoneCallback, QueryHandle, QueryOutcome, QueryState  # per-query state
from .ranking import Ranker  # sort strategies
from .repository import ContentRepository  # read-only content source

# Import loguru for console logging
from loguru import logger  # simple structured logger


def unique_by_id(records: Sequence[ContentRecord]) -> Tuple[List[ContentRecord], int]:
	"""Drop records whose id was already seen, keeping the first occurrence. Returns (records, dropped)."""
	seen = set()  # ids already emitted
	unique: List[ContentRecord] = []  # first occurrences in enumeration order
	for record in records:
		if record.id in seen:
			continue
		seen.add(record.id)
		unique.append(record)
	return unique, len(records) - len(unique)


class QueryExecutor:
	"""
	High-level search API: submit criteria, get a QueryHandle back immediately.
	The repository is injected at construction; the engine only ever calls repository.all_content().
	"""

	def __init__(
		self,
		repository: ContentRepository,  # content source, read-only from here
		config: Optional[EngineConfig] = None,  # worker/session settings
		ranker: Optional[Ranker] = None,  # sort strategies
	):
		if not isinstance(repository, ContentRepository):
			raise TypeError(f"repository must provide all_content(), got {type(repository).__name__}")
		self.config = config or EngineConfig()  # defaults when not configured
		self.config.validate()  # fail fast on bad settings
		self.repository = repository  # keep reference for snapshots
		self.ranker = ranker or Ranker()  # ranker instance
		self._pool = ThreadPoolExecutor(
			max_workers=self.config.max_workers,
			thread_name_prefix=self.config.thread_name_prefix,
		)
		self._lock = threading.Lock()  # protects _running, _session_locks, _ids and _closed
		self._running: Dict[str, QueryHandle] = {}  # session -> its single running handle
		self._session_locks: Dict[str, "threading.RLock"] = {}  # session -> submit/delivery lock
		self._ids = itertools.count(1)  # query id sequence
		self._closed = False  # set by shutdown()
		logger.info(f"[Executor] Ready with {self.config.max_workers} workers")

	def __enter__(self) -> "QueryExecutor":
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		self.shutdown()

	def submit(
		self,
		criteria: SearchCriteria,
		sort_mode: SortMode = SortMode.RELEVANCE,
		session: Optional[str] = None,
		on_complete: Optional[DoneCallback] = None,
	) -> QueryHandle:
		"""
		Start a query in the background and return its handle without waiting.
		A query still running for the same session is cancelled first; its outcome is fully
		delivered before this one can start, so its results never arrive after the new query's.
		"""
		if not isinstance(criteria, SearchCriteria):
			raise TypeError(f"criteria must be a SearchCriteria, got {type(criteria).__name__}")
		sort_mode = SortMode.parse(sort_mode)  # accepts labels too; raises InvalidCriteria
		session = session or self.config.default_session

		# Same-session submits are serialized from the slot swap until the new query is scheduled,
		# so the previous query is always cancelled before its successor can run
		session_lock = self._session_lock(session)
		with session_lock:
			with self._lock:
				if self._closed:
					raise RuntimeError("QueryExecutor has been shut down")
				handle = QueryHandle(next(self._ids), session, criteria, sort_mode, lock=session_lock)
				previous = self._running.get(session)  # swap the session slot atomically
				self._running[session] = handle

			if on_complete is not None:
				handle.add_done_callback(on_complete)

			# Cancel outside the executor lock: the previous handle's callbacks may call back into it
			if previous is not None and previous._request_cancel():
				logger.debug(f"[Executor] Query {previous.query_id} superseded by {handle.query_id} (session={session!r})")

			logger.debug(
				f"[Executor] Submitted query {handle.query_id} | session={session!r} | sort={sort_mode.value} | criteria={criteria.describe()}"
			)
			try:
				self._pool.submit(self._execute, handle)
			except RuntimeError:
				# shutdown() raced with this submit
				handle._request_cancel()
				self._release(handle)
				raise
		return handle

	def cancel(self, handle: QueryHandle) -> bool:
		"""Explicitly cancel a handle. True if this call moved it to CANCELLED."""
		cancelled = handle._request_cancel()
		if cancelled:
			logger.debug(f"[Executor] Query {handle.query_id} cancelled by caller")
		self._release(handle)
		return cancelled

	def current(self, session: Optional[str] = None) -> Optional[QueryHandle]:
		"""The running handle for a session, or None when the session is idle."""
		with self._lock:
			handle = self._running.get(session or self.config.default_session)
		if handle is None or handle.state.is_terminal:
			return None
		return handle

	def session_state(self, session: Optional[str] = None) -> QueryState:
		handle = self.current(session)
		return QueryState.IDLE if handle is None else handle.state

	def search(
		self,
		criteria: SearchCriteria,
		sort_mode: SortMode = SortMode.RELEVANCE,
		session: Optional[str] = None,
		timeout: Optional[float] = None,
	) -> QueryOutcome:
		"""Submit and wait for the outcome (convenience for callers that can block)."""
		return self.submit(criteria, sort_mode, session).wait(timeout)

	def shutdown(self, wait: bool = True) -> None:
		"""Cancel every running query and stop the worker pool. Further submits raise RuntimeError."""
		with self._lock:
			if self._closed:
				return
			self._closed = True
			running = list(self._running.values())
			self._running.clear()
		for handle in running:
			handle._request_cancel()
		self._pool.shutdown(wait=wait)
		logger.info(f"[Executor] Shut down ({len(running)} running queries cancelled)")

	def _session_lock(self, session: str):
		"""The lock shared by a session's submits and its handles' deliveries, created on first use."""
		with self._lock:
			return self._session_locks.setdefault(session, threading.RLock())

	def _release(self, handle: QueryHandle) -> None:
		"""Free the session slot if it still points at this handle."""
		with self._lock:
			if self._running.get(handle.session) is handle:
				del self._running[handle.session]

	def _snapshot(self) -> Tuple[ContentRecord, ...]:
		"""Read a consistent snapshot; any repository fault becomes RepositoryUnavailable."""
		try:
			return tuple(self.repository.all_content())  # materialize: length cannot change later
		except CatalogSearchError:
			raise
		except Exception as e:
			raise RepositoryUnavailable(f"Content repository read failed: {e}", details={"cause": type(e).__name__}) from e

	def _execute(self, handle: QueryHandle) -> None:
		"""Worker body: snapshot -> dedupe -> filter -> sort, checking cancellation between phases."""
		start = time.perf_counter()  # start timer
		try:
			if handle.is_cancelled:  # superseded before a worker picked it up
				return

			snapshot = self._snapshot()
			records, dropped = unique_by_id(snapshot)
			logger.debug(f"[Executor] Query {handle.query_id} snapshot: {len(snapshot)} records ({dropped} duplicate ids dropped)")

			matches = build_predicate(handle.criteria)  # pure predicate
			matched = [r for r in records if matches(r)]  # filter phase
			logger.debug(f"[Executor] Query {handle.query_id} filter kept {len(matched)} of {len(records)}")
			if handle.is_cancelled:
				return

			ordered = self.ranker.sort(matched, handle.sort_mode)  # sort phase
			if handle.is_cancelled:
				return

			if handle._complete(QueryOutcome.success(ordered)):
				elapsed_ms = (time.perf_counter() - start) * 1000
				logger.info(
					f"[Executor] Query {handle.query_id} (session={handle.session!r}) returned {len(ordered)} results in {elapsed_ms:.2f} ms"
				)
		except Exception as e:
			kind = classify_error(e)
			if handle._complete(QueryOutcome.failure(kind, str(e))):
				if kind is ErrorKind.INTERNAL:
					logger.exception(f"[Executor] Query {handle.query_id} failed unexpectedly")
				else:
					logger.warning(f"[Executor] Query {handle.query_id} failed | kind={kind.value} | {e}")
		finally:
			if handle.state is QueryState.CANCELLED:
				logger.debug(f"[Executor] Query {handle.query_id} stopped after cancellation")
			self._release(handle)
