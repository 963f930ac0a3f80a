"""
Query handles and outcomes.
A QueryHandle tracks one submitted search: its cancellation flag and a write-once outcome slot.
Exactly one terminal outcome (succeeded, failed or cancelled) is ever recorded per handle.
"""

import threading  # locks and events for cross-thread completion
from dataclasses import dataclass  # immutable outcome container
from enum import Enum  # lifecycle states
from typing import Callable, List, Optional, Sequence, Tuple  # type annotations

from loguru import logger  # console logging

from .criteria import SearchCriteria  # what the handle runs
from .errors import ErrorKind  # failure classification
from .models import ContentRecord, SortMode  # result record type and ordering


class QueryState(Enum):
	"""IDLE -> RUNNING -> {SUCCEEDED, FAILED, CANCELLED}. IDLE describes a session with nothing running."""
	IDLE = "idle"
	RUNNING = "running"
	SUCCEEDED = "succeeded"
	FAILED = "failed"
	CANCELLED = "cancelled"

	@property
	def is_terminal(self) -> bool:
		return self in (QueryState.SUCCEEDED, QueryState.FAILED, QueryState.CANCELLED)


@dataclass(frozen=True)
class QueryOutcome:
	"""The single terminal result of a query."""
	state: QueryState  # SUCCEEDED, FAILED or CANCELLED
	results: Tuple[ContentRecord, ...] = ()  # ordered matches (SUCCEEDED only, possibly empty)
	error_kind: Optional[ErrorKind] = None  # classification (FAILED only)
	error_message: Optional[str] = None  # human-readable detail (FAILED only)

	@classmethod
	def success(cls, results: Sequence[ContentRecord]) -> "QueryOutcome":
		return cls(state=QueryState.SUCCEEDED, results=tuple(results))

	@classmethod
	def failure(cls, error_kind: ErrorKind, message: str) -> "QueryOutcome":
		return cls(state=QueryState.FAILED, error_kind=error_kind, error_message=message)

	@classmethod
	def cancellation(cls) -> "QueryOutcome":
		return cls(state=QueryState.CANCELLED)

	@property
	def count(self) -> int:
		return len(self.results)

	@property
	def succeeded(self) -> bool:
		return self.state is QueryState.SUCCEEDED

	@property
	def failed(self) -> bool:
		return self.state is QueryState.FAILED

	@property
	def cancelled(self) -> bool:
		return self.state is QueryState.CANCELLED


DoneCallback = Callable[["QueryHandle"], None]  # called with the finished handle


class QueryHandle:
	"""
	One in-flight or completed search.
	Created RUNNING by QueryExecutor.submit(); callers observe the outcome through
	add_done_callback() or wait(). Callbacks run while the handle's lock is held, so once
	a superseding cancel() returns, this handle's delivery has fully finished. Handles of one
	session share that lock, so their deliveries never overlap.
	"""

	def __init__(
		self,
		query_id: int,
		session: str,
		criteria: SearchCriteria,
		sort_mode: SortMode,
		lock=None,  # shared per-session RLock; a private one when omitted
	):
		self.query_id = query_id  # executor-unique identity
		self.session = session  # logical caller context
		self.criteria = criteria  # frozen, safe to share with the worker
		self.sort_mode = sort_mode  # ordering applied to results
		self._lock = lock or threading.RLock()  # re-entrant: callbacks may cancel/inspect or resubmit
		self._cancel_requested = threading.Event()  # cooperative cancellation flag
		self._done = threading.Event()  # set once an outcome is recorded
		self._outcome: Optional[QueryOutcome] = None  # write-once slot
		self._callbacks: List[DoneCallback] = []  # pending completion callbacks

	def __repr__(self) -> str:
		return f"QueryHandle(id={self.query_id}, session={self.session!r}, state={self.state.value})"

	@property
	def state(self) -> QueryState:
		outcome = self._outcome
		return outcome.state if outcome is not None else QueryState.RUNNING

	@property
	def outcome(self) -> Optional[QueryOutcome]:
		return self._outcome

	@property
	def done(self) -> bool:
		return self._done.is_set()

	@property
	def is_cancelled(self) -> bool:
		"""True once cancellation was requested; the worker checks this between phases."""
		return self._cancel_requested.is_set()

	def add_done_callback(self, fn: DoneCallback) -> None:
		"""Register fn(handle); runs immediately if the handle is already terminal."""
		with self._lock:
			if self._outcome is None:
				self._callbacks.append(fn)
				return
			self._invoke(fn)

	def wait(self, timeout: Optional[float] = None) -> QueryOutcome:
		"""Block until the outcome is recorded. Raises TimeoutError if it is not within timeout seconds."""
		if not self._done.wait(timeout):
			raise TimeoutError(f"Query {self.query_id} did not finish within {timeout}s")
		return self._outcome

	def _request_cancel(self) -> bool:
		"""Set the flag and record CANCELLED. False if the handle was already terminal."""
		self._cancel_requested.set()
		return self._complete(QueryOutcome.cancellation())

	def _complete(self, outcome: QueryOutcome) -> bool:
		"""Record the outcome once and notify callbacks. Later attempts are ignored and return False."""
		with self._lock:
			if self._outcome is not None:
				return False
			self._outcome = outcome
			self._done.set()
			callbacks, self._callbacks = self._callbacks, []
			for fn in callbacks:
				self._invoke(fn)
			return True

	def _invoke(self, fn: DoneCallback) -> None:
		try:
			fn(self)
		except Exception:
			# A faulty callback must not change the recorded outcome or starve the others
			logger.exception(f"[Executor] Done callback for query {self.query_id} raised")
