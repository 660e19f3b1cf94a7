"""Simple in-memory store for commentary sessions with idle expiry."""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from models.session_models import CommentarySession

LOGGER = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 12
DEFAULT_TTL_SECONDS = 20 * 60
DEFAULT_SWEEP_INTERVAL_SECONDS = 60


class SessionStore:
	"""Keep the recently accepted commentary of each session.

	Map access is serialized by an internal lock so the periodic sweep never
	observes a half-updated registry. A request that reads the last text and
	later records a new one is not atomic: two concurrent requests on the same
	session may both pass the duplicate check before either records.
	"""

	def __init__(
		self,
		history_limit: int = DEFAULT_HISTORY_LIMIT,
		ttl_seconds: float = DEFAULT_TTL_SECONDS,
		clock: Callable[[], float] = time.time,
	) -> None:
		self.history_limit = history_limit
		self.ttl_seconds = ttl_seconds
		self._clock = clock
		self._sessions: Dict[str, CommentarySession] = {}
		self._lock = threading.Lock()
		self._sweep_task: Optional[asyncio.Task] = None

	def __len__(self) -> int:
		with self._lock:
			return len(self._sessions)

	def __contains__(self, session_id: str) -> bool:
		with self._lock:
			return session_id in self._sessions

	def get_or_create(self, session_id: str) -> CommentarySession:
		"""Return the session, creating it on first use, and refresh its activity time."""
		with self._lock:
			return self._touch(session_id)

	def recent_texts(self, session_id: str, limit: Optional[int] = None) -> List[str]:
		"""Return a copy of the most recent texts, oldest first."""
		with self._lock:
			state = self._sessions.get(session_id)
			if state is None:
				return []
			texts = state.texts[-limit:] if limit else state.texts
			return list(texts)

	def last_text(self, session_id: str) -> str:
		"""Return the most recently recorded text, or an empty string."""
		with self._lock:
			state = self._sessions.get(session_id)
			return state.last_text if state else ""

	def record(self, session_id: str, text: str) -> CommentarySession:
		"""Append a non-empty text, keeping only the newest `history_limit` entries."""
		with self._lock:
			state = self._touch(session_id)
			if text:
				state.texts.append(text)
				if len(state.texts) > self.history_limit:
					del state.texts[: len(state.texts) - self.history_limit]
			return state

	def sweep(self, now: Optional[float] = None) -> int:
		"""Drop every session idle for longer than the TTL and return how many were removed."""
		current = self._clock() if now is None else now
		with self._lock:
			expired = [
				session_id
				for session_id, state in self._sessions.items()
				if not state.updated_at or current - state.updated_at > self.ttl_seconds
			]
			for session_id in expired:
				del self._sessions[session_id]
		if expired:
			LOGGER.info("Evicted %d idle commentary session(s)", len(expired))
		return len(expired)

	async def run_periodic_sweep(self, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS) -> None:
		"""Repeatedly sweep idle sessions at the given interval until cancelled."""
		while True:
			try:
				await asyncio.sleep(interval_seconds)
				self.sweep()
			except asyncio.CancelledError:
				break
			except Exception:
				LOGGER.exception("Session sweep failed; retrying on the next tick")

	def start_sweeper(self, interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS) -> asyncio.Task:
		"""Schedule the periodic sweep on the running event loop."""
		if self._sweep_task is None or self._sweep_task.done():
			self._sweep_task = asyncio.get_running_loop().create_task(self.run_periodic_sweep(interval_seconds))
		return self._sweep_task

	async def stop_sweeper(self) -> None:
		"""Cancel the periodic sweep and wait for it to finish."""
		task, self._sweep_task = self._sweep_task, None
		if task is None:
			return
		task.cancel()
		try:
			await task
		except asyncio.CancelledError:
			pass

	def _touch(self, session_id: str) -> CommentarySession:
		state = self._sessions.get(session_id)
		if state is None:
			state = CommentarySession(session_id=session_id)
			self._sessions[session_id] = state
			LOGGER.debug("Created commentary session %s", session_id)
		state.updated_at = self._clock()
		return state
