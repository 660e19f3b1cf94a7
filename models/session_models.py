"""Session domain models for commentary continuity."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class CommentarySession:
	"""In-memory record of what a client session has already been told."""

	session_id: str
	texts: List[str] = field(default_factory=list)
	updated_at: float = field(default_factory=lambda: time.time())

	@property
	def last_text(self) -> str:
		return self.texts[-1] if self.texts else ""
