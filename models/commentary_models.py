"""Request, metadata, and decision models for the commentary endpoint."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import BaseModel

MIN_MAX_CHARS = 10
MAX_MAX_CHARS = 100
DEFAULT_MAX_CHARS = 40
UNSPECIFIED_FEATURES = "unspecified"


class CommentaryPayload(BaseModel):
    """Inbound JSON body. Fields are loosely typed and coerced, so bad shapes reach validation."""

    imageBase64: Any = None
    prevImageBase64: Any = None
    meta: Any = None
    sessionId: Any = None

    def to_request(self) -> "CommentaryRequest":
        return CommentaryRequest(
            image_base64=_as_text(self.imageBase64),
            prev_image_base64=_as_text(self.prevImageBase64),
            meta=dict(self.meta) if isinstance(self.meta, dict) else {},
            session_id=_as_text(self.sessionId),
        )


def _as_text(value: Any) -> str:
    return str(value) if value else ""


@dataclass
class CommentaryRequest:
    """One commentary call: two frames, free-form metadata, and an optional session id."""

    image_base64: str
    prev_image_base64: str
    meta: Dict[str, Any] = field(default_factory=dict)
    session_id: str = ""


def _read_max_chars(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return DEFAULT_MAX_CHARS
    if isinstance(value, int):
        return max(MIN_MAX_CHARS, min(MAX_MAX_CHARS, value))
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MAX_CHARS
    if not math.isfinite(parsed):
        return DEFAULT_MAX_CHARS
    return int(max(MIN_MAX_CHARS, min(MAX_MAX_CHARS, parsed)))


@dataclass(frozen=True)
class CommentaryMeta:
    """Typed view of the recognized metadata keys.

    Attributes:
        max_chars: Commentary length cap, clamped to [10, 100].
        enable_advantage: Whether the RED/BLUE advantage score is requested.
        red_features: Description of the entity labeled RED.
        blue_features: Description of the entity labeled BLUE.
        raw: The metadata exactly as received, echoed to the model for context.
    """

    max_chars: int = DEFAULT_MAX_CHARS
    enable_advantage: bool = False
    red_features: str = ""
    blue_features: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(cls, meta: Optional[Dict[str, Any]]) -> "CommentaryMeta":
        data = dict(meta) if isinstance(meta, dict) else {}
        return cls(
            max_chars=_read_max_chars(data.get("maxChars")),
            enable_advantage=bool(data.get("enableAdvantage")),
            red_features=str(data.get("redFeatures") or "").strip(),
            blue_features=str(data.get("blueFeatures") or "").strip(),
            raw=data,
        )


@dataclass(frozen=True)
class Advantage:
    """Two-sided RED/BLUE score; labels are fixed by the caller, never by screen position."""

    red: float
    blue: float
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"red": self.red, "blue": self.blue, "reason": self.reason}


@dataclass(frozen=True)
class CommentaryDecision:
    """Outcome of one commentary call. An empty commentary means nothing worth saying."""

    session_id: str
    commentary: str = ""
    topic: str = "Other"
    confidence: float = 0.0
    advantage: Optional[Advantage] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "sessionId": self.session_id,
            "commentary": self.commentary,
            "topic": self.topic,
            "confidence": self.confidence,
        }
        if self.advantage is not None:
            body["advantage"] = self.advantage.to_dict()
        return body
