"""Decide what, if anything, to say about the change between two frames."""

from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Dict, Optional, Protocol

from models.commentary_models import Advantage, CommentaryDecision, CommentaryMeta, CommentaryRequest
from services.commentary.prompts import build_commentary_prompt
from services.commentary.response_extractor import extract_json_object
from services.commentary.session_store import SessionStore
from services.commentary.text_normalizer import is_repetition
from utils.errors import UpstreamError
from utils.media_validation import ensure_frames_present, ensure_frames_within_limit, strip_data_url_prefix
from utils.settings import AppSettings

LOGGER = logging.getLogger(__name__)

DEFAULT_TOPIC = "Other"
MAX_TOPIC_CHARS = 20
MAX_REASON_CHARS = 80


class ModelGateway(Protocol):
    async def generate(self, prompt: str, prev_b64: str, cur_b64: str) -> str:
        ...


def clamp(value: Any, low: float, high: float) -> float:
    """Clamp a numeric value into [low, high]; anything non-numeric becomes `low`."""
    if isinstance(value, bool):
        return low
    if isinstance(value, int):
        # Exact comparison; float() overflows on very large JSON integers.
        return float(max(low, min(high, value)))
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return low
    if not math.isfinite(number):
        return low
    return max(low, min(high, number))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def read_advantage(parsed: Dict[str, Any]) -> Optional[Advantage]:
    """Return the clamped advantage, or None unless the object carries a numeric red score."""
    raw = parsed.get("advantage")
    if not isinstance(raw, dict) or not _is_number(raw.get("red")):
        return None
    red = clamp(raw["red"], 0.0, 1.0)
    blue = clamp(raw["blue"], 0.0, 1.0) if _is_number(raw.get("blue")) else 1.0 - red
    return Advantage(red=red, blue=blue, reason=str(raw.get("reason") or "")[:MAX_REASON_CHARS])


class CommentaryDecider:
    """Coordinate prompt, model call, parsing and repetition control for one request."""

    def __init__(self, store: SessionStore, gateway: ModelGateway, settings: Optional[AppSettings] = None) -> None:
        self.store = store
        self.gateway = gateway
        self.settings = settings or AppSettings()

    async def decide(self, request: CommentaryRequest) -> CommentaryDecision:
        """Run the full pipeline for one previous/current frame pair.

        Raises:
            InvalidInput: Either frame is missing.
            PayloadTooLarge: Either frame exceeds the size ceiling.
            UpstreamError: The model gateway failed; session memory is untouched.
        """
        session_id = str(request.session_id or "").strip() or str(uuid.uuid4())

        cur_b64 = strip_data_url_prefix(request.image_base64)
        prev_b64 = strip_data_url_prefix(request.prev_image_base64)
        ensure_frames_present(prev_b64, cur_b64, session_id)
        ensure_frames_within_limit(prev_b64, cur_b64, self.settings.max_image_bytes, session_id)

        meta = CommentaryMeta.from_raw(request.meta)
        self.store.get_or_create(session_id)
        prompt = build_commentary_prompt(
            meta,
            self.store.recent_texts(session_id),
            history_limit=self.settings.prompt_history_limit,
        )

        try:
            raw = await self.gateway.generate(prompt, prev_b64, cur_b64)
        except UpstreamError as exc:
            exc.session_id = exc.session_id or session_id
            raise

        decision = self._read_decision(session_id, meta, raw)
        if decision.commentary:
            self.store.record(session_id, decision.commentary)
        return decision

    def _read_decision(self, session_id: str, meta: CommentaryMeta, raw: str) -> CommentaryDecision:
        parsed = extract_json_object(raw) or {}

        commentary = str(parsed.get("commentary") or "").strip()
        topic = str(parsed.get("topic") or DEFAULT_TOPIC)[:MAX_TOPIC_CHARS]
        confidence = clamp(parsed.get("confidence"), 0.0, 1.0)
        advantage = read_advantage(parsed) if meta.enable_advantage else None

        if is_repetition(commentary, self.store.last_text(session_id)):
            LOGGER.debug("Suppressed repeated commentary for session %s: %s", session_id, commentary)
            commentary = ""

        return CommentaryDecision(
            session_id=session_id,
            commentary=commentary,
            topic=topic,
            confidence=confidence,
            advantage=advantage,
        )
