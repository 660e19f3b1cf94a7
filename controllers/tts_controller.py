"""Forward speech requests to the VOICEVOX engine."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from services.voicevox.client import VoicevoxClient, VoicevoxError

LOGGER = logging.getLogger(__name__)


def _read_speaker(value: Any) -> int:
	"""Coerce a speaker id to int, treating anything unparsable as speaker 0."""
	if isinstance(value, bool):
		return int(value)
	try:
		return int(float(value))
	except (TypeError, ValueError, OverflowError):
		return 0


def _get_voicevox(request: Request) -> VoicevoxClient:
	return request.app.state.voicevox_client


def _error(status_code: int, error: str, detail: Any = None) -> JSONResponse:
	body = {"error": error}
	if detail is not None:
		body["detail"] = detail
	return JSONResponse(status_code=status_code, content=body)


async def synthesize_speech(request: Request, text: Any, speaker: Any = 0) -> Response:
	"""Return WAV audio for the text, or a JSON error body."""
	cleaned = str(text or "").strip()
	if not cleaned:
		return _error(400, "text is required")
	try:
		wav = await _get_voicevox(request).synthesize(cleaned, _read_speaker(speaker))
	except VoicevoxError as exc:
		return _error(502, exc.error, exc.detail)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		LOGGER.exception("VOICEVOX proxy failed")
		return _error(500, "server error", str(exc))
	return Response(content=wav, media_type="audio/wav")


async def list_speakers(request: Request) -> Any:
	"""Relay the VOICEVOX speaker list."""
	try:
		return await _get_voicevox(request).speakers()
	except VoicevoxError as exc:
		return _error(502, exc.error, exc.detail)
	except Exception as exc:  # pylint: disable=broad-exception-caught
		LOGGER.exception("VOICEVOX speaker listing failed")
		return _error(500, "server error", str(exc))
