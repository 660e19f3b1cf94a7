"""FastAPI routes proxying the VOICEVOX text-to-speech engine."""

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from controllers.tts_controller import list_speakers, synthesize_speech

router = APIRouter(prefix="/api/tts/voicevox", tags=["tts"])


class SpeechPayload(BaseModel):
	text: Any = None
	speaker: Any = 0


@router.post("")
async def synthesize_route(request: Request, payload: SpeechPayload):
	return await synthesize_speech(request, payload.text, payload.speaker)


@router.get("/speakers")
async def speakers_route(request: Request):
	return await list_speakers(request)
