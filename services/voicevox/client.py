"""
VOICEVOX proxy client

Thin async wrapper that forwards text to a locally running VOICEVOX engine
(/audio_query then /synthesis) and relays its speaker list.
"""

import logging
from typing import Any, Optional

import httpx

LOGGER = logging.getLogger(__name__)


class VoicevoxError(Exception):
    """Raised when the VOICEVOX engine rejects a request or cannot be reached."""

    def __init__(self, error: str, detail: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.detail = detail
        self.status_code = status_code


class VoicevoxClient:
    """
    Async client for a VOICEVOX engine.

    Usage:
        client = VoicevoxClient(httpx.AsyncClient(), "http://127.0.0.1:50021")
        wav = await client.synthesize("こんにちは", speaker=1)
    """

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def synthesize(self, text: str, speaker: int = 0) -> bytes:
        """
        Return WAV bytes for the text.

        Raises:
            VoicevoxError: If either engine step fails.
        """
        query = await self._request(
            "POST",
            "/audio_query",
            "VOICEVOX audio_query failed",
            params={"text": text, "speaker": speaker},
        )
        audio = await self._request(
            "POST",
            "/synthesis",
            "VOICEVOX synthesis failed",
            params={"speaker": speaker},
            json=query.json(),
        )
        return audio.content

    async def speakers(self) -> Any:
        """Return the engine's speaker list as decoded JSON."""
        response = await self._request("GET", "/speakers", "VOICEVOX speakers failed")
        return response.json()

    async def _request(self, method: str, path: str, error: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.http_client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.HTTPError as exc:
            LOGGER.error("%s: %s", error, exc)
            raise VoicevoxError(error, detail=str(exc)) from exc
        if response.is_error:
            LOGGER.warning("%s (%s): %s", error, response.status_code, response.text[:200])
            raise VoicevoxError(error, detail=response.text, status_code=response.status_code)
        return response
